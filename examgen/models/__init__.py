from .bloom import BloomLevel, DistributionPolicy, BLOOM_LEVEL_INFO
from .question import (
    QuestionType,
    Difficulty,
    QuestionSource,
    Question,
    AIQuestion,
    GenerationRequirements,
)
from .document import Document, DocumentSummary, VisualElement
from .exam_paper import ExamConfig, ExamPart, ExamPaper, LevelSummary
from .session import Session

__all__ = [
    "BloomLevel", "DistributionPolicy", "BLOOM_LEVEL_INFO",
    "QuestionType", "Difficulty", "QuestionSource", "Question", "AIQuestion", "GenerationRequirements",
    "Document", "DocumentSummary", "VisualElement",
    "ExamConfig", "ExamPart", "ExamPaper", "LevelSummary",
    "Session",
]
