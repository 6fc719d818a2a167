import math
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from .base import CamelModel
from .bloom import BloomLevel, DistributionPolicy


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    SHORT_ANSWER = "short-answer"
    ESSAY = "essay"
    FILL_BLANK = "fill-blank"

    @property
    def marks_multiplier(self) -> float:
        return QUESTION_TYPE_MULTIPLIERS[self]

    @classmethod
    def coerce(cls, value: Any) -> Optional["QuestionType"]:
        """Accepts "multiple_choice", "Multiple-Choice" and friends; None when unrecognised."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower().replace("_", "-").replace(" ", "-")
        try:
            return cls(normalized)
        except ValueError:
            return None


QUESTION_TYPE_MULTIPLIERS = {
    QuestionType.MULTIPLE_CHOICE: 1.0,
    QuestionType.TRUE_FALSE: 0.5,
    QuestionType.SHORT_ANSWER: 1.5,
    QuestionType.ESSAY: 2.0,
    QuestionType.FILL_BLANK: 0.8,
}


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def multiplier(self) -> float:
        return DIFFICULTY_MULTIPLIERS[self]

    @classmethod
    def coerce(cls, value: Any) -> "Difficulty":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.MEDIUM


DIFFICULTY_MULTIPLIERS = {
    Difficulty.EASY: 0.8,
    Difficulty.MEDIUM: 1.0,
    Difficulty.HARD: 1.2,
}


class QuestionSource(str, Enum):
    AI = "ai"
    RULE_BASED = "rule_based"
    TEXT_FALLBACK = "text_fallback"


class Question(CamelModel):
    id: str
    type: QuestionType
    bloom_level: BloomLevel
    bloom_code: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    content: str
    options: List[str] = Field(default_factory=list)
    correct_answer: str = ""
    explanation: str = ""
    answer: str = ""
    marks: int = Field(..., gt=0)
    source: QuestionSource = QuestionSource.RULE_BASED

    @model_validator(mode="after")
    def fill_bloom_code(self) -> "Question":
        if not self.bloom_code:
            self.bloom_code = self.bloom_level.code
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "id": "Q1",
                "type": "multiple-choice",
                "bloomLevel": "REMEMBER",
                "bloomCode": "CO1",
                "difficulty": "medium",
                "content": "Which of the following terms is most frequently mentioned in the document: photosynthesis, light, energy, or glucose?",
                "options": [
                    "photosynthesis (primary concept)",
                    "light (related concept)",
                    "energy (alternative approach)",
                    "glucose (supporting element)"
                ],
                "correctAnswer": "photosynthesis (primary concept)",
                "explanation": "The chosen option aligns best with key terms found in the content, notably photosynthesis.",
                "answer": "photosynthesis (primary concept)",
                "marks": 2,
                "source": "rule_based"
            }
        }


class AIQuestion(CamelModel):
    """
    Raw question object as returned by the remote model.

    Every field is optional and loosely typed; the orchestrator normalizes it
    into a Question.
    """
    id: Optional[str] = None
    question: Optional[str] = None
    content: Optional[str] = None
    type: Optional[str] = None
    bloom_level: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    correct_answer: Optional[str] = None
    explanation: Optional[str] = None
    answer: Optional[str] = None
    marks: Optional[float] = None
    difficulty: Optional[str] = None

    class Config:
        extra = "ignore"

    @field_validator("options", mode="before")
    @classmethod
    def coerce_options(cls, value):
        if value is None:
            return []
        if isinstance(value, dict):
            return [str(v) for v in value.values()]
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value if v is not None]
        return []

    @field_validator("id", "question", "content", "type", "bloom_level",
                     "correct_answer", "explanation", "answer", "difficulty", mode="before")
    @classmethod
    def coerce_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float, bool)):
            return str(value)
        return None

    @field_validator("marks", mode="before")
    @classmethod
    def coerce_marks(cls, value):
        try:
            marks = float(value)
        except (TypeError, ValueError):
            return None
        return marks if math.isfinite(marks) else None


class GenerationRequirements(CamelModel):
    total_marks: int = 50
    question_count: int = Field(default=10, ge=1)
    bloom_distribution: DistributionPolicy = DistributionPolicy.BALANCED
    question_types: List[QuestionType] = Field(default_factory=lambda: [QuestionType.MULTIPLE_CHOICE])
    difficulty: Difficulty = Difficulty.MEDIUM
    use_ai: bool = Field(default=True, alias="useAI")
    course_outcomes: Optional[List[str]] = None

    @field_validator("bloom_distribution", mode="before")
    @classmethod
    def parse_distribution(cls, value):
        return DistributionPolicy.coerce(value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def parse_difficulty(cls, value):
        return Difficulty.coerce(value)

    @field_validator("question_types", mode="before")
    @classmethod
    def parse_question_types(cls, value):
        if value is None:
            return [QuestionType.MULTIPLE_CHOICE]
        if isinstance(value, str):
            value = [value]
        parsed = [QuestionType.coerce(v) for v in value]
        parsed = [v for v in parsed if v is not None]
        return parsed or [QuestionType.MULTIPLE_CHOICE]

    class Config:
        json_schema_extra = {
            "example": {
                "totalMarks": 50,
                "questionCount": 10,
                "bloomDistribution": "balanced",
                "questionTypes": ["multiple-choice", "short-answer"],
                "difficulty": "medium",
                "useAI": False,
                "courseOutcomes": ["CO1", "CO2"]
            }
        }
