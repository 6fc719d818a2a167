from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from ...models.base import CamelModel
from ...models.document import DocumentSummary
from ...models.exam_paper import ExamConfig, ExamPaper
from ...models.question import GenerationRequirements, Question


class UploadResponse(CamelModel):
    session_id: str
    message: str
    content_length: int
    visual_elements_count: int

    class Config:
        json_schema_extra = {
            "example": {
                "sessionId": "3f2b8c1e-5d4a-4e7b-9c0f-1a2b3c4d5e6f",
                "message": "File uploaded and processed successfully",
                "contentLength": 5230,
                "visualElementsCount": 1
            }
        }


class UploadMultipleResponse(CamelModel):
    session_id: str
    message: str
    documents: List[DocumentSummary]
    total_documents: int
    total_content_length: int


class AddDocumentResponse(CamelModel):
    message: str
    document: DocumentSummary
    total_documents: int


class DocumentsResponse(CamelModel):
    session_id: str
    documents: List[DocumentSummary]
    total_documents: int
    total_content_length: int


class GenerateQuestionsRequest(CamelModel):
    session_id: str
    requirements: GenerationRequirements = Field(default_factory=GenerationRequirements)

    class Config:
        json_schema_extra = {
            "example": {
                "sessionId": "3f2b8c1e-5d4a-4e7b-9c0f-1a2b3c4d5e6f",
                "requirements": {
                    "questionCount": 6,
                    "bloomDistribution": "balanced",
                    "questionTypes": ["multiple-choice", "short-answer"],
                    "difficulty": "medium",
                    "useAI": False
                }
            }
        }


class GenerateQuestionsResponse(CamelModel):
    questions: List[Question]
    total_questions: int
    total_marks: int
    is_multi_document: bool
    document_count: int


class AIStatusResponse(CamelModel):
    available: bool
    message: str


class SampleGenerationRequest(CamelModel):
    content: Optional[str] = None
    requirements: GenerationRequirements = Field(default_factory=GenerationRequirements)


class SampleGenerationResponse(CamelModel):
    success: bool
    questions: List[Question]
    content_length: int
    content_preview: str


class ContentAnalysisResponse(CamelModel):
    content_length: int
    content_preview: str
    key_terms: List[Tuple[str, int]]
    total_words: int
    unique_words: int


class ExamPaperRequest(CamelModel):
    session_id: str
    questions: List[Question] = Field(default_factory=list)
    exam_config: Optional[ExamConfig] = None


class ExamPaperResponse(CamelModel):
    exam_paper: ExamPaper
    message: str
    is_multi_document: bool
    document_count: int


class ExportPdfRequest(CamelModel):
    # Validated inside the endpoint so a malformed paper still gets the export error body
    exam_paper: Optional[Dict[str, Any]] = None
