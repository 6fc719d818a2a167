from typing import Any, Dict, Optional


class ExamGenError(Exception):
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ExamGenError):
    pass


class UploadRejectedError(ValidationError):
    pass


class SessionNotFoundError(ExamGenError):
    def __init__(self, session_id: str):
        super().__init__(
            message="Session not found. Please upload a document first.",
            error_code="SESSION_NOT_FOUND",
            details={"session_id": session_id}
        )


class ParsingError(ExamGenError):
    pass


class ExtractionError(ParsingError):
    """Text extraction (PDF parse, OCR, office parse) failed for one document."""
    pass


class ImageExtractionSkipped(ParsingError):
    """
    Raised when page rasterization fails.

    Never fatal: the document is kept without visual elements.
    """
    pass


class ExternalServiceError(ExamGenError):
    pass


class LLMServiceError(ExternalServiceError):
    pass


class AIGenerationError(LLMServiceError):
    """
    Raised when the remote model call fails (network, auth, quota, timeout).

    The caller falls back to rule-based generation.
    """
    pass


class RenderingError(ExternalServiceError):
    """PDF rendering failed; the export endpoint falls back to HTML."""
    pass
