import asyncio
import uuid
from typing import Optional

import structlog

from ..exceptions import ExtractionError
from ..models.document import Document
from ..parsers.content_parser_factory import ContentParserFactory

logger = structlog.get_logger(__name__)


class ContentExtractor:
    """
    Turns an uploaded file into a Document.

    Dispatch is on the declared MIME type. Accepted formats without a text
    parser (legacy .doc, .ppt, .xls and .xlsx) yield a document with empty
    content rather than an error.
    """

    def __init__(self, parser_factory: Optional[ContentParserFactory] = None, timeout_seconds: float = 120.0):
        self.parser_factory = parser_factory or ContentParserFactory()
        self.timeout_seconds = timeout_seconds

    async def extract(self, file_path: str, mime_type: str, file_name: str) -> Document:
        parser = self.parser_factory.get_parser(mime_type) or self.parser_factory.detect_parser(file_name)

        if parser is None:
            logger.warning("no_text_extractor_for_type", file_name=file_name, mime_type=mime_type)
            return self._build_document(file_path, mime_type, file_name, content="")

        try:
            result = await asyncio.wait_for(parser.parse(file_path), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error("extraction_timed_out", file_name=file_name, timeout=self.timeout_seconds)
            raise ExtractionError(
                f"Extraction timed out after {self.timeout_seconds}s",
                details={"file_name": file_name}
            )

        if not result.success:
            logger.error("extraction_failed", file_name=file_name, mime_type=mime_type, error=result.error)
            raise ExtractionError(result.error, details={"file_name": file_name})

        document = self._build_document(
            file_path, mime_type, file_name,
            content=result.content,
            visual_elements=result.visual_elements
        )
        logger.info(
            "document_extracted",
            file_name=file_name,
            document_id=document.id,
            content_length=document.content_length,
            visual_elements=len(document.visual_elements)
        )
        return document

    def _build_document(self, file_path: str, mime_type: str, file_name: str,
                        content: str, visual_elements=None) -> Document:
        return Document(
            id=str(uuid.uuid4()),
            file_name=file_name,
            content=content or "",
            visual_elements=visual_elements or [],
            file_type=mime_type,
            file_path=file_path,
        )
