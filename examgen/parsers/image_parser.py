import asyncio
import os

import pytesseract
import structlog
from PIL import Image

from .base_parser import BaseContentParser, ContentParseResult

logger = structlog.get_logger(__name__)


class ImageParser(BaseContentParser):
    """OCR through Tesseract."""

    def __init__(self, language: str = "eng"):
        self.language = language

    async def parse(self, source: str, **kwargs) -> ContentParseResult:
        file_name = os.path.basename(source)
        if not os.path.exists(source):
            return ContentParseResult("", error=f"Image file not found: {source}")

        try:
            text = await asyncio.to_thread(self._ocr, source)
        except Exception as e:
            logger.error("image_ocr_failed", file_name=file_name, error=str(e))
            return ContentParseResult("", error=f"OCR failed: {str(e)}")

        logger.info("image_ocr_completed", file_name=file_name, content_length=len(text))
        return ContentParseResult(
            content=text,
            title=os.path.splitext(file_name)[0],
            metadata={"file_name": file_name, "source_type": "image", "ocr_language": self.language}
        )

    def _ocr(self, path: str) -> str:
        with Image.open(path) as image:
            return pytesseract.image_to_string(image, lang=self.language).strip()

    def supports_source(self, source: str) -> bool:
        return source.lower().endswith((".png", ".jpg", ".jpeg"))

    @property
    def supported_types(self) -> list[str]:
        return ["image/jpeg", "image/png"]
