import asyncio
import os
import time
from typing import List, Optional

import fitz  # PyMuPDF
import structlog

from .base_parser import BaseContentParser, ContentParseResult
from ..exceptions import ExtractionError, ImageExtractionSkipped
from ..models.document import VisualElement
from ..utils.file_utils import validate_file_exists, validate_file_size, extract_filename, extract_title, page_image_path


logger = structlog.get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"


class PDFParser(BaseContentParser):
    """
    Text from every page plus a PNG of the first page.

    Text blocks are joined with blank lines so paragraph boundaries survive
    into section splitting.
    """

    def __init__(self, max_file_size_mb: int = 50, render_dpi: int = 100, render_first_page: bool = True):
        self.max_file_size_mb = max_file_size_mb
        self.render_dpi = render_dpi
        self.render_first_page = render_first_page

    async def parse(self, source: str, **kwargs) -> ContentParseResult:
        start_time = time.time()
        file_name = extract_filename(source)

        try:
            validate_file_exists(source)
            validate_file_size(source, self.max_file_size_mb)

            logger.info("pdf_parse_started", file_name=file_name)

            content, page_count = await asyncio.to_thread(self._extract_text, source)
            visual_elements = await self._extract_visuals(source) if self.render_first_page else []

            processing_time = time.time() - start_time
            logger.info(
                "pdf_parse_completed",
                file_name=file_name,
                page_count=page_count,
                content_length=len(content),
                processing_time=round(processing_time, 2)
            )

            return ContentParseResult(
                content=content,
                title=extract_title(source),
                metadata=self._build_metadata(source, content, page_count),
                visual_elements=visual_elements
            )

        except ExtractionError as e:
            logger.error("pdf_parse_failed", error=str(e), file_name=file_name)
            return ContentParseResult("", error=str(e))

    def _extract_text(self, file_path: str) -> tuple[str, int]:
        try:
            with fitz.open(file_path) as doc:
                pages = []
                for page in doc:
                    blocks = [
                        block[4].strip()
                        for block in page.get_text("blocks")
                        if block[6] == 0 and block[4].strip()
                    ]
                    if blocks:
                        pages.append("\n\n".join(blocks))
                return "\n\n".join(pages), doc.page_count
        except Exception as e:
            raise ExtractionError(f"Failed to extract text from PDF: {str(e)}")

    async def _extract_visuals(self, file_path: str) -> List[VisualElement]:
        try:
            image_path = await asyncio.to_thread(self._render_first_page, file_path)
        except ImageExtractionSkipped as e:
            logger.info("pdf_image_extraction_skipped", file_name=extract_filename(file_path), reason=str(e))
            return []

        if not image_path:
            return []
        return [VisualElement(type="image", path=image_path, description="Extracted from PDF")]

    def _render_first_page(self, file_path: str) -> Optional[str]:
        try:
            with fitz.open(file_path) as doc:
                if doc.page_count == 0:
                    return None
                zoom = self.render_dpi / 72
                pix = doc[0].get_pixmap(matrix=fitz.Matrix(zoom, zoom))
                output_path = page_image_path(file_path, 1)
                pix.save(output_path)
                return output_path
        except Exception as e:
            raise ImageExtractionSkipped(f"Page rasterization failed: {str(e)}")

    def _build_metadata(self, file_path: str, content: str, page_count: int) -> dict:
        return {
            "file_name": extract_filename(file_path),
            "file_size": os.path.getsize(file_path),
            "page_count": page_count,
            "title": extract_title(file_path),
            "source_type": "pdf",
            "content_length": len(content)
        }

    def supports_source(self, source: str) -> bool:
        return source.lower().endswith(".pdf")

    @property
    def supported_types(self) -> list[str]:
        return [PDF_MIME_TYPE]
