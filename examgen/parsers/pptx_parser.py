import asyncio
import os

import structlog
from pptx import Presentation

from .base_parser import BaseContentParser, ContentParseResult

logger = structlog.get_logger(__name__)

PPTX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


class PPTXParser(BaseContentParser):
    """Slide titles and shape text, one paragraph per slide."""

    async def parse(self, source: str, **kwargs) -> ContentParseResult:
        if not os.path.exists(source):
            return ContentParseResult("", error=f"PPTX file not found: {source}")

        try:
            slides = await asyncio.to_thread(self._read_slides, source)
        except Exception as e:
            return ContentParseResult("", error=f"Failed to parse PPTX: {str(e)}")

        content = "\n\n".join(text for text in slides if text)
        logger.info("pptx_parse_completed", file_name=os.path.basename(source), slide_count=len(slides))

        return ContentParseResult(
            content=content,
            title=os.path.splitext(os.path.basename(source))[0],
            metadata={
                "file_name": os.path.basename(source),
                "slide_count": len(slides),
                "source_type": "pptx",
                "content_length": len(content),
            }
        )

    def _read_slides(self, path: str) -> list[str]:
        presentation = Presentation(path)
        slides = []
        for slide in presentation.slides:
            texts = []
            title = slide.shapes.title
            if title is not None and title.text:
                texts.append(title.text.strip())
            for shape in slide.shapes:
                if title is not None and shape.shape_id == title.shape_id:
                    continue
                if getattr(shape, "has_text_frame", False) and shape.text_frame.text.strip():
                    texts.append(shape.text_frame.text.strip())
            slides.append("\n".join(texts))
        return slides

    def supports_source(self, source: str) -> bool:
        return source.lower().endswith(".pptx")

    @property
    def supported_types(self) -> list[str]:
        return [PPTX_MIME_TYPE]
