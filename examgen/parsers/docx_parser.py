import asyncio
import os
from typing import Dict, Any

import structlog
from docx import Document

from .base_parser import BaseContentParser, ContentParseResult

logger = structlog.get_logger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class DOCXParser(BaseContentParser):
    def __init__(self, max_file_size_mb: int = 50):
        self.max_file_size = max_file_size_mb * 1024 * 1024

    async def parse(self, source: str, **kwargs) -> ContentParseResult:
        try:
            if not os.path.exists(source):
                return ContentParseResult("", error=f"DOCX file not found: {source}")

            file_size = os.path.getsize(source)
            if file_size > self.max_file_size:
                return ContentParseResult(
                    "",
                    error=f"DOCX file too large: {file_size} bytes (max: {self.max_file_size})"
                )

            document = await asyncio.to_thread(Document, source)
            content = self._collect_text(document)

            if not content.strip():
                logger.warning("docx_no_text", file_name=os.path.basename(source))

            metadata = self._extract_metadata(document, source)

            return ContentParseResult(
                content=content.strip(),
                title=metadata.get("title"),
                metadata=metadata
            )

        except Exception as e:
            return ContentParseResult("", error=f"Failed to parse DOCX: {str(e)}")

    def _collect_text(self, document) -> str:
        content_parts = []
        for paragraph in document.paragraphs:
            text = paragraph.text.strip()
            if text:
                content_parts.append(text)

        for table in document.tables:
            for row in table.rows:
                for cell in row.cells:
                    text = cell.text.strip()
                    if text:
                        content_parts.append(text)

        return "\n\n".join(content_parts)

    def _extract_metadata(self, document, file_path: str) -> Dict[str, Any]:
        metadata = {
            "file_name": os.path.basename(file_path),
            "file_size": os.path.getsize(file_path),
            "paragraph_count": len(document.paragraphs),
            "table_count": len(document.tables),
            "source_type": "docx",
        }

        core_props = document.core_properties
        if core_props.title:
            metadata["title"] = core_props.title
        if core_props.author:
            metadata["author"] = core_props.author

        if "title" not in metadata:
            metadata["title"] = os.path.splitext(os.path.basename(file_path))[0]

        return metadata

    def supports_source(self, source: str) -> bool:
        return source.lower().endswith(".docx")

    @property
    def supported_types(self) -> list[str]:
        return [DOCX_MIME_TYPE]
