from typing import Optional

from .base_parser import BaseContentParser
from .pdf_parser import PDFParser
from .docx_parser import DOCXParser
from .pptx_parser import PPTXParser
from .image_parser import ImageParser


class ContentParserFactory:
    def __init__(self, max_file_size_mb: int = 50, render_dpi: int = 100, ocr_language: str = "eng"):
        parsers = [
            PDFParser(max_file_size_mb=max_file_size_mb, render_dpi=render_dpi),
            DOCXParser(max_file_size_mb=max_file_size_mb),
            PPTXParser(),
            ImageParser(language=ocr_language),
        ]
        self._parsers = {
            mime_type: parser
            for parser in parsers
            for mime_type in parser.supported_types
        }

    def get_parser(self, mime_type: str) -> Optional[BaseContentParser]:
        return self._parsers.get((mime_type or "").lower())

    def detect_parser(self, file_name: str) -> Optional[BaseContentParser]:
        for parser in self._parsers.values():
            if parser.supports_source(file_name):
                return parser
        return None

    def get_supported_types(self) -> list[str]:
        return list(self._parsers.keys())
