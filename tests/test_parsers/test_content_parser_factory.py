import pytest

from examgen.parsers.content_parser_factory import ContentParserFactory
from examgen.parsers.docx_parser import DOCXParser
from examgen.parsers.image_parser import ImageParser
from examgen.parsers.pdf_parser import PDFParser
from examgen.parsers.pptx_parser import PPTXParser


class TestContentParserFactory:
    @pytest.fixture(autouse=True)
    def setup_factory(self):
        self.factory = ContentParserFactory(max_file_size_mb=10, render_dpi=72, ocr_language="deu")

    def test_parser_by_mime_type(self):
        assert isinstance(self.factory.get_parser("application/pdf"), PDFParser)
        assert isinstance(
            self.factory.get_parser("application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
            DOCXParser
        )
        assert isinstance(
            self.factory.get_parser("application/vnd.openxmlformats-officedocument.presentationml.presentation"),
            PPTXParser
        )
        assert isinstance(self.factory.get_parser("IMAGE/PNG"), ImageParser)

    def test_legacy_office_types_have_no_parser(self):
        for mime_type in ("application/msword", "application/vnd.ms-powerpoint", "application/vnd.ms-excel"):
            assert self.factory.get_parser(mime_type) is None

    def test_detect_parser_by_file_name(self):
        assert isinstance(self.factory.detect_parser("chapter1.pdf"), PDFParser)
        assert isinstance(self.factory.detect_parser("photo.JPG"), ImageParser)
        assert self.factory.detect_parser("sheet.xlsx") is None

    def test_settings_are_passed_to_parsers(self):
        assert self.factory.get_parser("application/pdf").render_dpi == 72
        assert self.factory.get_parser("image/jpeg").language == "deu"

    def test_supported_types(self):
        supported = self.factory.get_supported_types()

        assert "application/pdf" in supported
        assert "image/png" in supported
        assert "application/msword" not in supported
