import re

import pytest
from unittest.mock import patch

from examgen.exceptions import RenderingError
from examgen.models.bloom import BloomLevel
from examgen.models.question import QuestionType
from examgen.services.exam_paper_service import generate_exam_paper
from examgen.services.paper_exporter import PaperExporter, export_filename, option_label


class TestPaperExporter:
    @pytest.fixture(autouse=True)
    def setup_paper(self, make_question):
        questions = [
            make_question(id="Q1", content="Which gas do plants release?", options=["Oxygen", "Nitrogen"]),
            make_question(id="Q2", level=BloomLevel.UNDERSTAND, question_type=QuestionType.SHORT_ANSWER,
                          content="Explain the role of chlorophyll.", marks=5),
            make_question(id="Q3", level=BloomLevel.REMEMBER, question_type=QuestionType.SHORT_ANSWER,
                          content="Name the products of photosynthesis."),
            make_question(id="Q4", level=BloomLevel.APPLY, question_type=QuestionType.ESSAY,
                          content="Apply <photosynthesis> & respiration to farming.", marks=10),
            make_question(id="Q5", level=BloomLevel.CREATE, question_type=QuestionType.ESSAY,
                          content="Design a greenhouse experiment on light intensity.", marks=12),
        ]
        self.paper = generate_exam_paper(questions)
        self.exporter = PaperExporter(render_timeout_seconds=30)

    def test_html_layout(self):
        html = self.exporter.render_html(self.paper)

        assert "Kalasalingam Academy of Research and Education" in html
        assert "Max Marks: 50" in html
        assert "1.1" in html
        assert "1.3 Name the products of photosynthesis." in html
        assert "2.1 Apply" in html
        assert "2.2 Design a greenhouse experiment" in html
        assert "A. Oxygen" in html
        assert "B. Nitrogen" in html
        assert "[10 marks]" in html
        assert "Summary Table" in html
        assert "CO3" in html

    def test_html_escapes_question_text(self):
        html = self.exporter.render_html(self.paper)

        assert "&lt;photosynthesis&gt; &amp; respiration" in html
        assert "<photosynthesis>" not in html

    @pytest.mark.asyncio
    async def test_pdf_rendered(self):
        pdf = await self.exporter.render_pdf(self.paper)

        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 100

    @pytest.mark.asyncio
    async def test_tiny_output_rejected(self):
        with patch.object(PaperExporter, "_build_pdf", return_value=b"%PDF"):
            with pytest.raises(RenderingError):
                await self.exporter.render_pdf(self.paper)

    @pytest.mark.asyncio
    async def test_layout_failure_wrapped(self):
        with patch.object(PaperExporter, "_build_pdf", side_effect=ValueError("bad layout")):
            with pytest.raises(RenderingError) as exc_info:
                await self.exporter.render_pdf(self.paper)

        assert "bad layout" in exc_info.value.message

    def test_helpers(self):
        assert [option_label(i) for i in range(4)] == ["A", "B", "C", "D"]
        assert re.fullmatch(r"exam-paper-\d+\.pdf", export_filename("pdf"))
