"""
Exam paper export.

HTML is rendered from a Jinja2 template. PDF is laid out with ReportLab on
A4 with 20 mm margins, following the same structure as the HTML: header,
exam info row, numbered questions per part, then the Bloom summary table on
a new page.
"""

import asyncio
import time
from io import BytesIO
from pathlib import Path
from typing import List
from xml.sax.saxutils import escape

import structlog
from jinja2 import Environment, FileSystemLoader, select_autoescape
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import KeepTogether, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..exceptions import RenderingError
from ..models.bloom import BloomLevel
from ..models.exam_paper import ExamPaper

logger = structlog.get_logger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
MIN_PDF_BYTES = 100
PAGE_MARGIN = 20 * mm


def option_label(index: int) -> str:
    return chr(ord("A") + index)


def level_name(level: str) -> str:
    try:
        return BloomLevel(level).display_name
    except ValueError:
        return level


def export_filename(extension: str) -> str:
    return f"exam-paper-{int(time.time() * 1000)}.{extension}"


def _styles():
    styles = getSampleStyleSheet()
    return {
        "institution": ParagraphStyle("Institution", parent=styles["Title"], fontName="Times-Bold",
                                      fontSize=18, leading=22, alignment=TA_CENTER, spaceAfter=6),
        "course": ParagraphStyle("Course", parent=styles["Normal"], fontName="Times-Roman",
                                 fontSize=14, leading=18, alignment=TA_CENTER),
        "info": ParagraphStyle("Info", parent=styles["Normal"], fontName="Times-Roman", fontSize=11),
        "section": ParagraphStyle("Section", parent=styles["Heading2"], fontName="Times-Bold",
                                  fontSize=16, leading=20, spaceBefore=12, spaceAfter=8),
        "question": ParagraphStyle("Question", parent=styles["Normal"], fontName="Times-Bold",
                                   fontSize=12, leading=16, spaceAfter=4),
        "option": ParagraphStyle("Option", parent=styles["Normal"], fontName="Times-Roman",
                                 fontSize=12, leading=15, leftIndent=20),
    }


class PaperExporter:
    def __init__(self, render_timeout_seconds: float = 60.0):
        self.render_timeout_seconds = render_timeout_seconds
        self.environment = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html"]),
        )
        self.environment.globals.update(option_label=option_label, level_name=level_name)

    def render_html(self, paper: ExamPaper) -> str:
        template = self.environment.get_template("exam_paper.html")
        return template.render(paper=paper)

    async def render_pdf(self, paper: ExamPaper) -> bytes:
        """
        PDF bytes for the paper.

        Raises RenderingError on layout failure, timeout, or output too small
        to be a valid document.
        """
        try:
            pdf = await asyncio.wait_for(
                asyncio.to_thread(self._build_pdf, paper),
                timeout=self.render_timeout_seconds
            )
        except asyncio.TimeoutError:
            raise RenderingError(f"PDF rendering timed out after {self.render_timeout_seconds}s")
        except RenderingError:
            raise
        except Exception as e:
            raise RenderingError(f"PDF rendering failed: {str(e)}")

        if len(pdf) < MIN_PDF_BYTES:
            raise RenderingError("Generated PDF is too small, may be invalid")

        logger.info("pdf_rendered", size_bytes=len(pdf))
        return pdf

    def _build_pdf(self, paper: ExamPaper) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title=f"{paper.header.institution_name} - Exam Paper",
        )
        doc.build(self._story(paper, doc.width))
        return buffer.getvalue()

    def _story(self, paper: ExamPaper, width: float) -> List:
        styles = _styles()
        header = paper.header
        story: List = [Paragraph(escape(header.institution_name), styles["institution"])]
        for line in (header.course_name, header.course_code, header.exam_session):
            story.append(Paragraph(escape(str(line)), styles["course"]))

        info = Table(
            [[Paragraph(escape(f"Duration: {header.duration}"), styles["info"]),
              Paragraph(escape(f"Date: {header.date}"), styles["info"]),
              Paragraph(escape(f"Max Marks: {header.max_marks}"), styles["info"])]],
            colWidths=[width / 3] * 3,
        )
        info.setStyle(TableStyle([("LINEABOVE", (0, 0), (-1, 0), 1.5, colors.black)]))
        story.extend([Spacer(1, 10), info, Spacer(1, 14)])

        for part_number, part in enumerate(paper.parts, start=1):
            story.append(Paragraph(escape(f"{part.name} {part.description}"), styles["section"]))
            for question_number, question in enumerate(part.questions, start=1):
                block = [Paragraph(
                    f"{part_number}.{question_number} {escape(question.content)} "
                    f"<font color='#666666'>[{question.marks} marks]</font>",
                    styles["question"],
                )]
                block.extend(
                    Paragraph(f"{option_label(i)}. {escape(option)}", styles["option"])
                    for i, option in enumerate(question.options)
                )
                block.append(Spacer(1, 8))
                story.append(KeepTogether(block))

        story.append(PageBreak())
        story.append(Paragraph("Summary Table", styles["section"]))
        story.append(self._summary_table(paper, width))
        return story

    def _summary_table(self, paper: ExamPaper, width: float) -> Table:
        rows = [["Bloom's Taxonomy Level", "Course Outcome", "Number of Questions", "Total Marks"]]
        rows.extend(
            [level_name(level), data.code, str(data.count), str(data.marks)]
            for level, data in paper.summary.items()
        )
        table = Table(rows, colWidths=[width / 4] * 4)
        table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, 0), "Times-Bold"),
            ("FONTNAME", (0, 1), (-1, -1), "Times-Roman"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f5f5f5")),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#cccccc")),
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        return table
