import structlog
from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse

from ...dependencies import get_paper_exporter, get_session_store
from ..constants import ErrorMessages, ExportMediaType, ResponseMessages
from ..schemas import ExamPaperRequest, ExamPaperResponse, ExportPdfRequest
from ....exceptions import ValidationError
from ....models.exam_paper import ExamPaper
from ....services.exam_paper_service import generate_exam_paper
from ....services.paper_exporter import PaperExporter, export_filename
from ....services.session_store import SessionStore

logger = structlog.get_logger(__name__)

router = APIRouter()


def _attachment(content, media_type: str, extension: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(extension)}"',
            "Cache-Control": "no-cache",
        }
    )


@router.post("/generate-exam-paper", response_model=ExamPaperResponse)
async def create_exam_paper(
    request: ExamPaperRequest,
    session_store: SessionStore = Depends(get_session_store)
):
    session = await session_store.require(request.session_id)

    try:
        exam_paper = generate_exam_paper(request.questions, request.exam_config)

        logger.info(
            "Exam paper generated",
            session_id=request.session_id,
            question_count=len(request.questions),
            total_marks=exam_paper.total_marks
        )

        return ExamPaperResponse(
            exam_paper=exam_paper,
            message=ResponseMessages.EXAM_PAPER_GENERATED,
            is_multi_document=session.multi_document,
            document_count=session.document_count
        )

    except Exception as e:
        logger.error("Exam paper generation error", session_id=request.session_id, error=str(e))
        raise HTTPException(status_code=500, detail=ErrorMessages.GENERATE_EXAM_PAPER)


@router.post("/export-pdf")
async def export_pdf(
    request: ExportPdfRequest,
    exporter: PaperExporter = Depends(get_paper_exporter)
):
    """
    PDF attachment for an assembled paper.

    Falls back to an HTML attachment when PDF rendering fails, and to a 500
    error body when the paper cannot be rendered at all.
    """
    paper = None
    try:
        if not request.exam_paper:
            raise ValidationError(ErrorMessages.NO_EXAM_PAPER)
        paper = ExamPaper.model_validate(request.exam_paper)
        pdf = await exporter.render_pdf(paper)
        return _attachment(pdf, ExportMediaType.PDF, "pdf")

    except Exception as e:
        logger.error("PDF export error, attempting HTML fallback", error=str(e))
        try:
            if paper is None:
                raise e
            html = exporter.render_html(paper)
            return _attachment(html, ExportMediaType.HTML, "html")
        except Exception as fallback_error:
            logger.error("PDF export fallback error", error=str(fallback_error))
            return JSONResponse(
                status_code=500,
                content={
                    "error": ErrorMessages.GENERATE_PDF,
                    "details": str(e),
                    "suggestion": ErrorMessages.SUPPORT_SUGGESTION
                }
            )
