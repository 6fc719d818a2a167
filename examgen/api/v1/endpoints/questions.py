import structlog
from fastapi import APIRouter, Depends, HTTPException

from ...dependencies import get_llm_service, get_question_generation_service, get_session_store
from ..constants import ErrorMessages, PreviewLength, ResponseMessages
from ..schemas import (
    AIStatusResponse,
    ContentAnalysisResponse,
    GenerateQuestionsRequest,
    GenerateQuestionsResponse,
    SampleGenerationRequest,
    SampleGenerationResponse,
)
from ....exceptions import AIGenerationError
from ....services.content_analyzer import keyword_frequencies
from ....services.llm_service import LLMService
from ....services.question_generation_service import QuestionGenerationService
from ....services.session_store import SessionStore
from ....utils.string_utils import preview

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/generate-questions", response_model=GenerateQuestionsResponse)
async def generate_questions(
    request: GenerateQuestionsRequest,
    generation_service: QuestionGenerationService = Depends(get_question_generation_service),
    session_store: SessionStore = Depends(get_session_store)
):
    session = await session_store.require(request.session_id)

    try:
        questions = await generation_service.generate_questions(
            session.content,
            request.requirements,
            multi_document=session.has_multiple_sources
        )

        total_marks = sum(q.marks for q in questions)
        logger.info(
            "Questions generated for session",
            session_id=request.session_id,
            question_count=len(questions),
            total_marks=total_marks
        )

        return GenerateQuestionsResponse(
            questions=questions,
            total_questions=len(questions),
            total_marks=total_marks,
            is_multi_document=session.multi_document,
            document_count=session.document_count
        )

    except Exception as e:
        logger.error("Question generation error", session_id=request.session_id, error=str(e))
        raise HTTPException(status_code=500, detail=ErrorMessages.GENERATE_QUESTIONS)


@router.get("/ai-status", response_model=AIStatusResponse)
async def ai_status(llm_service: LLMService = Depends(get_llm_service)):
    try:
        await llm_service.probe()
        return AIStatusResponse(available=True, message=ResponseMessages.AI_READY)
    except AIGenerationError as e:
        if e.error_code == "AI_NOT_CONFIGURED":
            return AIStatusResponse(available=False, message=e.message)
        logger.warning("AI status probe failed", error=e.message)
        return AIStatusResponse(available=False, message=f"{ErrorMessages.INVALID_API_KEY}: {e.message}")


@router.post("/test-ai-generation", response_model=SampleGenerationResponse)
async def test_ai_generation(
    request: SampleGenerationRequest,
    generation_service: QuestionGenerationService = Depends(get_question_generation_service)
):
    if not request.content:
        raise HTTPException(status_code=400, detail=ErrorMessages.NO_CONTENT)

    try:
        requirements = request.requirements.model_copy(update={"use_ai": True})
        questions = await generation_service.generate_questions(request.content, requirements)

        return SampleGenerationResponse(
            success=True,
            questions=questions,
            content_length=len(request.content),
            content_preview=preview(request.content, PreviewLength.TEST_AI_GENERATION)
        )

    except Exception as e:
        logger.error("Test AI generation error", error=str(e))
        raise HTTPException(status_code=500, detail=ErrorMessages.TEST_AI_GENERATION)


@router.get("/analyze-content/{session_id}", response_model=ContentAnalysisResponse)
async def analyze_content(
    session_id: str,
    session_store: SessionStore = Depends(get_session_store)
):
    session = await session_store.require(session_id)

    try:
        content = session.content
        key_terms, total_words, unique_words = keyword_frequencies(content)

        return ContentAnalysisResponse(
            content_length=len(content),
            content_preview=preview(content, PreviewLength.ANALYZE_CONTENT),
            key_terms=key_terms,
            total_words=total_words,
            unique_words=unique_words
        )

    except Exception as e:
        logger.error("Content analysis error", session_id=session_id, error=str(e))
        raise HTTPException(status_code=500, detail=ErrorMessages.ANALYZE_CONTENT)
