from functools import lru_cache

import structlog

from ..config import get_settings
from ..parsers.content_parser_factory import ContentParserFactory
from ..services.ai_question_service import AIQuestionService
from ..services.content_extractor import ContentExtractor
from ..services.file_storage import FileStorageService
from ..services.llm_service import LLMProvider, LLMService
from ..services.paper_exporter import PaperExporter
from ..services.question_generation_service import QuestionGenerationService
from ..services.question_synthesizer import QuestionSynthesizer
from ..services.session_store import InMemorySessionStore, SessionStore

logger = structlog.get_logger(__name__)


@lru_cache()
def get_session_store() -> SessionStore:
    settings = get_settings()
    return InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds)


@lru_cache()
def get_file_storage() -> FileStorageService:
    settings = get_settings()
    return FileStorageService(storage_dir=settings.upload_dir, max_file_size_mb=settings.max_upload_size_mb)


@lru_cache()
def get_content_extractor() -> ContentExtractor:
    settings = get_settings()
    factory = ContentParserFactory(
        max_file_size_mb=settings.max_upload_size_mb,
        render_dpi=settings.pdf_render_dpi,
        ocr_language=settings.tesseract_language,
    )
    return ContentExtractor(parser_factory=factory, timeout_seconds=settings.extraction_timeout_seconds)


@lru_cache()
def get_llm_service() -> LLMService:
    settings = get_settings()
    return LLMService(
        openai_api_key=settings.openai_api_key,
        anthropic_api_key=settings.anthropic_api_key,
        google_api_key=settings.google_api_key,
        openai_model_name=settings.openai_model_name,
        anthropic_model_name=settings.anthropic_model_name,
        google_model_name=settings.google_model_name,
        timeout_seconds=settings.llm_timeout_seconds
    )


@lru_cache()
def get_question_synthesizer() -> QuestionSynthesizer:
    return QuestionSynthesizer()


def _preferred_provider(value: str):
    try:
        return LLMProvider(value.lower())
    except ValueError:
        logger.warning("Unknown preferred question provider, using fallback order", provider=value)
        return None


@lru_cache()
def get_ai_question_service() -> AIQuestionService:
    settings = get_settings()
    return AIQuestionService(
        llm_service=get_llm_service(),
        synthesizer=get_question_synthesizer(),
        content_limit=settings.ai_prompt_content_limit,
        temperature=settings.question_generation_temperature,
        max_tokens=settings.question_generation_max_tokens,
        preferred_provider=_preferred_provider(settings.preferred_question_provider)
    )


@lru_cache()
def get_question_generation_service() -> QuestionGenerationService:
    return QuestionGenerationService(
        ai_service=get_ai_question_service(),
        synthesizer=get_question_synthesizer()
    )


@lru_cache()
def get_paper_exporter() -> PaperExporter:
    return PaperExporter(render_timeout_seconds=get_settings().render_timeout_seconds)
