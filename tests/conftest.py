import random

import pytest
from unittest.mock import MagicMock, AsyncMock

from examgen.models.bloom import BloomLevel
from examgen.models.document import Document
from examgen.models.question import Difficulty, GenerationRequirements, Question, QuestionType
from examgen.services.question_synthesizer import QuestionSynthesizer


PHOTOSYNTHESIS_TEXT = (
    "Photosynthesis is a process used by plants to convert light energy into chemical energy. "
    "During photosynthesis, chlorophyll absorbs light energy and plants produce glucose and oxygen "
    "from carbon dioxide and water.\n\n"
    "The light reactions of photosynthesis take place in the thylakoid membranes of the chloroplast. "
    "Light energy splits water molecules, releasing oxygen and producing energy carriers for the plant.\n\n"
    "The Calvin cycle uses the energy carriers to fix carbon dioxide into glucose. Plants store glucose "
    "as starch and use it as chemical energy for growth, which makes photosynthesis essential for life."
)


@pytest.fixture
def mock_settings():
    settings = MagicMock()
    settings.google_api_key = "test-google-key"
    settings.openai_api_key = "test-openai-key"
    settings.anthropic_api_key = "test-anthropic-key"
    settings.google_model_name = "gemini-1.5-flash"
    settings.openai_model_name = "gpt-4o-mini"
    settings.anthropic_model_name = "claude-3-haiku-20240307"
    settings.llm_timeout_seconds = 5
    settings.upload_dir = "./uploads"
    settings.max_upload_size_mb = 50
    settings.max_files_per_upload = 10
    settings.session_ttl_seconds = 3600
    return settings


@pytest.fixture
def sample_content():
    return PHOTOSYNTHESIS_TEXT


@pytest.fixture
def seeded_synthesizer():
    return QuestionSynthesizer(rng=random.Random(42))


@pytest.fixture
def rule_based_requirements():
    return GenerationRequirements(
        question_count=6,
        bloom_distribution="balanced",
        question_types=["multiple-choice", "short-answer"],
        difficulty="medium",
        use_ai=False,
    )


@pytest.fixture
def sample_document(tmp_path):
    source = tmp_path / "photosynthesis.pdf"
    source.write_bytes(b"%PDF-1.4 fake")
    return Document(
        id="doc-1",
        file_name="photosynthesis.pdf",
        content=PHOTOSYNTHESIS_TEXT,
        file_type="application/pdf",
        file_path=str(source),
    )


@pytest.fixture
def make_question():
    def _make(
        level: BloomLevel = BloomLevel.REMEMBER,
        question_type: QuestionType = QuestionType.MULTIPLE_CHOICE,
        marks: int = 2,
        **overrides
    ) -> Question:
        fields = {
            "id": overrides.pop("id", "Q1"),
            "type": question_type,
            "bloom_level": level,
            "difficulty": Difficulty.MEDIUM,
            "content": "Which of the following terms is most frequently mentioned?",
            "marks": marks,
        }
        fields.update(overrides)
        return Question(**fields)
    return _make


@pytest.fixture
def mock_llm_service():
    service = MagicMock()
    service.is_available = MagicMock(return_value=True)
    service.generate_with_fallback = AsyncMock(return_value='{"questions": []}')
    service.probe = AsyncMock(return_value=None)
    service.get_available_providers = MagicMock(return_value=[])
    return service


@pytest.fixture
def mock_extractor(sample_document):
    extractor = MagicMock()
    extractor.extract = AsyncMock(return_value=sample_document)
    return extractor


@pytest.fixture
def session_store():
    from examgen.services.session_store import InMemorySessionStore
    return InMemorySessionStore(ttl_seconds=3600)


@pytest.fixture
async def async_client(tmp_path, session_store, seeded_synthesizer):
    from httpx import AsyncClient, ASGITransport
    from examgen.main import app
    from examgen.api import dependencies
    from examgen.services.file_storage import FileStorageService
    from examgen.services.llm_service import LLMService
    from examgen.services.ai_question_service import AIQuestionService
    from examgen.services.question_generation_service import QuestionGenerationService

    llm_service = LLMService()
    generation_service = QuestionGenerationService(
        ai_service=AIQuestionService(llm_service, synthesizer=seeded_synthesizer),
        synthesizer=seeded_synthesizer
    )

    app.dependency_overrides[dependencies.get_session_store] = lambda: session_store
    app.dependency_overrides[dependencies.get_file_storage] = lambda: FileStorageService(
        storage_dir=str(tmp_path / "uploads")
    )
    app.dependency_overrides[dependencies.get_llm_service] = lambda: llm_service
    app.dependency_overrides[dependencies.get_question_generation_service] = lambda: generation_service

    # Use ASGITransport for direct app interaction
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
