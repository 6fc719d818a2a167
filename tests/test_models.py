import pytest
from pydantic import ValidationError

from examgen.models.bloom import BloomLevel, DistributionPolicy
from examgen.models.document import Document
from examgen.models.question import Difficulty, GenerationRequirements, Question, QuestionType
from examgen.models.session import Session


class TestEnums:
    def test_bloom_metadata(self):
        assert [level.code for level in BloomLevel] == ["CO1", "CO2", "CO3", "CO4", "CO5", "CO6"]
        assert [level.base_marks for level in BloomLevel] == [2, 3, 4, 5, 6, 8]
        assert BloomLevel.ANALYZE.display_name == "Analyze"

    @pytest.mark.parametrize("raw, expected", [
        ("multiple_choice", QuestionType.MULTIPLE_CHOICE),
        ("True-False", QuestionType.TRUE_FALSE),
        ("fill blank", QuestionType.FILL_BLANK),
        ("matching", None),
        (None, None),
    ])
    def test_question_type_coercion(self, raw, expected):
        assert QuestionType.coerce(raw) == expected

    def test_lenient_enum_defaults(self):
        assert Difficulty.coerce("impossible") == Difficulty.MEDIUM
        assert DistributionPolicy.coerce(None) == DistributionPolicy.BALANCED
        assert BloomLevel.coerce(" evaluate ") == BloomLevel.EVALUATE
        assert BloomLevel.coerce("guess") == BloomLevel.REMEMBER


class TestGenerationRequirements:
    def test_defaults(self):
        requirements = GenerationRequirements()

        assert requirements.question_count == 10
        assert requirements.question_types == [QuestionType.MULTIPLE_CHOICE]
        assert requirements.use_ai is True

    def test_camel_case_payload(self):
        requirements = GenerationRequirements.model_validate({
            "questionCount": 4,
            "bloomDistribution": "unknown-policy",
            "questionTypes": ["essay", "riddle", "short_answer"],
            "difficulty": "HARD",
            "useAI": False,
            "courseOutcomes": ["CO1"],
        })

        assert requirements.question_count == 4
        assert requirements.bloom_distribution == DistributionPolicy.BALANCED
        assert requirements.question_types == [QuestionType.ESSAY, QuestionType.SHORT_ANSWER]
        assert requirements.difficulty == Difficulty.HARD
        assert requirements.use_ai is False

    def test_unknown_types_only(self):
        requirements = GenerationRequirements.model_validate({"questionTypes": ["riddle"]})

        assert requirements.question_types == [QuestionType.MULTIPLE_CHOICE]

    def test_question_count_must_be_positive(self):
        with pytest.raises(ValidationError):
            GenerationRequirements.model_validate({"questionCount": 0})


class TestQuestionAndSession:
    def test_question_wire_format(self):
        question = Question(
            id="Q1", type=QuestionType.ESSAY, bloom_level=BloomLevel.CREATE,
            content="Design a greenhouse.", marks=13,
        )

        wire = question.to_wire()

        assert wire["bloomLevel"] == "CREATE"
        assert wire["bloomCode"] == "CO6"
        assert wire["correctAnswer"] == ""
        assert wire["type"] == "essay"

    def test_marks_must_be_positive(self):
        with pytest.raises(ValidationError):
            Question(id="Q1", type="essay", bloom_level="CREATE", content="x", marks=0)

    def test_document_is_immutable_and_hides_path(self):
        document = Document(id="d1", file_name="a.pdf", content="abc", file_type="application/pdf", file_path="/x")

        with pytest.raises(ValidationError):
            document.content = "changed"
        assert "filePath" not in document.to_wire()
        assert document.summary().to_wire() == {
            "id": "d1", "fileName": "a.pdf", "contentLength": 3, "fileType": "application/pdf"
        }

    def test_multi_document_content_joined_with_markers(self):
        first = Document(id="d1", file_name="a.pdf", content="Alpha", file_type="application/pdf")
        second = Document(id="d2", file_name="b.docx", content="Beta", file_type="application/pdf")
        session = Session(session_id="s", documents=[first, second], multi_document=True)

        assert session.content == (
            "Alpha\n\n--- Document: a.pdf ---\n\n"
            "Beta\n\n--- Document: b.docx ---\n\n"
        )
        assert session.document_count == 2
        assert session.has_multiple_sources

    def test_single_document_session(self):
        document = Document(id="d1", file_name="a.pdf", content="Alpha", file_type="application/pdf")
        session = Session(session_id="s", documents=[document])

        assert session.content == "Alpha"
        assert session.document_count == 1
        assert not session.has_multiple_sources
