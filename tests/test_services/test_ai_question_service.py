import json

import pytest
from unittest.mock import AsyncMock, patch

from examgen.exceptions import AIGenerationError
from examgen.models.bloom import BloomLevel
from examgen.models.question import Difficulty, GenerationRequirements, QuestionSource, QuestionType
from examgen.services.ai_question_service import AIQuestionService
from examgen.services.llm_service import LLMService
from examgen.services.question_synthesizer import calculate_marks


def _model_reply(questions, fenced=False):
    body = json.dumps({"questions": questions, "summary": {"totalQuestions": 99}})
    return f"Here you go:\n```json\n{body}\n```" if fenced else body


class TestAIQuestionService:
    @pytest.fixture(autouse=True)
    def setup_service(self, seeded_synthesizer, sample_content):
        self.llm_service = LLMService()
        self.service = AIQuestionService(self.llm_service, synthesizer=seeded_synthesizer)
        self.content = sample_content
        self.requirements = GenerationRequirements(
            question_count=3, question_types=["multiple-choice"], difficulty="medium"
        )

    def test_prompt_contains_requirements(self):
        requirements = self.requirements.model_copy(update={"course_outcomes": ["CO1: Recall", "CO3: Apply"]})

        prompt = self.service.build_prompt(self.content, requirements)

        assert self.content[:100] in prompt
        assert "multiple-choice" in prompt
        assert "balanced" in prompt
        assert "REMEMBER: 1" in prompt
        assert "CO1: Recall, CO3: Apply" in prompt

    def test_prompt_truncates_content_and_handles_missing_outcomes(self):
        service = AIQuestionService(self.llm_service, content_limit=50)

        prompt = service.build_prompt("a" * 49 + "XYZ", self.requirements)

        assert "a" * 49 + "X" in prompt
        assert "XYZ" not in prompt
        assert "Not specified" in prompt

    def test_prompt_without_content(self):
        assert "No content provided" in self.service.build_prompt(None, self.requirements)

    @pytest.mark.asyncio
    async def test_structured_reply_normalized(self):
        reply = _model_reply([
            {"id": "q-a", "type": "multiple-choice", "bloomLevel": "remember",
             "question": "Which pigment absorbs light?", "options": ["Chlorophyll", "Keratin", "Melanin", "Heme"],
             "correctAnswer": "A", "explanation": "Chlorophyll absorbs light.", "marks": 2.5},
            {"type": "Short_Answer", "bloomLevel": "Apply", "content": "Explain the Calvin cycle.", "marks": "oops"},
            {"type": "essay", "bloomLevel": "CREATE", "question": "Design an experiment on light intensity.",
             "difficulty": "hard"},
        ], fenced=True)

        with patch.object(self.llm_service, "generate_with_fallback", AsyncMock(return_value=reply)):
            result = await self.service.generate(self.content, self.requirements)

        first, second, third = result.questions
        assert result.structured
        assert first.id == "q-a"
        assert first.answer == "Chlorophyll"
        assert first.marks == 3
        assert first.bloom_code == "CO1"
        assert first.source == QuestionSource.AI
        assert second.id == "Q2"
        assert second.type == QuestionType.SHORT_ANSWER
        assert second.bloom_level == BloomLevel.APPLY
        assert second.marks == 6
        assert second.answer
        assert third.difficulty == Difficulty.HARD
        assert third.marks == 19
        assert result.summary == {"totalQuestions": 3, "bloomDistribution": "balanced", "totalMarks": 28}

    @pytest.mark.asyncio
    async def test_short_reply_topped_up_and_long_reply_truncated(self):
        short_reply = _model_reply([{"question": "What is photosynthesis?", "type": "short-answer"}])
        long_reply = _model_reply([{"question": f"Question {i}?"} for i in range(10)])

        with patch.object(self.llm_service, "generate_with_fallback", AsyncMock(return_value=short_reply)):
            topped_up = await self.service.generate(self.content, self.requirements)
        with patch.object(self.llm_service, "generate_with_fallback", AsyncMock(return_value=long_reply)):
            truncated = await self.service.generate(self.content, self.requirements)

        assert len(topped_up.questions) == 3
        assert topped_up.questions[0].source == QuestionSource.AI
        assert [q.bloom_level for q in topped_up.questions[1:]] == [BloomLevel.REMEMBER, BloomLevel.UNDERSTAND]
        assert all(q.source == QuestionSource.RULE_BASED for q in topped_up.questions[1:])
        assert len(truncated.questions) == 3
        assert all(q.answer for q in topped_up.questions + truncated.questions)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_marks", ["1e999", "Infinity", "-Infinity", "NaN"])
    async def test_non_finite_marks_recomputed(self, raw_marks):
        reply = (
            '{"questions": [{"question": "Which pigment absorbs light?", "type": "short-answer", '
            f'"bloomLevel": "APPLY", "marks": {raw_marks}}}]}}'
        )
        requirements = self.requirements.model_copy(update={"question_count": 1})

        result = await self.service.parse_response(reply, self.content, requirements)

        question = result.questions[0]
        assert question.content == "Which pigment absorbs light?"
        assert question.marks == calculate_marks(BloomLevel.APPLY, QuestionType.SHORT_ANSWER, Difficulty.MEDIUM)
        assert result.summary["totalMarks"] == question.marks

    @pytest.mark.asyncio
    async def test_invalid_items_skipped(self):
        reply = _model_reply(["not an object", {"question": "   "}, {"question": "Valid question?"}])

        with patch.object(self.llm_service, "generate_with_fallback", AsyncMock(return_value=reply)):
            result = await self.service.generate(self.content, self.requirements)

        assert result.questions[0].content == "Valid question?"
        assert result.questions[0].id == "Q3"
        assert len(result.questions) == 3

    @pytest.mark.asyncio
    async def test_malformed_reply_scanned_line_by_line(self):
        reply = (
            "Sure! Here are some questions.\n"
            "1. What gas do plants release?\n"
            "A. Oxygen\nB. Nitrogen\nC. Helium\nD. Argon\n"
            "Answer: A\n"
            "Q2. Where do the light reactions occur?\n"
            "Answer: In the thylakoid membranes\n"
            "Question 3: What does the Calvin cycle produce?\n"
            "Question 4: This one is beyond the requested count\n"
        )

        with patch.object(self.llm_service, "generate_with_fallback", AsyncMock(return_value=reply)):
            result = await self.service.generate(self.content, self.requirements)

        assert not result.structured
        assert [q.content for q in result.questions] == [
            "What gas do plants release?",
            "Where do the light reactions occur?",
            "What does the Calvin cycle produce?",
        ]
        first, second, third = result.questions
        assert first.options == ["Oxygen", "Nitrogen", "Helium", "Argon"]
        assert first.answer == "Oxygen"
        assert second.answer == "In the thylakoid membranes"
        assert third.answer
        assert all(q.source == QuestionSource.TEXT_FALLBACK for q in result.questions)
        assert all(q.marks == 2 and q.bloom_level == BloomLevel.REMEMBER for q in result.questions)

    @pytest.mark.asyncio
    async def test_unusable_reply_yields_fallback_question(self):
        with patch.object(self.llm_service, "generate_with_fallback", AsyncMock(return_value="I cannot help.")):
            result = await self.service.generate(self.content, self.requirements)

        assert len(result.questions) == 1
        question = result.questions[0]
        assert question.content == "Based on the provided content, what is the main topic discussed?"
        assert question.options == ["Topic A", "Topic B", "Topic C", "Topic D"]
        assert question.answer == "Topic A"

    @pytest.mark.asyncio
    async def test_questions_key_not_a_list(self):
        reply = json.dumps({"questions": "none"})

        with patch.object(self.llm_service, "generate_with_fallback", AsyncMock(return_value=reply)):
            result = await self.service.generate(self.content, self.requirements)

        assert not result.structured
        assert len(result.questions) >= 1
        assert all(q.content and q.answer for q in result.questions)

    @pytest.mark.asyncio
    async def test_call_failure_propagates(self):
        failing = AsyncMock(side_effect=AIGenerationError("quota exceeded"))

        with patch.object(self.llm_service, "generate_with_fallback", failing):
            with pytest.raises(AIGenerationError):
                await self.service.generate(self.content, self.requirements)

    @pytest.mark.asyncio
    async def test_unconfigured_service_raises(self):
        with pytest.raises(AIGenerationError) as exc_info:
            await self.service.generate(self.content, self.requirements)

        assert exc_info.value.error_code == "AI_NOT_CONFIGURED"
