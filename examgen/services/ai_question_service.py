import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from ..models.bloom import BloomLevel
from ..models.question import (
    AIQuestion,
    Difficulty,
    GenerationRequirements,
    Question,
    QuestionSource,
    QuestionType,
)
from ..utils.prompt_strings import PromptStrings
from .answer_synthesizer import ensure_answers, fill_missing_answer
from .bloom_distribution import calculate_distribution
from .llm_service import LLMProvider, LLMService
from .question_synthesizer import QuestionSynthesizer, calculate_marks

logger = structlog.get_logger(__name__)

_QUESTION_LINE = re.compile(r"^(?:\d+\.\s|Q\d+\.\s|Question\s\d+:)", re.IGNORECASE)
_QUESTION_PREFIX = re.compile(r"^\d+\.\s|^Q\d+\.\s|^Question\s\d+:\s*", re.IGNORECASE)
_OPTION_LINE = re.compile(r"^[A-D]\.\s")
_ANSWER_PREFIX = re.compile(r"answer:\s*", re.IGNORECASE)

FALLBACK_QUESTION = {
    "content": "Based on the provided content, what is the main topic discussed?",
    "options": ["Topic A", "Topic B", "Topic C", "Topic D"],
    "correct_answer": "Topic A",
    "explanation": "This question tests understanding of the main topic from the content.",
    "answer": "Topic A",
}


@dataclass
class AIGenerationResult:
    questions: List[Question]
    summary: Dict[str, Any] = field(default_factory=dict)
    structured: bool = True


def build_summary(questions: List[Question], requirements: GenerationRequirements) -> Dict[str, Any]:
    return {
        "totalQuestions": len(questions),
        "bloomDistribution": requirements.bloom_distribution.value,
        "totalMarks": sum(q.marks for q in questions),
    }


class AIQuestionService:
    """
    Generates questions through a remote model.

    A failed call raises AIGenerationError and the caller decides what to do.
    A successful call whose text cannot be parsed is repaired here: first by
    scanning the text line by line, then by a single generic question.
    """

    def __init__(
        self,
        llm_service: LLMService,
        synthesizer: Optional[QuestionSynthesizer] = None,
        content_limit: int = 8000,
        temperature: float = 0.7,
        max_tokens: int = 8000,
        preferred_provider: Optional[LLMProvider] = LLMProvider.GOOGLE
    ):
        self.llm_service = llm_service
        self.synthesizer = synthesizer or QuestionSynthesizer()
        self.content_limit = content_limit
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.preferred_provider = preferred_provider

    def build_prompt(self, content: Optional[str], requirements: GenerationRequirements) -> str:
        distribution = calculate_distribution(requirements.bloom_distribution, requirements.question_count)
        level_counts = ", ".join(f"{level.value}: {count}" for level, count in distribution.items())
        outcomes = requirements.course_outcomes
        return PromptStrings.BLOOM_QUESTIONS.format(
            content=content[:self.content_limit] if content else PromptStrings.NO_CONTENT,
            total_questions=requirements.question_count,
            question_types=", ".join(t.value for t in requirements.question_types),
            bloom_distribution=requirements.bloom_distribution.value,
            level_counts=level_counts,
            difficulty=requirements.difficulty.value,
            course_outcomes=", ".join(outcomes) if outcomes else PromptStrings.NO_COURSE_OUTCOMES,
            total_marks=requirements.question_count * 2,
        )

    async def generate(
        self,
        content: Optional[str],
        requirements: GenerationRequirements,
        multi_document: bool = False
    ) -> AIGenerationResult:
        prompt = self.build_prompt(content, requirements)
        logger.info(
            "ai_generation_started",
            content_length=len(content or ""),
            question_count=requirements.question_count,
        )

        response = await self.llm_service.generate_with_fallback(
            system_prompt=PromptStrings.BLOOM_QUESTION_SYSTEM,
            user_prompt=prompt,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            preferred_provider=self.preferred_provider,
        )
        logger.info("ai_response_received", response_length=len(response or ""))

        return await self.parse_response(response, content, requirements, multi_document)

    async def parse_response(
        self,
        response: str,
        content: Optional[str],
        requirements: GenerationRequirements,
        multi_document: bool = False
    ) -> AIGenerationResult:
        parsed = await self.llm_service.parse_json_response(response)
        raw_questions = parsed.get("questions")
        if not isinstance(raw_questions, list):
            logger.warning("ai_response_not_structured", response_preview=(response or "")[:200])
            return self.questions_from_text(response, content, requirements)

        questions = []
        for position, raw in enumerate(raw_questions, start=1):
            question = self.normalize_question(raw, position, requirements)
            if question is not None:
                questions.append(question)

        target = requirements.question_count
        if len(questions) < target:
            needed = target - len(questions)
            logger.info("ai_questions_topped_up", returned=len(questions), needed=needed)
            questions.extend(self.synthesizer.top_up(content, needed, requirements, multi_document))

        questions = self._finalize(questions[:target], content)
        return AIGenerationResult(questions=questions, summary=build_summary(questions, requirements))

    def normalize_question(
        self,
        raw: Any,
        position: int,
        requirements: GenerationRequirements
    ) -> Optional[Question]:
        if not isinstance(raw, dict):
            logger.warning("ai_question_skipped", position=position, reason="not an object")
            return None
        try:
            item = AIQuestion.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning("ai_question_skipped", position=position, reason=str(e))
            return None

        text = (item.question or item.content or "").strip()
        if not text:
            logger.warning("ai_question_skipped", position=position, reason="empty question text")
            return None

        question_type = QuestionType.coerce(item.type) or requirements.question_types[0]
        level = BloomLevel.coerce(item.bloom_level)
        difficulty = Difficulty.coerce(item.difficulty) if item.difficulty else requirements.difficulty

        if item.marks and item.marks > 0:
            marks = max(1, math.floor(item.marks + 0.5))
        else:
            marks = calculate_marks(level, question_type, difficulty)

        return Question(
            id=item.id or f"Q{position}",
            type=question_type,
            bloom_level=level,
            bloom_code=level.code,
            difficulty=difficulty,
            content=text,
            options=item.options,
            correct_answer=item.correct_answer or "",
            explanation=item.explanation or "",
            answer=item.answer or "",
            marks=marks,
            source=QuestionSource.AI,
        )

    def questions_from_text(
        self,
        text: Optional[str],
        content: Optional[str],
        requirements: GenerationRequirements
    ) -> AIGenerationResult:
        """Line scanner for responses that carry no usable JSON."""
        limit = requirements.question_count
        scanned: List[Dict[str, Any]] = []
        current: Optional[Dict[str, Any]] = None

        for line in (line.strip() for line in (text or "").split("\n")):
            if not line:
                continue
            if _QUESTION_LINE.match(line):
                if current is not None:
                    scanned.append(current)
                    if len(scanned) >= limit:
                        current = None
                        break
                current = {"content": _QUESTION_PREFIX.sub("", line, count=1), "options": []}
            elif current is not None and _OPTION_LINE.match(line):
                current["options"].append(_OPTION_LINE.sub("", line, count=1))
            elif current is not None and "answer:" in line.lower():
                # answer itself is derived in _finalize so letters map onto options
                current["correct_answer"] = _ANSWER_PREFIX.sub("", line, count=1)

        if current is not None and len(scanned) < limit:
            scanned.append(current)

        if not scanned:
            logger.warning("ai_text_fallback_question_used")
            scanned = [dict(FALLBACK_QUESTION)]

        questions = [
            Question(
                id=f"Q{position}",
                type=QuestionType.MULTIPLE_CHOICE,
                bloom_level=BloomLevel.REMEMBER,
                bloom_code=BloomLevel.REMEMBER.code,
                difficulty=requirements.difficulty,
                marks=2,
                source=QuestionSource.TEXT_FALLBACK,
                **fields
            )
            for position, fields in enumerate(scanned, start=1)
        ]
        logger.info("ai_questions_from_text", count=len(questions))

        questions = self._finalize(questions, content)
        return AIGenerationResult(
            questions=questions,
            summary=build_summary(questions, requirements),
            structured=False,
        )

    def _finalize(self, questions: List[Question], content: Optional[str]) -> List[Question]:
        # Letter answers are resolved before synthesized defaults can mask them.
        resolved = ensure_answers(questions)
        return [q if q.answer else fill_missing_answer(q, content) for q in resolved]

