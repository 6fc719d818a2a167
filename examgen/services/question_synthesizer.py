import math
import random
import uuid
from typing import List, Optional, Sequence

import structlog

from ..models.bloom import BloomLevel
from ..models.question import Difficulty, GenerationRequirements, Question, QuestionSource, QuestionType
from .answer_synthesizer import ensure_answers, fill_missing_answer
from .bloom_distribution import calculate_distribution
from .content_analyzer import ContentAnalysis, analyze_content, split_content_into_sections
from .question_templates import SUPPORTED_TYPES, render_template

logger = structlog.get_logger(__name__)

MCQ_DESCRIPTORS = ("primary concept", "related concept", "alternative approach", "supporting element")
GENERIC_MCQ_OPTIONS = [
    "Primary concept (most relevant)",
    "Secondary concept (related)",
    "Alternative approach (different perspective)",
    "Supporting element (complementary)",
]


def calculate_marks(level: BloomLevel, question_type: QuestionType, difficulty: Difficulty) -> int:
    """base[level] x difficulty x type weight, rounded half up and never below 1."""
    raw = level.base_marks * Difficulty.coerce(difficulty).multiplier * question_type.marks_multiplier
    return max(1, math.floor(raw + 0.5))


def generate_options(question_type: QuestionType, analysis: ContentAnalysis) -> List[str]:
    if question_type == QuestionType.MULTIPLE_CHOICE:
        terms = analysis.key_terms
        if len(terms) >= len(MCQ_DESCRIPTORS):
            return [f"{term} ({descriptor})" for term, descriptor in zip(terms, MCQ_DESCRIPTORS)]
        return list(GENERIC_MCQ_OPTIONS)
    if question_type == QuestionType.TRUE_FALSE:
        return ["True", "False"]
    return []


def resolve_question_type(level: BloomLevel, chosen: QuestionType,
                          requested: Sequence[QuestionType]) -> QuestionType:
    """
    Falls back when a level has no wording for the chosen type.

    Order: the chosen type, then the first requested type the level supports,
    then the level's default.
    """
    supported = SUPPORTED_TYPES[level]
    if chosen in supported:
        return chosen
    for question_type in requested:
        if question_type in supported:
            return question_type
    return supported[0]


class QuestionSynthesizer:
    """Template-driven question generation that needs no model call."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def generate_question(
        self,
        level: BloomLevel,
        sections: Sequence[str],
        question_types: Sequence[QuestionType],
        difficulty: Difficulty,
        multi_document: bool = False,
    ) -> Question:
        requested = list(question_types) or [QuestionType.MULTIPLE_CHOICE]
        question_type = resolve_question_type(level, self.rng.choice(requested), requested)
        section = self.rng.choice(list(sections)) if sections else split_content_into_sections(None)[0]
        analysis = analyze_content(section)

        question = Question(
            id=str(uuid.uuid4()),
            type=question_type,
            bloom_level=level,
            bloom_code=level.code,
            difficulty=difficulty,
            content=render_template(level, question_type, analysis, multi_document),
            options=generate_options(question_type, analysis),
            marks=calculate_marks(level, question_type, difficulty),
            source=QuestionSource.RULE_BASED,
        )
        return fill_missing_answer(question, section)

    def generate_rule_based(
        self,
        content: Optional[str],
        requirements: GenerationRequirements,
        multi_document: bool = False,
    ) -> List[Question]:
        """
        One question per distribution slot, in Bloom order.

        The list is not truncated to question_count: each level rounds up on
        its own, so the result can be longer than requested.
        """
        sections = split_content_into_sections(content)
        distribution = calculate_distribution(requirements.bloom_distribution, requirements.question_count)

        questions = [
            self.generate_question(level, sections, requirements.question_types,
                                   requirements.difficulty, multi_document)
            for level, count in distribution.items()
            for _ in range(count)
        ]

        logger.info(
            "rule_based_questions_generated",
            requested=requirements.question_count,
            generated=len(questions),
            policy=requirements.bloom_distribution.value,
        )
        return ensure_answers(questions)

    def top_up(
        self,
        content: Optional[str],
        needed: int,
        requirements: GenerationRequirements,
        multi_document: bool = False,
    ) -> List[Question]:
        """needed extra questions cycling through the levels in Bloom order."""
        sections = split_content_into_sections(content)
        levels = list(BloomLevel)
        return [
            self.generate_question(levels[i % len(levels)], sections, requirements.question_types,
                                   requirements.difficulty, multi_document)
            for i in range(max(needed, 0))
        ]
