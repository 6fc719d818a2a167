import math
from fractions import Fraction
from typing import Dict, List, Optional

import structlog

from ..models.bloom import BloomLevel
from ..models.exam_paper import ExamConfig, ExamPaper, ExamPart, LevelSummary
from ..models.question import Question

logger = structlog.get_logger(__name__)

PART_A_SHARE = Fraction(3, 5)


def generate_summary_table(questions: List[Question]) -> Dict[str, LevelSummary]:
    """Count, marks and outcome code for every level, zeros included."""
    summary = {}
    for level in BloomLevel:
        level_questions = [q for q in questions if q.bloom_level == level]
        summary[level.value] = LevelSummary(
            count=len(level_questions),
            marks=sum(q.marks for q in level_questions),
            code=level.code,
        )
    return summary


def _part(name: str, nominal_marks: int, questions: List[Question]) -> ExamPart:
    total = sum(q.marks for q in questions)
    return ExamPart(
        name=name,
        description=f"({len(questions)} x {nominal_marks} = {total} Marks)",
        questions=questions,
    )


def generate_exam_paper(questions: List[Question], config: Optional[ExamConfig] = None) -> ExamPaper:
    """
    Splits the questions into Part A (first 60%, rounded up) and Part B.

    The summary covers the whole list. Totals are not checked against
    config.max_marks.
    """
    questions = list(questions or [])
    split_at = math.ceil(len(questions) * PART_A_SHARE)

    paper = ExamPaper(
        header=config or ExamConfig(),
        parts=[
            _part("Part A", 2, questions[:split_at]),
            _part("Part B", 3, questions[split_at:]),
        ],
        summary=generate_summary_table(questions),
    )
    logger.info(
        "exam_paper_generated",
        question_count=len(questions),
        part_a=split_at,
        part_b=len(questions) - split_at,
    )
    return paper
