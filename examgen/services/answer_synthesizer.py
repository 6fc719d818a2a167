import re
from typing import Dict, Iterable, List, Optional

import structlog

from ..models.question import Question, QuestionType
from .content_analyzer import analyze_content

logger = structlog.get_logger(__name__)

DEFAULT_MAIN_TOPIC = "the main concept"

_OPTION_LETTER = re.compile(r"^([A-Za-z])[.)]?$")
_CLAUSE_SPLIT = re.compile(r"\n|\.")


def resolve_option_letter(answer: str, options: List[str]) -> Optional[str]:
    """
    Maps "B", "b", "B)" or "B." onto options[1].

    Letters follow option order starting at A. Returns None when the answer
    is not a letter or the letter has no matching option.
    """
    candidate = (answer or "").strip()
    if not candidate or len(candidate) > 2:
        return None
    match = _OPTION_LETTER.match(candidate)
    if not match:
        return None
    index = ord(match.group(1).upper()) - ord("A")
    if 0 <= index < len(options):
        return options[index]
    return None


def generate_answer(question: Question, content: Optional[str]) -> Dict[str, str]:
    """Type-specific correctAnswer / explanation / answer derived from the source text."""
    analysis = analyze_content(content or "")
    main_topic = analysis.main_topic or DEFAULT_MAIN_TOPIC

    if question.type == QuestionType.MULTIPLE_CHOICE:
        fallback = question.options[0] if question.options else "Option A"
        chosen = question.correct_answer or fallback
        return {
            "correct_answer": chosen,
            "explanation": f"The chosen option aligns best with key terms found in the content, notably {main_topic}.",
            "answer": resolve_option_letter(chosen, question.options) or chosen,
        }

    if question.type == QuestionType.TRUE_FALSE:
        return {
            "correct_answer": question.correct_answer or "True",
            "explanation": f"Based on the analyzed content, the statement reflects the discussed concepts about {main_topic}.",
            "answer": question.correct_answer or "True",
        }

    if question.type == QuestionType.SHORT_ANSWER:
        terms = ", ".join(analysis.key_terms[:3])
        involving = f", involving {terms}" if terms else ""
        return {
            "correct_answer": question.correct_answer or "",
            "explanation": "Answer synthesized from prominent topics and terms detected in the content.",
            "answer": f"It relates to {main_topic}{involving}.",
        }

    if question.type == QuestionType.ESSAY:
        points = " ".join(f"{i}. {topic}" for i, topic in enumerate(analysis.main_topics[:4], start=1))
        return {
            "correct_answer": "",
            "explanation": "Answers may vary; credit clarity, accuracy, and coverage of key ideas.",
            "answer": f"A strong answer should explain {main_topic} with evidence, and cover: {points or 'key ideas from the text'}.",
        }

    # fill-blank
    return {
        "correct_answer": question.correct_answer or main_topic,
        "explanation": f"The blank refers to {main_topic} as emphasized in the content.",
        "answer": question.correct_answer or main_topic,
    }


def fill_missing_answer(question: Question, content: Optional[str]) -> Question:
    """Copy of the question with empty answer fields filled; populated fields are kept."""
    generated = generate_answer(question, content)
    updates = {
        name: value
        for name, value in generated.items()
        if value and not getattr(question, name)
    }
    return question.model_copy(update=updates) if updates else question


def ensure_answer(question: Question) -> Question:
    if question.answer:
        return question

    answer = (question.correct_answer or "").strip()
    if question.options:
        resolved = resolve_option_letter(answer, question.options)
        if resolved:
            answer = resolved
        elif not answer:
            answer = question.options[0]

    if not answer and question.explanation:
        answer = _CLAUSE_SPLIT.split(question.explanation)[0].strip()

    return question.model_copy(update={"answer": answer})


def ensure_answers(questions: Iterable[Question]) -> List[Question]:
    """
    Last pass over a question list before it leaves the service.

    Empty answers are derived from correctAnswer (letters resolved to option
    text), then the first option, then the first clause of the explanation.
    Returns copies and never raises.
    """
    result = [ensure_answer(q) for q in questions or []]
    unanswered = sum(1 for q in result if not q.answer)
    if unanswered:
        logger.warning("questions_without_answer", count=unanswered)
    return result
