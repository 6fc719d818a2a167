from typing import List, Optional

import structlog

from ..exceptions import AIGenerationError
from ..models.question import GenerationRequirements, Question
from .ai_question_service import AIQuestionService
from .answer_synthesizer import ensure_answers
from .question_synthesizer import QuestionSynthesizer

logger = structlog.get_logger(__name__)


class QuestionGenerationService:
    """Chooses between model-backed and rule-based generation for a session's content."""

    def __init__(self, ai_service: Optional[AIQuestionService], synthesizer: Optional[QuestionSynthesizer] = None):
        self.ai_service = ai_service
        self.synthesizer = synthesizer or QuestionSynthesizer()

    @property
    def ai_available(self) -> bool:
        return self.ai_service is not None and self.ai_service.llm_service.is_available()

    async def generate_questions(
        self,
        content: Optional[str],
        requirements: GenerationRequirements,
        multi_document: bool = False
    ) -> List[Question]:
        if requirements.use_ai and self.ai_available:
            try:
                result = await self.ai_service.generate(content, requirements, multi_document)
                logger.info(
                    "questions_generated",
                    mode="ai",
                    structured=result.structured,
                    question_count=len(result.questions)
                )
                return ensure_answers(result.questions)
            except AIGenerationError as e:
                logger.warning("AI generation failed, falling back to rule-based generation", error=e.message)

        questions = self.synthesizer.generate_rule_based(content, requirements, multi_document)
        logger.info("questions_generated", mode="rule_based", question_count=len(questions))
        return questions
