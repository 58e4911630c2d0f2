"""
True/False Question Generator.
"""
from typing import Optional

from examhub.generators.base import BaseQuestionGenerator
from examhub.generators.schemas import GenTrueFalseQuestion
from examhub.models.exam import QuestionKind
from examhub.schemas import GeneratedQuestion


class TrueFalseGenerator(BaseQuestionGenerator):
    """Generator for true/false statements."""

    question_kind = QuestionKind.TRUE_FALSE

    async def generate(
        self,
        subject: str,
        difficulty: str,
        reference: Optional[str] = None,
        language: str = "es",
        temperature: float = 0.7,
    ) -> Optional[GeneratedQuestion]:
        gen_question = await self._generate_structured(
            system_prompt=self.get_system_prompt(difficulty, language),
            user_prompt=self.build_user_prompt(subject, reference),
            response_model=GenTrueFalseQuestion,
            temperature=temperature,
        )
        if not gen_question:
            return None
        return GeneratedQuestion(type=self.question_kind, **gen_question.model_dump())


# Singleton instance
true_false_generator = TrueFalseGenerator()
