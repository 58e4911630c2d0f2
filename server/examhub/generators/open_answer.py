"""
Open Answer Question Generators.

Open analysis and open exercise questions share the same structured output
(statement + expected answer); they differ only in their prompt.
"""
from typing import Optional

from examhub.generators.base import BaseQuestionGenerator
from examhub.generators.schemas import GenOpenQuestion
from examhub.models.exam import QuestionKind
from examhub.schemas import GeneratedQuestion


class OpenAnswerGenerator(BaseQuestionGenerator):
    """Generator for open questions with an expected answer."""

    question_kind = QuestionKind.OPEN_ANALYSIS

    def __init__(self, question_kind: QuestionKind = QuestionKind.OPEN_ANALYSIS, llm=None):
        super().__init__(llm=llm)
        self.question_kind = question_kind

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
            response_model=GenOpenQuestion,
            temperature=temperature,
        )
        if not gen_question:
            return None
        return GeneratedQuestion(type=self.question_kind, **gen_question.model_dump())


# Singleton instances
open_analysis_generator = OpenAnswerGenerator(QuestionKind.OPEN_ANALYSIS)
open_exercise_generator = OpenAnswerGenerator(QuestionKind.OPEN_EXERCISE)
