"""
Multiple Choice Question Generator.

Generates questions with several options and exactly one correct answer.
"""
import random
from typing import List, Optional, Tuple

from examhub.generators.base import BaseQuestionGenerator
from examhub.generators.schemas import GenMultipleChoiceQuestion
from examhub.models.exam import QuestionKind
from examhub.schemas import GeneratedQuestion


def shuffle_options(options: List[str], correct_index: int) -> Tuple[List[str], Optional[int]]:
    """Shuffle options and return the new list with the re-mapped correct index."""
    indexed_options = list(enumerate(options))
    random.shuffle(indexed_options)
    new_correct_index = None
    shuffled_options = []
    for new_idx, (old_idx, option) in enumerate(indexed_options):
        shuffled_options.append(option)
        if old_idx == correct_index:
            new_correct_index = new_idx
    return shuffled_options, new_correct_index


class MultipleChoiceGenerator(BaseQuestionGenerator):
    """Generator for multiple choice questions."""

    question_kind = QuestionKind.MULTIPLE_CHOICE

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
            response_model=GenMultipleChoiceQuestion,
            temperature=temperature,
        )
        if not gen_question or not gen_question.options:
            return None

        # Randomize the position of the correct answer
        options, correct_index = shuffle_options(gen_question.options, gen_question.correct_option_index)
        return GeneratedQuestion(
            type=self.question_kind,
            text=gen_question.text,
            options=options,
            correct_option_index=correct_index,
            explanation=gen_question.explanation,
        )


# Singleton instance
multiple_choice_generator = MultipleChoiceGenerator()
