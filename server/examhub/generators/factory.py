"""
Generator Factory.

Provides centralized access to all question generators.
"""
from typing import Dict, Optional

from examhub.generators.base import BaseQuestionGenerator
from examhub.generators.multiple_choice import multiple_choice_generator
from examhub.generators.open_answer import open_analysis_generator, open_exercise_generator
from examhub.generators.true_false import true_false_generator
from examhub.models.exam import QuestionKind


# Map question kind to generator instance
GENERATORS: Dict[QuestionKind, BaseQuestionGenerator] = {
    QuestionKind.MULTIPLE_CHOICE: multiple_choice_generator,
    QuestionKind.TRUE_FALSE: true_false_generator,
    QuestionKind.OPEN_ANALYSIS: open_analysis_generator,
    QuestionKind.OPEN_EXERCISE: open_exercise_generator,
}


def get_generator(kind: QuestionKind) -> Optional[BaseQuestionGenerator]:
    """Get the generator for a question kind."""
    return GENERATORS.get(kind)
