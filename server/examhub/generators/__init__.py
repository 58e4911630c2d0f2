"""
Question Generators Package.

One generator per exam question kind:
- multiple_choice: options with a single correct index
- true_false: a statement with a boolean answer
- open_analysis: open question asking for analysis or argument
- open_exercise: open exercise with an expected worked answer
"""
from typing import List

from examhub.models.exam import QuestionKind

# Kinds in the order buckets are reported
QUESTION_KINDS: List[QuestionKind] = [
    QuestionKind.MULTIPLE_CHOICE,
    QuestionKind.TRUE_FALSE,
    QuestionKind.OPEN_ANALYSIS,
    QuestionKind.OPEN_EXERCISE,
]

# Canonical difficulty labels used in prompts
DIFFICULTY_LABELS = {
    "facil": "fácil",
    "fácil": "fácil",
    "easy": "fácil",
    "medio": "medio",
    "media": "medio",
    "medium": "medio",
    "dificil": "difícil",
    "difícil": "difícil",
    "hard": "difícil",
}


def normalize_difficulty(difficulty: str) -> str:
    """Map difficulty synonyms to a canonical label, defaulting to 'medio'."""
    return DIFFICULTY_LABELS.get(str(difficulty or "").strip().lower(), "medio")
