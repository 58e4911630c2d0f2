"""
Question generation collaborator.

The command layer only depends on `QuestionGenerator`; the default
implementation fans out one LLM call per requested question through the
per-kind generators and returns a flat list tagged with kinds.
"""
import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from examhub.errors import ExamHubError
from examhub.generators import QUESTION_KINDS
from examhub.generators.factory import get_generator
from examhub.schemas import Distribution, GeneratedQuestion

logger = logging.getLogger(__name__)


class QuestionGenerator(ABC):
    """Opaque source of generated questions."""

    @abstractmethod
    async def generate(
        self,
        subject: str,
        difficulty: str,
        total_questions: int,
        reference: Optional[str],
        distribution: Distribution,
        language: str = "es",
    ) -> List[GeneratedQuestion]:
        """Return a flat list of questions, each tagged with its kind."""


class OpenAIQuestionGenerator(QuestionGenerator):
    """Generates every requested question concurrently with the OpenAI-backed generators."""

    def __init__(self, temperature: float = 0.7):
        self.temperature = temperature

    async def generate(
        self,
        subject: str,
        difficulty: str,
        total_questions: int,
        reference: Optional[str],
        distribution: Distribution,
        language: str = "es",
    ) -> List[GeneratedQuestion]:
        tasks = []
        for kind in QUESTION_KINDS:
            generator = get_generator(kind)
            for _ in range(distribution.count_for(kind)):
                tasks.append(
                    generator.generate(
                        subject=subject,
                        difficulty=difficulty,
                        reference=reference,
                        language=language,
                        temperature=self.temperature,
                    )
                )

        logger.info("Generating %d questions for subject=%r", len(tasks), subject)
        results = await asyncio.gather(*tasks, return_exceptions=True)

        questions: List[GeneratedQuestion] = []
        for result in results:
            if isinstance(result, ExamHubError):
                raise result
            if isinstance(result, Exception):
                logger.error("Question generation task failed: %s", result)
                continue
            if result is None:
                continue
            result.id = result.id or f"gen_{uuid.uuid4().hex[:12]}"
            questions.append(result)

        if len(questions) < total_questions:
            logger.warning("Generated %d of %d requested questions", len(questions), total_questions)
        return questions


_default_generator: Optional[QuestionGenerator] = None


def get_question_generator() -> QuestionGenerator:
    """FastAPI dependency returning the process-wide generator."""
    global _default_generator
    if _default_generator is None:
        _default_generator = OpenAIQuestionGenerator()
    return _default_generator
