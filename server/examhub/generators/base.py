"""
Base Generator Class.

Provides common functionality for all question generators.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, Type, TypeVar

from pydantic import BaseModel

from examhub.generators import normalize_difficulty
from examhub.models.exam import QuestionKind
from examhub.schemas import GeneratedQuestion
from examhub.services.llm_service import StructuredLLMService, llm_service
from examhub.services.prompt_management import get_system_prompt as get_prompt_from_yaml

logger = logging.getLogger(__name__)

G = TypeVar("G", bound=BaseModel)


class BaseQuestionGenerator(ABC):
    """Abstract base class for question generators."""

    # Question kind identifier - must be overridden
    question_kind: QuestionKind

    def __init__(self, llm: Optional[StructuredLLMService] = None):
        self.llm = llm or llm_service

    @abstractmethod
    async def generate(
        self,
        subject: str,
        difficulty: str,
        reference: Optional[str] = None,
        language: str = "es",
        temperature: float = 0.7,
    ) -> Optional[GeneratedQuestion]:
        """
        Generate a single question.

        Args:
            subject: Topic of the exam
            difficulty: Difficulty label (synonyms accepted)
            reference: Optional reference material
            language: Output language code
            temperature: LLM temperature

        Returns:
            Generated question or None if failed
        """

    def get_system_prompt(self, difficulty: str, language: str) -> str:
        """Get the system prompt for this kind from its YAML file."""
        return get_prompt_from_yaml(
            self.question_kind.value,
            difficulty=normalize_difficulty(difficulty),
            language=language,
        )

    def build_user_prompt(self, subject: str, reference: Optional[str]) -> str:
        user_prompt = f"Tema del examen: {subject}"
        if reference:
            user_prompt += f"\n\nMaterial de referencia:\n{reference}"
        return user_prompt

    async def _generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        response_model: Type[G],
        temperature: float = 0.7,
    ) -> Optional[G]:
        """Run the blocking LLM call off the event loop."""
        result = await asyncio.to_thread(
            self.llm.generate_response,
            response_model=response_model,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=temperature,
        )
        if result is None:
            logger.warning("LLM generation failed for %s", self.question_kind.value)
        return result
