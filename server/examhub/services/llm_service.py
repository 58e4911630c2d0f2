"""
Structured LLM Service.

Encapsulates OpenAI's structured output capabilities.
"""
import logging
from typing import Type, TypeVar, Optional
from pydantic import BaseModel
from openai import OpenAI, OpenAIError
from examhub.config import settings
from examhub.errors import ExamHubError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class LLMNotConfigured(ExamHubError):
    """Raised when question generation is requested without an API key."""


class StructuredLLMService:
    """Service for generating structured outputs from LLMs."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self._api_key = api_key
        self._client: Optional[OpenAI] = None
        self.model = model or settings.llm_model

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            api_key = self._api_key or settings.openai_api_key
            if not api_key:
                raise LLMNotConfigured("OPENAI_API_KEY is not set", message="Question generation is not configured")
            self._client = OpenAI(api_key=api_key)
        return self._client

    def generate_response(
        self,
        response_model: Type[T],
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None
    ) -> Optional[T]:
        """
        Generate a structured response ensuring it matches the Pydantic model.
        Returns None when the provider call fails.
        """
        client = self.client
        try:
            completion = client.beta.chat.completions.parse(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format=response_model,
                temperature=temperature,
                max_tokens=max_tokens or settings.llm_max_tokens
            )
            return completion.choices[0].message.parsed

        except OpenAIError as e:
            logger.error("Structured LLM generation error: %s", e)
            return None


# Singleton instance
llm_service = StructuredLLMService()
