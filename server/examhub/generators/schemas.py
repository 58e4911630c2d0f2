"""
Question Generation Schemas.

Structured-output models handed to the LLM. They carry no id and no kind
tag; generators add both when converting to GeneratedQuestion.

IMPORTANT: correct_option_index is 0-based (0 = first option).
"""
from typing import List
from pydantic import BaseModel


class GenBaseQuestion(BaseModel):
    text: str
    explanation: str


class GenMultipleChoiceQuestion(GenBaseQuestion):
    options: List[str]
    correct_option_index: int


class GenTrueFalseQuestion(GenBaseQuestion):
    correct_boolean: bool


class GenOpenQuestion(GenBaseQuestion):
    expected_answer: str
