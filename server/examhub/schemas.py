from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime
from examhub.models.exam import ExamStatus, QuestionKind


class RequestModel(BaseModel):
    """Request bodies accept snake_case names and their camelCase aliases."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# =============================================================================
# Exam creation / generation
# =============================================================================

class Distribution(RequestModel):
    """Requested number of questions per kind."""
    multiple_choice: int = Field(default=0, ge=0)
    true_false: int = Field(default=0, ge=0)
    open_analysis: int = Field(default=0, ge=0)
    open_exercise: int = Field(default=0, ge=0)

    def total(self) -> int:
        return self.multiple_choice + self.true_false + self.open_analysis + self.open_exercise

    def count_for(self, kind: QuestionKind) -> int:
        return getattr(self, kind.value)


class CreateExamRequest(RequestModel):
    subject: str = Field(min_length=1)
    difficulty: str = Field(min_length=1)
    attempts: int = Field(ge=1, le=3)
    total_questions: int
    time_minutes: int = Field(gt=0)
    reference: Optional[str] = Field(default=None, max_length=1000)
    distribution: Optional[Distribution] = None
    title: Optional[str] = None
    class_id: Optional[str] = None


class GenerateQuestionsRequest(RequestModel):
    subject: str = Field(min_length=1)
    difficulty: str = Field(min_length=1)
    total_questions: int
    reference: Optional[str] = Field(default=None, max_length=1000)
    distribution: Optional[Distribution] = None
    language: str = "es"


class GeneratedQuestion(BaseModel):
    """A question returned by the generation collaborator, tagged with its kind."""
    id: Optional[str] = None
    type: QuestionKind
    text: str
    options: Optional[List[str]] = None
    correct_option_index: Optional[int] = None
    correct_boolean: Optional[bool] = None
    expected_answer: Optional[str] = None
    explanation: Optional[str] = None


class GroupedQuestions(BaseModel):
    multiple_choice: List[GeneratedQuestion] = []
    true_false: List[GeneratedQuestion] = []
    open_analysis: List[GeneratedQuestion] = []
    open_exercise: List[GeneratedQuestion] = []


# =============================================================================
# Exam questions
# =============================================================================

class AddExamQuestionRequest(RequestModel):
    position: int = Field(ge=0)
    kind: QuestionKind
    text: str = Field(min_length=1)
    options: Optional[List[str]] = None
    correct_option_index: Optional[int] = None
    correct_boolean: Optional[bool] = None
    expected_answer: Optional[str] = None


class UpdateExamQuestionRequest(RequestModel):
    text: Optional[str] = Field(default=None, min_length=1)
    options: Optional[List[str]] = None
    correct_option_index: Optional[int] = None
    correct_boolean: Optional[bool] = None
    expected_answer: Optional[str] = None


class ExamQuestionResponse(BaseModel):
    id: str
    exam_id: str
    kind: QuestionKind
    text: str
    order: int
    options: Optional[List[str]] = None
    correct_option_index: Optional[int] = None
    correct_boolean: Optional[bool] = None
    expected_answer: Optional[str] = None

    class Config:
        from_attributes = True


# =============================================================================
# Exams
# =============================================================================

class UpdateExamMetaRequest(RequestModel):
    title: Optional[str] = Field(default=None, min_length=1)
    status: Optional[ExamStatus] = None
    class_id: Optional[str] = None


class ExamSummary(BaseModel):
    id: str
    title: str
    status: ExamStatus
    class_id: Optional[str] = None
    teacher_id: str
    subject: Optional[str] = None
    difficulty: Optional[str] = None
    total_questions: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ExamResponse(ExamSummary):
    attempts: Optional[int] = None
    time_minutes: Optional[int] = None
    reference: Optional[str] = None
    distribution: Optional[Dict[str, int]] = None
    content: Optional[Dict[str, Any]] = None
    updated_at: Optional[datetime] = None
    questions: List[ExamQuestionResponse] = []


class QuickSaveResponse(BaseModel):
    id: str
    title: str


# =============================================================================
# Courses / auth
# =============================================================================

class CreateCourseRequest(RequestModel):
    name: str = Field(min_length=1)


class CourseResponse(BaseModel):
    id: str
    name: str
    teacher_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MockLoginRequest(BaseModel):
    user_id: str = Field(min_length=1)
    roles: List[str] = ["teacher"]
