"""
Command handlers.

Each command is a small dataclass and each handler validates it before
touching the store or the generation collaborator.
"""
import logging
import random
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from examhub.errors import AccessDenied, NotFound, ValidationFailed
from examhub.models.course import Course
from examhub.models.exam import Exam, ExamQuestion, ExamStatus, QuestionKind
from examhub.repositories import CourseRepository, ExamRepository
from examhub.schemas import Distribution, GeneratedQuestion, GroupedQuestions
from examhub.services.queries import load_owned_exam
from examhub.services.question_generation import QuestionGenerator

logger = logging.getLogger(__name__)

# Fields that a question of each kind may carry besides its text.
KIND_FIELDS = {
    QuestionKind.MULTIPLE_CHOICE: ("options", "correct_option_index"),
    QuestionKind.TRUE_FALSE: ("correct_boolean",),
    QuestionKind.OPEN_ANALYSIS: ("expected_answer",),
    QuestionKind.OPEN_EXERCISE: ("expected_answer",),
}


def sum_distribution(distribution: Optional[Distribution]) -> int:
    return distribution.total() if distribution is not None else 0


def validate_distribution(total_questions: int, distribution: Optional[Distribution], required: bool = True):
    """
    Check the requested total against the per-kind distribution.

    An absent distribution counts as zero when `required` is set; otherwise
    only the total is checked.
    """
    if total_questions is None or total_questions <= 0:
        raise ValidationFailed(
            f"total_questions must be greater than 0 (got {total_questions})",
            message="total_questions must be greater than 0",
        )
    if distribution is None and not required:
        return
    distributed = sum_distribution(distribution)
    if distributed != total_questions:
        raise ValidationFailed(
            f"Distribution sums to {distributed} but total_questions is {total_questions}",
            message="Distribution does not match total_questions",
        )


def group_by_kind(questions: List[GeneratedQuestion]) -> GroupedQuestions:
    grouped = GroupedQuestions()
    for question in questions:
        getattr(grouped, question.type.value).append(question)
    return grouped


def _require_owned_course(courses: CourseRepository, course_id: str, teacher_id: str) -> Course:
    course = courses.get(course_id)
    if course is None:
        raise NotFound(f"Course {course_id} not found", message="Course not found")
    if course.teacher_id != teacher_id:
        raise AccessDenied("Course is owned by another teacher", message="Access denied")
    return course


def _check_multiple_choice(options: Optional[List[str]], correct_option_index: Optional[int]):
    if not options or len(options) < 2:
        raise ValidationFailed("multiple_choice questions need at least two options")
    if correct_option_index is not None and not 0 <= correct_option_index < len(options):
        raise ValidationFailed(
            f"correct_option_index {correct_option_index} is out of range for {len(options)} options"
        )


# =============================================================================
# Create / generate
# =============================================================================

@dataclass
class CreateExamCommand:
    teacher_id: str
    subject: str
    difficulty: str
    attempts: int
    total_questions: int
    time_minutes: int
    reference: Optional[str] = None
    distribution: Optional[Distribution] = None
    title: Optional[str] = None
    class_id: Optional[str] = None


class CreateExamCommandHandler:
    def __init__(self, db: Session):
        self.exams = ExamRepository(db)
        self.courses = CourseRepository(db)

    def execute(self, cmd: CreateExamCommand) -> Exam:
        validate_distribution(cmd.total_questions, cmd.distribution, required=False)
        if cmd.class_id:
            _require_owned_course(self.courses, cmd.class_id, cmd.teacher_id)

        exam = Exam(
            title=cmd.title or cmd.subject,
            status=ExamStatus.SAVED,
            class_id=cmd.class_id,
            teacher_id=cmd.teacher_id,
            subject=cmd.subject,
            difficulty=cmd.difficulty,
            attempts=cmd.attempts,
            total_questions=cmd.total_questions,
            time_minutes=cmd.time_minutes,
            reference=cmd.reference,
            distribution=cmd.distribution.model_dump() if cmd.distribution else None,
        )
        return self.exams.create(exam)


@dataclass
class GenerateQuestionsCommand:
    subject: str
    difficulty: str
    total_questions: int
    reference: Optional[str] = None
    distribution: Optional[Distribution] = None
    language: str = "es"


class GenerateQuestionsCommandHandler:
    def __init__(self, generator: QuestionGenerator):
        self.generator = generator

    async def execute(self, cmd: GenerateQuestionsCommand) -> GroupedQuestions:
        validate_distribution(cmd.total_questions, cmd.distribution, required=True)
        flat = await self.generator.generate(
            subject=cmd.subject,
            difficulty=cmd.difficulty,
            total_questions=cmd.total_questions,
            reference=cmd.reference,
            distribution=cmd.distribution,
            language=cmd.language,
        )
        return group_by_kind(flat)


# =============================================================================
# Questions
# =============================================================================

@dataclass
class AddExamQuestionCommand:
    exam_id: str
    teacher_id: str
    position: int
    kind: QuestionKind
    text: str
    options: Optional[List[str]] = None
    correct_option_index: Optional[int] = None
    correct_boolean: Optional[bool] = None
    expected_answer: Optional[str] = None


class AddExamQuestionCommandHandler:
    def __init__(self, db: Session):
        self.exams = ExamRepository(db)

    def execute(self, cmd: AddExamQuestionCommand) -> ExamQuestion:
        load_owned_exam(self.exams, cmd.exam_id, cmd.teacher_id)
        if cmd.position < 0:
            raise ValidationFailed("position must be >= 0")

        extra = {name: getattr(cmd, name) for name in KIND_FIELDS[cmd.kind]}
        if cmd.kind == QuestionKind.MULTIPLE_CHOICE:
            _check_multiple_choice(extra["options"], extra["correct_option_index"])

        question = ExamQuestion(kind=cmd.kind, text=cmd.text, **extra)
        return self.exams.insert_question(cmd.exam_id, question, cmd.position)


@dataclass
class UpdateExamQuestionCommand:
    question_id: str
    teacher_id: str
    patch: Dict[str, Any] = field(default_factory=dict)


class UpdateExamQuestionCommandHandler:
    def __init__(self, db: Session):
        self.exams = ExamRepository(db)

    def execute(self, cmd: UpdateExamQuestionCommand) -> ExamQuestion:
        question = self.exams.get_question(cmd.question_id)
        if question is None:
            raise NotFound(f"Question {cmd.question_id} not found", message="Question not found")
        load_owned_exam(self.exams, question.exam_id, cmd.teacher_id)

        allowed = ("text",) + KIND_FIELDS[question.kind]
        patch = {k: v for k, v in cmd.patch.items() if k in allowed and v is not None}
        ignored = sorted(set(cmd.patch) - set(patch))
        if ignored:
            logger.debug("Ignoring fields %s for %s question %s", ignored, question.kind.value, question.id)

        if question.kind == QuestionKind.MULTIPLE_CHOICE and patch:
            _check_multiple_choice(
                patch.get("options", question.options),
                patch.get("correct_option_index", question.correct_option_index),
            )
        if not patch:
            return question
        return self.exams.update_question(question, patch)


# =============================================================================
# Exam metadata
# =============================================================================

@dataclass
class UpdateExamMetaCommand:
    exam_id: str
    teacher_id: str
    patch: Dict[str, Any] = field(default_factory=dict)


class UpdateExamMetaCommandHandler:
    def __init__(self, db: Session):
        self.exams = ExamRepository(db)
        self.courses = CourseRepository(db)

    def execute(self, cmd: UpdateExamMetaCommand) -> Exam:
        load_owned_exam(self.exams, cmd.exam_id, cmd.teacher_id)
        patch = {k: v for k, v in cmd.patch.items() if v is not None}
        if "class_id" in patch:
            if not str(patch["class_id"]).strip():
                raise ValidationFailed("class_id must not be empty", message="class_id must not be empty")
            _require_owned_course(self.courses, patch["class_id"], cmd.teacher_id)
        exam = self.exams.update_meta_owned(cmd.exam_id, cmd.teacher_id, patch)
        if exam is None:
            raise NotFound(f"Exam {cmd.exam_id} not found", message="Exam not found")
        return exam


# =============================================================================
# Quick-save
# =============================================================================

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


def _random_suffix() -> str:
    return "".join(random.choices(_SUFFIX_ALPHABET, k=4))


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def normalize_quick_save_questions(
    raw: Any,
    now_ms: Optional[int] = None,
    suffix: Callable[[], str] = _random_suffix,
) -> List[Dict[str, Any]]:
    """
    Normalize client questions into the stored snapshot shape.

    Missing ids become `q_<ms>_<kind>_<index>`; an id that collides with an earlier one
    gets `_xxxx` random suffixes until it is unique within the batch.
    """
    if not isinstance(raw, list):
        return []
    if now_ms is None:
        now_ms = int(time.time() * 1000)

    seen = set()
    normalized = []
    for index, item in enumerate(raw):
        item = item if isinstance(item, dict) else {}
        kind = item.get("type") or QuestionKind.OPEN_ANALYSIS.value

        qid = str(item["id"]) if item.get("id") is not None else f"q_{now_ms}_{kind}_{index}"
        while qid in seen:
            qid = f"{qid}_{suffix()}"
        seen.add(qid)

        question = {"id": qid, "type": kind, "text": str(item.get("text") or "")}
        if isinstance(item.get("options"), list):
            question["options"] = [str(option) for option in item["options"]]
        for key in ("correct_option_index", "correctOptionIndex"):
            if isinstance(item.get(key), int):
                question["correct_option_index"] = item[key]
                break
        for key in ("correct_boolean", "correctBoolean", "answer"):
            if isinstance(item.get(key), bool):
                question["correct_boolean"] = item[key]
                break
        for key in ("expected_answer", "expectedAnswer"):
            if item.get(key) is not None:
                question["expected_answer"] = str(item[key])
                break
        if item.get("include") is not None:
            question["include"] = bool(item["include"])
        normalized.append(question)
    return normalized


@dataclass
class QuickSaveCommand:
    caller_id: str
    body: Dict[str, Any] = field(default_factory=dict)


class QuickSaveCommandHandler:
    """
    Persist a client-built exam snapshot in one step.

    Quick-save does not check course ownership. A course is required unless
    the first-course fallback is enabled.
    """

    def __init__(self, db: Session, allow_course_fallback: bool = False):
        self.exams = ExamRepository(db)
        self.courses = CourseRepository(db)
        self.allow_course_fallback = allow_course_fallback

    def execute(self, cmd: QuickSaveCommand) -> Exam:
        body = cmd.body or {}
        title = str(body.get("title") or "Exam")
        course_id = body.get("course_id") or body.get("courseId")
        course_id = str(course_id) if course_id else None
        teacher_id = body.get("teacher_id") or body.get("teacherId")
        teacher_id = str(teacher_id) if teacher_id else None

        if course_id:
            if self.courses.get(course_id) is None:
                raise NotFound(f"Course {course_id} not found", message="Course not found")
        elif self.allow_course_fallback:
            first = self.courses.first_created()
            if first is None:
                raise ValidationFailed(
                    "No course_id was sent and no course exists. Create a course or send course_id.",
                    message="No course available",
                )
            logger.warning("Quick-save without course_id; falling back to course %s", first.id)
            course_id = first.id
            teacher_id = teacher_id or first.teacher_id
        else:
            raise ValidationFailed("course_id is required", message="course_id is required")

        content = body.get("content") if isinstance(body.get("content"), dict) else None
        raw_questions = body.get("questions")
        if raw_questions is None and content is not None:
            raw_questions = content.get("questions")
        questions = normalize_quick_save_questions(raw_questions)

        if content is None:
            content = {
                "subject": str(body.get("subject") or "Tema general"),
                "difficulty": str(body.get("difficulty") or "medio"),
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        else:
            content = dict(content)
        content["questions"] = questions

        exam = Exam(
            title=title,
            status=ExamStatus.SAVED,
            class_id=course_id,
            teacher_id=teacher_id or cmd.caller_id,
            subject=_optional_str(content.get("subject")),
            difficulty=_optional_str(content.get("difficulty")),
            total_questions=len(questions),
            content=content,
        )
        return self.exams.create(exam)
