"""
Query handlers.

Both queries are ownership-scoped: the caller's teacher id is required and
compared explicitly against the exam's owner.
"""
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from examhub.errors import AccessDenied, NotFound
from examhub.models.exam import Exam
from examhub.repositories import ExamRepository


def load_owned_exam(repo: ExamRepository, exam_id: str, teacher_id: Optional[str]) -> Exam:
    """Return the exam if `teacher_id` owns it; NotFound and AccessDenied stay distinct."""
    if not teacher_id:
        raise AccessDenied("Missing caller identity")
    exam = repo.get(exam_id)
    if exam is None:
        raise NotFound(f"Exam {exam_id} not found", message="Exam not found")
    if exam.teacher_id != teacher_id:
        raise AccessDenied("Exam is owned by another teacher", message="Access denied")
    return exam


@dataclass
class GetExamByIdQuery:
    exam_id: str
    teacher_id: Optional[str]


class GetExamByIdQueryHandler:
    def __init__(self, db: Session):
        self.exams = ExamRepository(db)

    def execute(self, query: GetExamByIdQuery) -> Exam:
        return load_owned_exam(self.exams, query.exam_id, query.teacher_id)


@dataclass
class ListCourseExamsQuery:
    course_id: str
    teacher_id: Optional[str]


class ListCourseExamsQueryHandler:
    def __init__(self, db: Session):
        self.exams = ExamRepository(db)

    def execute(self, query: ListCourseExamsQuery) -> List[Exam]:
        if not query.teacher_id:
            raise AccessDenied("Missing caller identity")
        return self.exams.list_by_class_owned(query.course_id, query.teacher_id)
