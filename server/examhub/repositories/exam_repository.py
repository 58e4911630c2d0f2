"""
Exam Aggregate Store.

Persistence for exams and their ordered question lists. Reads that take a
teacher id are ownership-scoped in the query itself; the unscoped `get`
exists so callers can tell "absent" apart from "owned by someone else".
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from examhub.models.exam import Exam, ExamQuestion


class ExamRepository:
    def __init__(self, db: Session):
        self.db = db

    # -- exams ---------------------------------------------------------------

    def create(self, exam: Exam) -> Exam:
        self.db.add(exam)
        self.db.commit()
        self.db.refresh(exam)
        return exam

    def get(self, exam_id: str) -> Optional[Exam]:
        stmt = select(Exam).where(Exam.id == exam_id).options(selectinload(Exam.questions))
        return self.db.scalar(stmt)

    def find_by_id_owned(self, exam_id: str, teacher_id: str) -> Optional[Exam]:
        stmt = (
            select(Exam)
            .where(Exam.id == exam_id, Exam.teacher_id == teacher_id)
            .options(selectinload(Exam.questions))
        )
        return self.db.scalar(stmt)

    def list_by_class_owned(self, class_id: str, teacher_id: str) -> List[Exam]:
        stmt = (
            select(Exam)
            .where(Exam.class_id == class_id, Exam.teacher_id == teacher_id)
            .order_by(Exam.created_at.desc(), Exam.id.desc())
        )
        return list(self.db.scalars(stmt).all())

    def update_meta_owned(self, exam_id: str, teacher_id: str, patch: Dict[str, Any]) -> Optional[Exam]:
        """Apply a title/status/class_id patch. Returns None when the caller does not own the exam."""
        exam = self.find_by_id_owned(exam_id, teacher_id)
        if exam is None:
            return None
        for key in ("title", "status", "class_id"):
            if key in patch:
                setattr(exam, key, patch[key])
        self.db.commit()
        self.db.refresh(exam)
        return exam

    # -- questions -----------------------------------------------------------

    def count_questions(self, exam_id: str) -> int:
        stmt = select(func.count()).select_from(ExamQuestion).where(ExamQuestion.exam_id == exam_id)
        return self.db.scalar(stmt) or 0

    def insert_question(self, exam_id: str, question: ExamQuestion, position: int) -> ExamQuestion:
        """
        Insert a question at `position`, shifting later questions down by one.

        `position` is clamped to [0, N]. Renumbering and insert share one
        transaction but nothing serializes concurrent edits on the same exam.
        """
        total = self.count_questions(exam_id)
        position = max(0, min(position, total))

        self.db.execute(
            update(ExamQuestion)
            .where(ExamQuestion.exam_id == exam_id, ExamQuestion.order >= position)
            .values(order=ExamQuestion.order + 1)
            .execution_options(synchronize_session="fetch")
        )
        question.exam_id = exam_id
        question.order = position
        self.db.add(question)
        self.db.commit()
        self.db.refresh(question)
        return question

    def get_question(self, question_id: str) -> Optional[ExamQuestion]:
        return self.db.get(ExamQuestion, question_id)

    def update_question(self, question: ExamQuestion, patch: Dict[str, Any]) -> ExamQuestion:
        for key, value in patch.items():
            setattr(question, key, value)
        self.db.commit()
        self.db.refresh(question)
        return question
