"""
Course persistence.
"""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from examhub.models.course import Course


class CourseRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, course_id: str) -> Optional[Course]:
        return self.db.get(Course, course_id)

    def first_created(self) -> Optional[Course]:
        """Oldest course in the whole system (quick-save legacy fallback only)."""
        stmt = select(Course).order_by(Course.created_at.asc(), Course.id.asc()).limit(1)
        return self.db.scalar(stmt)

    def list_by_teacher(self, teacher_id: str) -> List[Course]:
        stmt = select(Course).where(Course.teacher_id == teacher_id).order_by(Course.created_at.asc())
        return list(self.db.scalars(stmt).all())

    def create(self, name: str, teacher_id: str) -> Course:
        course = Course(name=name, teacher_id=teacher_id)
        self.db.add(course)
        self.db.commit()
        self.db.refresh(course)
        return course
