import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from examhub.database import Base


class Course(Base):
    """Courses (classes) taught by a teacher"""
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    teacher_id = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), server_default=func.now(), index=True)

    # Relationships
    exams = relationship("Exam", back_populates="course")

    def __repr__(self):
        return f"<Course {self.name} ({self.teacher_id})>"
