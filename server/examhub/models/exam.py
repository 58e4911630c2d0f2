import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Boolean, Index, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from examhub.database import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


class ExamStatus(str, enum.Enum):
    SAVED = "Saved"
    PUBLISHED = "Published"


class QuestionKind(str, enum.Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    OPEN_ANALYSIS = "open_analysis"
    OPEN_EXERCISE = "open_exercise"


class Exam(Base):
    """Exams owned by a teacher within a course"""
    __tablename__ = "exams"

    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(String, nullable=False)
    status = Column(
        SQLEnum(ExamStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ExamStatus.SAVED,
    )
    class_id = Column(String(36), ForeignKey("courses.id"), nullable=True, index=True)
    teacher_id = Column(String, nullable=False, index=True)

    # Creation parameters
    subject = Column(String, nullable=True)
    difficulty = Column(String, nullable=True)
    attempts = Column(Integer, nullable=True)
    total_questions = Column(Integer, nullable=True)
    time_minutes = Column(Integer, nullable=True)
    reference = Column(Text, nullable=True)
    distribution = Column(JSON, nullable=True)  # {kind: count}

    # Denormalized snapshot written by quick-save
    content = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=_now, server_default=func.now(), onupdate=_now)

    # Relationships
    course = relationship("Course", back_populates="exams")
    questions = relationship(
        "ExamQuestion",
        back_populates="exam",
        order_by="ExamQuestion.order",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Exam {self.id} ({self.status})>"


class ExamQuestion(Base):
    """A question at a fixed position inside an exam"""
    __tablename__ = "exam_questions"
    __table_args__ = (Index("ix_exam_questions_exam_order", "exam_id", "order"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    exam_id = Column(String(36), ForeignKey("exams.id"), nullable=False, index=True)
    kind = Column(
        SQLEnum(QuestionKind, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    text = Column(Text, nullable=False)
    order = Column(Integer, nullable=False)

    # Kind-specific fields
    options = Column(JSON, nullable=True)  # multiple_choice: ["...", "..."]
    correct_option_index = Column(Integer, nullable=True)  # multiple_choice, 0-based
    correct_boolean = Column(Boolean, nullable=True)  # true_false
    expected_answer = Column(Text, nullable=True)  # open_analysis / open_exercise

    created_at = Column(DateTime(timezone=True), default=_now, server_default=func.now())

    # Relationships
    exam = relationship("Exam", back_populates="questions")
