"""
Models package initialization
Import all models here to ensure they are registered with SQLAlchemy
"""

from examhub.models.course import Course
from examhub.models.exam import Exam, ExamQuestion, ExamStatus, QuestionKind

__all__ = [
    "Course",
    "Exam",
    "ExamQuestion",
    "ExamStatus",
    "QuestionKind",
]
