from examhub.repositories.exam_repository import ExamRepository
from examhub.repositories.course_repository import CourseRepository

__all__ = ["ExamRepository", "CourseRepository"]
