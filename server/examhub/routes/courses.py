import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from examhub.auth import TokenData, get_current_teacher
from examhub.database import get_db
from examhub.envelope import get_correlation_id, success
from examhub.repositories import CourseRepository
from examhub.schemas import CourseResponse, CreateCourseRequest, ExamSummary
from examhub.services.queries import ListCourseExamsQuery, ListCourseExamsQueryHandler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Courses"])


@router.get("")
def list_courses(
    request: Request,
    teacher: TokenData = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    courses = CourseRepository(db).list_by_teacher(teacher.sub)
    return success(request, [CourseResponse.model_validate(c) for c in courses], "Courses retrieved")


@router.post("")
def create_course(
    request: Request,
    payload: CreateCourseRequest,
    teacher: TokenData = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    course = CourseRepository(db).create(name=payload.name, teacher_id=teacher.sub)
    logger.info("[%s] createCourse <- id=%s", get_correlation_id(request), course.id)
    return success(request, CourseResponse.model_validate(course), "Course created", status_code=201)


@router.get("/{course_id}/exams")
def list_course_exams(
    request: Request,
    course_id: str,
    teacher: TokenData = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """List the caller's exams in a course, newest first."""
    cid = get_correlation_id(request)
    logger.info("[%s] listExamsByCourse -> courseId=%s", cid, course_id)
    exams = ListCourseExamsQueryHandler(db).execute(ListCourseExamsQuery(course_id=course_id, teacher_id=teacher.sub))
    logger.info("[%s] listExamsByCourse <- count=%d", cid, len(exams))
    return success(request, [ExamSummary.model_validate(e) for e in exams], "Exams retrieved")
