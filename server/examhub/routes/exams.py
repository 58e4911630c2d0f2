import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from examhub.auth import TokenData, get_current_teacher
from examhub.config import settings
from examhub.database import get_db
from examhub.envelope import get_correlation_id, success
from examhub.schemas import (
    AddExamQuestionRequest,
    CreateExamRequest,
    ExamQuestionResponse,
    ExamResponse,
    ExamSummary,
    GenerateQuestionsRequest,
    QuickSaveResponse,
    UpdateExamMetaRequest,
    UpdateExamQuestionRequest,
)
from examhub.services.commands import (
    AddExamQuestionCommand,
    AddExamQuestionCommandHandler,
    CreateExamCommand,
    CreateExamCommandHandler,
    GenerateQuestionsCommand,
    GenerateQuestionsCommandHandler,
    QuickSaveCommand,
    QuickSaveCommandHandler,
    UpdateExamMetaCommand,
    UpdateExamMetaCommandHandler,
    UpdateExamQuestionCommand,
    UpdateExamQuestionCommandHandler,
)
from examhub.services.queries import GetExamByIdQuery, GetExamByIdQueryHandler
from examhub.services.question_generation import QuestionGenerator, get_question_generator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Exams"])


@router.post("")
def create_exam(
    request: Request,
    payload: CreateExamRequest,
    teacher: TokenData = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """Create an exam owned by the caller. Status starts as Saved."""
    cid = get_correlation_id(request)
    logger.info(
        "[%s] createExam -> subject=%r, totalQuestions=%s, classId=%s",
        cid, payload.subject, payload.total_questions, payload.class_id,
    )
    exam = CreateExamCommandHandler(db).execute(
        CreateExamCommand(
            teacher_id=teacher.sub,
            distribution=payload.distribution,
            **payload.model_dump(exclude={"distribution"}),
        )
    )
    logger.info("[%s] createExam <- id=%s", cid, exam.id)
    return success(request, ExamSummary.model_validate(exam), "Exam created", status_code=201)


@router.post("/questions")
async def generate_questions(
    request: Request,
    payload: GenerateQuestionsRequest,
    teacher: TokenData = Depends(get_current_teacher),
    generator: QuestionGenerator = Depends(get_question_generator),
):
    """Generate questions grouped by kind. Nothing is persisted."""
    cid = get_correlation_id(request)
    logger.info(
        "[%s] generateQuestions -> subject=%r, difficulty=%r, totalQuestions=%s",
        cid, payload.subject, payload.difficulty, payload.total_questions,
    )
    grouped = await GenerateQuestionsCommandHandler(generator).execute(
        GenerateQuestionsCommand(distribution=payload.distribution, **payload.model_dump(exclude={"distribution"}))
    )
    logger.info(
        "[%s] generateQuestions <- mc=%d, tf=%d, oa=%d, oe=%d",
        cid,
        len(grouped.multiple_choice),
        len(grouped.true_false),
        len(grouped.open_analysis),
        len(grouped.open_exercise),
    )
    return success(request, {"questions": grouped}, "Questions generated")


@router.post("/quick-save")
def quick_save(
    request: Request,
    body: Optional[Dict[str, Any]] = Body(default=None),
    teacher: TokenData = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    cid = get_correlation_id(request)
    logger.info("[%s] quickSave -> title=%r", cid, (body or {}).get("title"))
    handler = QuickSaveCommandHandler(db, allow_course_fallback=settings.quick_save_course_fallback)
    exam = handler.execute(QuickSaveCommand(caller_id=teacher.sub, body=body or {}))
    logger.info("[%s] quickSave <- id=%s", cid, exam.id)
    return success(request, QuickSaveResponse(id=exam.id, title=exam.title), "Quick exam saved")


@router.put("/questions/{question_id}")
def update_question(
    request: Request,
    question_id: str,
    payload: UpdateExamQuestionRequest,
    teacher: TokenData = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    cid = get_correlation_id(request)
    patch = payload.model_dump(exclude_unset=True)
    logger.info("[%s] updateQuestion -> id=%s, fields=%s", cid, question_id, sorted(patch))
    question = UpdateExamQuestionCommandHandler(db).execute(
        UpdateExamQuestionCommand(question_id=question_id, teacher_id=teacher.sub, patch=patch)
    )
    return success(request, ExamQuestionResponse.model_validate(question), "Question updated")


@router.post("/{exam_id}/questions")
def add_question(
    request: Request,
    exam_id: str,
    payload: AddExamQuestionRequest,
    teacher: TokenData = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """Insert a question at `position`, shifting the following questions down."""
    cid = get_correlation_id(request)
    logger.info("[%s] addQuestion -> examId=%s, kind=%s, position=%d", cid, exam_id, payload.kind.value, payload.position)
    question = AddExamQuestionCommandHandler(db).execute(
        AddExamQuestionCommand(exam_id=exam_id, teacher_id=teacher.sub, **payload.model_dump())
    )
    logger.info("[%s] addQuestion <- id=%s, order=%d", cid, question.id, question.order)
    return success(request, ExamQuestionResponse.model_validate(question), "Question added", status_code=201)


@router.patch("/{exam_id}")
def update_exam_meta(
    request: Request,
    exam_id: str,
    payload: UpdateExamMetaRequest,
    teacher: TokenData = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    exam = UpdateExamMetaCommandHandler(db).execute(
        UpdateExamMetaCommand(exam_id=exam_id, teacher_id=teacher.sub, patch=payload.model_dump(exclude_unset=True))
    )
    return success(request, ExamSummary.model_validate(exam), "Exam updated")


@router.get("/{exam_id}")
def get_exam(
    request: Request,
    exam_id: str,
    teacher: TokenData = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    logger.info("[%s] getExam -> id=%s", get_correlation_id(request), exam_id)
    exam = GetExamByIdQueryHandler(db).execute(GetExamByIdQuery(exam_id=exam_id, teacher_id=teacher.sub))
    data = ExamResponse.model_validate(exam)
    data.questions.sort(key=lambda q: q.order)
    return success(request, data, "Exam retrieved")
