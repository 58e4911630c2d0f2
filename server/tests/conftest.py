import os

# Must be set before examhub.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("OPENAI_API_KEY", "")
os.environ["QUICK_SAVE_COURSE_FALLBACK"] = "false"
os.environ["DEBUG"] = "false"

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from examhub.auth import create_token
from examhub.database import drop_db, init_db
from examhub.generators import QUESTION_KINDS
from examhub.main import app
from examhub.schemas import Distribution, GeneratedQuestion
from examhub.services.question_generation import QuestionGenerator, get_question_generator


class FakeQuestionGenerator(QuestionGenerator):
    """Returns canned questions matching the requested distribution and records every call."""

    def __init__(self):
        self.calls = []

    async def generate(
        self,
        subject: str,
        difficulty: str,
        total_questions: int,
        reference: Optional[str],
        distribution: Distribution,
        language: str = "es",
    ) -> List[GeneratedQuestion]:
        self.calls.append({"subject": subject, "total_questions": total_questions, "distribution": distribution})
        questions = []
        for kind in QUESTION_KINDS:
            for i in range(distribution.count_for(kind)):
                extra = {}
                if kind.value == "multiple_choice":
                    extra = {"options": ["a", "b", "c", "d"], "correct_option_index": 0}
                elif kind.value == "true_false":
                    extra = {"correct_boolean": True}
                else:
                    extra = {"expected_answer": "respuesta"}
                questions.append(
                    GeneratedQuestion(id=f"fake_{kind.value}_{len(self.calls)}_{i}", type=kind, text=f"{subject} {i}", **extra)
                )
        return questions


@pytest.fixture(autouse=True)
def fresh_db():
    drop_db()
    init_db()
    yield
    drop_db()


@pytest.fixture
def fake_generator():
    return FakeQuestionGenerator()


@pytest.fixture
def client(fake_generator):
    app.dependency_overrides[get_question_generator] = lambda: fake_generator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_header(teacher_id: str) -> dict:
    return {"Authorization": f"Bearer {create_token(teacher_id)}"}


@pytest.fixture
def auth_for():
    return auth_header


@pytest.fixture
def teacher_a():
    return auth_header("teacher-a")


@pytest.fixture
def teacher_b():
    return auth_header("teacher-b")


@pytest.fixture
def course_a(client, teacher_a):
    r = client.post("/api/courses", json={"name": "Matemáticas 1"}, headers=teacher_a)
    assert r.status_code == 201
    return r.json()["data"]


@pytest.fixture
def exam_payload():
    return {
        "subject": "Álgebra lineal",
        "difficulty": "medio",
        "attempts": 2,
        "totalQuestions": 5,
        "timeMinutes": 60,
        "reference": "Capítulo 3",
        "distribution": {"multipleChoice": 2, "trueFalse": 1, "openAnalysis": 1, "openExercise": 1},
    }


@pytest.fixture
def exam_a(client, teacher_a, course_a, exam_payload):
    r = client.post("/api/exams", json={**exam_payload, "classId": course_a["id"]}, headers=teacher_a)
    assert r.status_code == 201
    return r.json()["data"]


@pytest.fixture
def anyio_backend():
    return "asyncio"
