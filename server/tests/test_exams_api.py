"""Create-exam and generate-questions endpoints."""
import pytest


class TestCreateExam:
    def test_create_exam_with_matching_distribution(self, client, teacher_a, exam_payload):
        r = client.post("/api/exams", json=exam_payload, headers=teacher_a)
        assert r.status_code == 201
        body = r.json()
        assert body["status_code"] == 201
        assert body["path"] == "/api/exams"
        assert body["data"]["status"] == "Saved"
        assert body["data"]["teacher_id"] == "teacher-a"
        assert body["data"]["title"] == "Álgebra lineal"

    def test_snake_case_body_is_accepted(self, client, teacher_a):
        payload = {
            "subject": "Historia",
            "difficulty": "fácil",
            "attempts": 1,
            "total_questions": 3,
            "time_minutes": 45,
            "distribution": {"multiple_choice": 3},
        }
        r = client.post("/api/exams", json=payload, headers=teacher_a)
        assert r.status_code == 201
        assert r.json()["data"]["total_questions"] == 3

    def test_distribution_mismatch_is_rejected(self, client, teacher_a, exam_payload):
        exam_payload["distribution"]["openExercise"] = 2
        r = client.post("/api/exams", json=exam_payload, headers=teacher_a)
        assert r.status_code == 400
        body = r.json()
        assert body["error"]["kind"] == "validation"
        assert "6" in body["error"]["detail"] and "5" in body["error"]["detail"]
        assert "data" not in body

    def test_mismatch_persists_nothing(self, client, teacher_a, course_a, exam_payload):
        exam_payload["distribution"]["openExercise"] = 2
        client.post("/api/exams", json={**exam_payload, "classId": course_a["id"]}, headers=teacher_a)
        r = client.get(f"/api/courses/{course_a['id']}/exams", headers=teacher_a)
        assert r.json()["data"] == []

    @pytest.mark.parametrize("total", [0, -3])
    def test_non_positive_total_is_rejected(self, client, teacher_a, exam_payload, total):
        exam_payload["totalQuestions"] = total
        exam_payload["distribution"] = {}
        r = client.post("/api/exams", json=exam_payload, headers=teacher_a)
        assert r.status_code == 400
        assert r.json()["error"]["kind"] == "validation"

    def test_attempts_out_of_range_is_a_validation_error(self, client, teacher_a, exam_payload):
        exam_payload["attempts"] = 4
        r = client.post("/api/exams", json=exam_payload, headers=teacher_a)
        assert r.status_code == 400
        assert r.json()["error"]["kind"] == "validation"

    def test_reference_longer_than_limit_is_rejected(self, client, teacher_a, exam_payload):
        exam_payload["reference"] = "x" * 1001
        r = client.post("/api/exams", json=exam_payload, headers=teacher_a)
        assert r.status_code == 400

    def test_course_of_another_teacher_is_denied(self, client, teacher_b, course_a, exam_payload):
        r = client.post("/api/exams", json={**exam_payload, "classId": course_a["id"]}, headers=teacher_b)
        assert r.status_code == 403
        assert r.json()["error"]["kind"] == "access_denied"

    def test_unknown_course_is_not_found(self, client, teacher_a, exam_payload):
        r = client.post("/api/exams", json={**exam_payload, "classId": "nope"}, headers=teacher_a)
        assert r.status_code == 404

    def test_missing_token_is_access_denied(self, client, exam_payload):
        r = client.post("/api/exams", json=exam_payload)
        assert r.status_code == 403
        assert r.json()["error"]["kind"] == "access_denied"

    def test_invalid_token_is_unauthenticated(self, client, exam_payload):
        r = client.post("/api/exams", json=exam_payload, headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401
        assert r.json()["error"]["kind"] == "unauthenticated"


class TestGenerateQuestions:
    def test_generates_grouped_questions(self, client, teacher_a, fake_generator):
        payload = {
            "subject": "Biología",
            "difficulty": "medio",
            "totalQuestions": 5,
            "distribution": {"multipleChoice": 2, "trueFalse": 1, "openAnalysis": 1, "openExercise": 1},
        }
        r = client.post("/api/exams/questions", json=payload, headers=teacher_a)
        assert r.status_code == 200
        grouped = r.json()["data"]["questions"]
        assert [len(grouped[k]) for k in ("multiple_choice", "true_false", "open_analysis", "open_exercise")] == [2, 1, 1, 1]
        assert all(q["type"] == "multiple_choice" for q in grouped["multiple_choice"])
        assert len(fake_generator.calls) == 1

    def test_mismatch_never_calls_generator(self, client, teacher_a, fake_generator):
        payload = {
            "subject": "Biología",
            "difficulty": "medio",
            "totalQuestions": 5,
            "distribution": {"multipleChoice": 2, "trueFalse": 1, "openAnalysis": 1, "openExercise": 2},
        }
        r = client.post("/api/exams/questions", json=payload, headers=teacher_a)
        assert r.status_code == 400
        assert fake_generator.calls == []

    def test_missing_distribution_is_rejected(self, client, teacher_a, fake_generator):
        r = client.post(
            "/api/exams/questions",
            json={"subject": "Biología", "difficulty": "medio", "totalQuestions": 2},
            headers=teacher_a,
        )
        assert r.status_code == 400
        assert fake_generator.calls == []

    def test_zero_total_is_rejected(self, client, teacher_a, fake_generator):
        r = client.post(
            "/api/exams/questions",
            json={"subject": "Biología", "difficulty": "medio", "totalQuestions": 0, "distribution": {}},
            headers=teacher_a,
        )
        assert r.status_code == 400
        assert fake_generator.calls == []


class TestEnvelope:
    def test_correlation_id_is_echoed(self, client, teacher_a):
        r = client.get("/api/courses", headers={**teacher_a, "X-Correlation-ID": "abc-123"})
        assert r.headers["X-Correlation-ID"] == "abc-123"
        assert r.json()["correlation_id"] == "abc-123"

    def test_correlation_id_is_generated(self, client, teacher_a):
        r = client.get("/api/courses", headers=teacher_a)
        cid = r.json()["correlation_id"]
        assert cid and r.headers["X-Correlation-ID"] == cid

    def test_health_needs_no_token(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_error_envelope_carries_correlation_header(self, client, teacher_a):
        r = client.post("/api/exams", json={}, headers={**teacher_a, "X-Correlation-ID": "err-1"})
        assert r.status_code == 400
        assert r.headers["X-Correlation-ID"] == "err-1"
        assert r.json()["correlation_id"] == "err-1"

    def test_unexpected_error_is_internal_with_message(self, fake_generator, teacher_a, monkeypatch):
        from fastapi.testclient import TestClient

        from examhub.main import app
        from examhub.repositories.course_repository import CourseRepository

        def explode(self, teacher_id):
            raise RuntimeError("db exploded")

        monkeypatch.setattr(CourseRepository, "list_by_teacher", explode)
        with TestClient(app, raise_server_exceptions=False) as c:
            r = c.get("/api/courses", headers={**teacher_a, "X-Correlation-ID": "cid-500"})

        assert r.status_code == 500
        body = r.json()
        assert body["status_code"] == 500
        assert body["error"]["kind"] == "internal"
        assert body["message"] == "db exploded"
        assert body["error"]["detail"] == "db exploded"
        assert body["correlation_id"] == "cid-500"
        assert r.headers["X-Correlation-ID"] == "cid-500"
