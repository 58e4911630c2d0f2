"""Quick-save endpoint and question normalization."""
import pytest

from examhub.config import settings
from examhub.services.commands import normalize_quick_save_questions


class TestNormalizeQuestions:
    def test_missing_ids_get_generated(self):
        out = normalize_quick_save_questions([{"type": "true_false", "text": "A"}, {"text": 42}], now_ms=1000)
        assert [q["id"] for q in out] == ["q_1000_true_false_0", "q_1000_open_analysis_1"]
        assert out[1]["type"] == "open_analysis"
        assert out[1]["text"] == "42"

    def test_colliding_ids_get_suffixed(self):
        suffixes = iter(["aaaa", "bbbb"])
        out = normalize_quick_save_questions(
            [{"id": "x", "text": "1"}, {"id": "x", "text": "2"}, {"id": "x", "text": "3"}],
            now_ms=1,
            suffix=lambda: next(suffixes),
        )
        assert [q["id"] for q in out] == ["x", "x_aaaa", "x_bbbb"]

    def test_generated_base_colliding_with_supplied_id(self):
        out = normalize_quick_save_questions([{"id": "q_5_open_analysis_1"}, {}], now_ms=5)
        ids = [q["id"] for q in out]
        assert len(set(ids)) == 2
        assert ids[1].startswith("q_5_open_analysis_1_")

    def test_options_become_strings(self):
        out = normalize_quick_save_questions([{"type": "multiple_choice", "options": [1, True, "c"]}], now_ms=1)
        assert out[0]["options"] == ["1", "True", "c"]

    def test_non_list_yields_nothing(self):
        assert normalize_quick_save_questions(None) == []
        assert normalize_quick_save_questions({"a": 1}) == []


class TestQuickSaveEndpoint:
    def test_saves_with_course(self, client, teacher_a, course_a):
        body = {
            "title": "Rápido",
            "courseId": course_a["id"],
            "subject": "Química",
            "questions": [{"type": "true_false", "text": "El agua hierve a 100 °C"}, {"text": "Explica"}],
        }
        r = client.post("/api/exams/quick-save", json=body, headers=teacher_a)
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["title"] == "Rápido"

        exam = client.get(f"/api/exams/{data['id']}", headers=teacher_a).json()["data"]
        assert exam["status"] == "Saved"
        assert exam["content"]["subject"] == "Química"
        assert exam["content"]["difficulty"] == "medio"
        ids = [q["id"] for q in exam["content"]["questions"]]
        assert len(ids) == len(set(ids)) == 2

    def test_questions_inside_content(self, client, teacher_a, course_a):
        body = {"course_id": course_a["id"], "content": {"subject": "Arte", "questions": [{"text": "a"}, {"text": "b"}]}}
        r = client.post("/api/exams/quick-save", json=body, headers=teacher_a)
        exam = client.get(f"/api/exams/{r.json()['data']['id']}", headers=teacher_a).json()["data"]
        assert exam["title"] == "Exam"
        assert exam["content"]["subject"] == "Arte"
        assert len(exam["content"]["questions"]) == 2

    def test_scalar_fields_are_stored_as_text(self, client, teacher_a, course_a):
        body = {"title": 123, "courseId": course_a["id"], "subject": 5, "difficulty": 2}
        r = client.post("/api/exams/quick-save", json=body, headers=teacher_a)
        assert r.status_code == 200
        assert r.json()["data"]["title"] == "123"

        exam = client.get(f"/api/exams/{r.json()['data']['id']}", headers=teacher_a).json()["data"]
        assert exam["title"] == "123"
        assert exam["subject"] == "5"
        assert exam["difficulty"] == "2"
        assert exam["content"]["subject"] == "5"
        assert exam["content"]["difficulty"] == "2"

    def test_missing_course_is_a_validation_error(self, client, teacher_a, course_a):
        r = client.post("/api/exams/quick-save", json={"title": "Sin curso"}, headers=teacher_a)
        assert r.status_code == 400
        assert r.json()["error"]["kind"] == "validation"

    def test_unknown_course_is_not_found(self, client, teacher_a):
        r = client.post("/api/exams/quick-save", json={"courseId": "nope"}, headers=teacher_a)
        assert r.status_code == 404

    def test_fallback_borrows_first_course(self, client, auth_for, course_a, monkeypatch):
        monkeypatch.setattr(settings, "quick_save_course_fallback", True)
        caller = auth_for("teacher-z")
        r = client.post("/api/exams/quick-save", json={"title": "Prestado"}, headers=caller)
        assert r.status_code == 200
        # Owned by the borrowed course's teacher, so the caller cannot read it
        exam_id = r.json()["data"]["id"]
        assert client.get(f"/api/exams/{exam_id}", headers=caller).status_code == 403
        owner = auth_for(course_a["teacher_id"])
        exam = client.get(f"/api/exams/{exam_id}", headers=owner).json()["data"]
        assert exam["class_id"] == course_a["id"]

    def test_fallback_without_any_course(self, client, teacher_a, monkeypatch):
        monkeypatch.setattr(settings, "quick_save_course_fallback", True)
        r = client.post("/api/exams/quick-save", json={"title": "Nada"}, headers=teacher_a)
        assert r.status_code == 400

    @pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer broken"}])
    def test_requires_identity(self, client, headers):
        r = client.post("/api/exams/quick-save", json={}, headers=headers)
        assert r.status_code in (401, 403)
