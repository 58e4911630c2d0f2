"""Course endpoints and the development login."""
from examhub.auth import decode_token
from examhub.config import settings


def test_create_and_list_courses(client, teacher_a, teacher_b):
    client.post("/api/courses", json={"name": "Matemáticas"}, headers=teacher_a)
    client.post("/api/courses", json={"name": "Lengua"}, headers=teacher_a)
    client.post("/api/courses", json={"name": "Ajeno"}, headers=teacher_b)

    r = client.get("/api/courses", headers=teacher_a)
    assert r.status_code == 200
    assert [c["name"] for c in r.json()["data"]] == ["Matemáticas", "Lengua"]


def test_blank_course_name_is_rejected(client, teacher_a):
    r = client.post("/api/courses", json={"name": ""}, headers=teacher_a)
    assert r.status_code == 400


def test_mock_login_disabled_outside_debug(client):
    r = client.post("/api/auth/mock-login", json={"user_id": "dev"})
    assert r.status_code == 404


def test_mock_login_issues_usable_token(client, monkeypatch):
    monkeypatch.setattr(settings, "debug", True)
    r = client.post("/api/auth/mock-login", json={"user_id": "dev", "roles": ["teacher"]})
    assert r.status_code == 200
    token = r.json()["data"]["access_token"]
    assert decode_token(token).sub == "dev"
    assert client.get("/api/courses", headers={"Authorization": f"Bearer {token}"}).status_code == 200
