from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import ADMIN_ID, FOUR_QUESTIONS, OTHER_ID, OWNER_ID
from quiz_engine.core.errors import DataCorruption, StorageFailure
from quiz_engine.db.session import get_db
from quiz_engine.main import app
from quiz_engine.models.category import Category


def _headers(user_id, role="user"):
    return {"X-User-Id": str(user_id), "X-User-Role": role}


@pytest.fixture()
def client(db, session_factory):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _create_quiz(client, questions=FOUR_QUESTIONS):
    res = client.post(
        "/api/quizzes",
        json={
            "title": "Capitals",
            "description": "warm-up",
            "questions": [{"text": t, "options": o, "correct_index": c} for t, o, c in questions],
        },
        headers=_headers(1),
    )
    assert res.status_code == 200
    return res.json()["data"]["quiz_id"]


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_submit_and_read_result_round_trip(client):
    quiz_id = _create_quiz(client)
    taking = client.get(f"/api/quizzes/{quiz_id}", headers=_headers(OWNER_ID)).json()["data"]
    q1, q2, q3, _ = [q["question_id"] for q in taking["questions"]]

    res = client.post(
        f"/api/quizzes/{quiz_id}/submit",
        json={
            "time_spent": 30,
            "answers": [
                {"question_id": q1, "answer_index": 1},
                {"question_id": q2, "answer_index": 0},
                {"question_id": q3, "answer_index": 0},
            ],
        },
        headers={**_headers(OWNER_ID), "X-Request-ID": "req-42"},
    )
    body = res.json()
    assert res.status_code == 200
    assert body["request_id"] == "req-42"
    assert body["error"] is None
    assert body["data"]["score"] == 50
    attempt_id = body["data"]["attempt_id"]

    res = client.get(f"/api/attempts/{attempt_id}/result", headers=_headers(OWNER_ID))
    data = res.json()["data"]
    assert res.status_code == 200
    assert (data["total_questions"], data["correct_answers"], data["wrong_answers"]) == (4, 2, 2)
    assert data["questions"][3]["chosen_index"] is None

    mine = client.get("/api/attempts", headers=_headers(OWNER_ID)).json()["data"]
    assert [a["attempt_id"] for a in mine] == [attempt_id]


def test_result_access_rules(client):
    quiz_id = _create_quiz(client)
    attempt_id = client.post(
        f"/api/quizzes/{quiz_id}/submit",
        json={"answers": []},
        headers=_headers(OWNER_ID),
    ).json()["data"]["attempt_id"]

    other = client.get(f"/api/attempts/{attempt_id}/result", headers=_headers(OTHER_ID))
    assert other.status_code == 403
    assert other.json()["error"]["code"] == "FORBIDDEN"
    assert other.json()["data"] is None

    admin = client.get(f"/api/attempts/{attempt_id}/result", headers=_headers(ADMIN_ID, "admin"))
    assert admin.status_code == 200
    assert admin.json()["data"]["user_id"] == OWNER_ID


def test_unauthenticated_request_is_rejected(client):
    res = client.get("/api/quizzes")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "HTTP_ERROR"


def test_unknown_quiz_maps_to_404(client):
    res = client.post("/api/quizzes/999/submit", json={"answers": []}, headers=_headers(OWNER_ID))
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


def test_bad_answer_payload_maps_to_422(client):
    quiz_id = _create_quiz(client)
    res = client.post(
        f"/api/quizzes/{quiz_id}/submit",
        json={"answers": [{"question_id": 1, "answer_index": -3}]},
        headers=_headers(OWNER_ID),
    )
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


def test_storage_failure_maps_to_503_with_retry_hint(client, monkeypatch):
    def _fail(*_args, **_kwargs):
        raise StorageFailure("Attempt could not be stored")

    monkeypatch.setattr("quiz_engine.api.routes.quizzes.submit_attempt", _fail)

    res = client.post("/api/quizzes/1/submit", json={"answers": []}, headers=_headers(OWNER_ID))
    assert res.status_code == 503
    assert res.headers["Retry-After"] == "1"
    assert res.json()["error"]["code"] == "STORAGE_FAILURE"


def test_data_corruption_maps_to_500(client, monkeypatch):
    def _fail(*_args, **_kwargs):
        raise DataCorruption("Question snapshot could not be parsed", details={"answer_id": 3})

    monkeypatch.setattr("quiz_engine.api.routes.attempts.get_result", _fail)

    res = client.get("/api/attempts/1/result", headers=_headers(OWNER_ID))
    assert res.status_code == 500
    assert res.json()["error"] == {
        "code": "DATA_CORRUPTION",
        "message": "Question snapshot could not be parsed",
        "details": {"answer_id": 3},
    }


def test_admin_without_role_header_stays_admin(client):
    quiz_id = _create_quiz(client)
    attempt_id = client.post(
        f"/api/quizzes/{quiz_id}/submit",
        json={"answers": []},
        headers=_headers(OWNER_ID),
    ).json()["data"]["attempt_id"]

    # Plain request with only the id header must not demote the stored admin.
    assert client.get("/api/quizzes", headers={"X-User-Id": str(ADMIN_ID)}).status_code == 200

    res = client.get(f"/api/attempts/{attempt_id}/result", headers={"X-User-Id": str(ADMIN_ID)})
    assert res.status_code == 200
    assert res.json()["data"]["user_id"] == OWNER_ID


def test_list_categories(client, db):
    db.add_all([Category(name="Science"), Category(name="Art")])
    db.commit()

    res = client.get("/api/categories", headers=_headers(OWNER_ID))

    assert res.status_code == 200
    assert [c["name"] for c in res.json()["data"]] == ["Art", "Science"]
