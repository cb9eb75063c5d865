"""
Tests for the daily questions API (authoring, answering, last answered).
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.adapters.clock import FixedClock
from src.adapters.memory import InMemoryLedgerStore
from src.api import deps
from src.api.main import app
from src.rules.loader import load_rules
from tests.ledger_fixtures import READER_ID, balance, seed_book_world

PROJECT_ROOT = Path(__file__).parents[2]
HEADERS = {"X-Profile-Id": str(READER_ID)}
ADMIN_HEADERS = {"X-Profile-Id": "900", "X-Profile-Roles": "admin"}


@pytest.fixture
def store() -> InMemoryLedgerStore:
    s = InMemoryLedgerStore()
    seed_book_world(s, reader_points=0)
    return s


@pytest.fixture
def client(store: InMemoryLedgerStore, clock: FixedClock):
    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_clock] = lambda: clock
    app.dependency_overrides[deps.get_rules] = lambda: load_rules(PROJECT_ROOT / "rules.yaml")
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def question(client, clock) -> dict:
    response = client.post(
        "/api/daily-questions",
        json={
            "question": "Which city hosts the ledger?",
            "points": 10,
            "date": clock.today().isoformat(),
            "answers": [
                {"content": "Ghent", "correct": True},
                {"content": "Bruges"},
            ],
        },
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 201
    return response.json()


def test_created_question_hides_correct_flag(question):
    assert [a["content"] for a in question["answers"]] == ["Ghent", "Bruges"]
    assert all("correct" not in a for a in question["answers"])


def test_create_rejects_two_correct_answers(client):
    response = client.post(
        "/api/daily-questions",
        json={
            "question": "?",
            "points": 1,
            "date": "2026-02-02",
            "answers": [{"content": "a", "correct": True}, {"content": "b", "correct": True}],
        },
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_correct_count"


def test_todays_question(client, question):
    response = client.get("/api/daily-questions/today")
    assert response.status_code == 200
    assert response.json()["id"] == question["id"]


def test_question_by_missing_date(client):
    response = client.get("/api/daily-questions/by-date/2031-01-01")
    assert response.status_code == 404


def test_wrong_then_right_answer(client, store, question):
    right, wrong = (a["id"] for a in question["answers"])
    url = f"/api/daily-questions/{question['id']}/answers"

    first = client.post(url, json={"answer_id": wrong}, headers=HEADERS).json()
    assert first == {"correct_answer": "Ghent", "was_correct": False, "points_awarded": 0.0}
    assert balance(store, READER_ID) == 0

    second = client.post(url, json={"answer_id": right}, headers=HEADERS).json()
    assert second["was_correct"] is True
    assert second["points_awarded"] == 10
    assert balance(store, READER_ID) == 10
    assert store.grading_count(question["id"], READER_ID) == 1


def test_answer_unknown_question(client):
    response = client.post(
        "/api/daily-questions/999/answers", json={"answer_id": 1}, headers=HEADERS
    )
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "question_not_found"


def test_last_answered(client, clock, question):
    before = client.get("/api/daily-questions/last-answered", headers=HEADERS).json()
    assert before == {"answered": False, "answered_at": None}

    right = question["answers"][0]["id"]
    client.post(
        f"/api/daily-questions/{question['id']}/answers",
        json={"answer_id": right},
        headers=HEADERS,
    )

    after = client.get("/api/daily-questions/last-answered", headers=HEADERS).json()
    assert after["answered"] is True
    assert after["answered_at"] is not None


def test_list_and_delete(client, question):
    listed = client.get("/api/daily-questions").json()
    assert [q["id"] for q in listed] == [question["id"]]

    response = client.delete(f"/api/daily-questions/{question['id']}", headers=ADMIN_HEADERS)
    assert response.status_code == 204
    assert client.get("/api/daily-questions").json() == []

    again = client.delete(f"/api/daily-questions/{question['id']}", headers=ADMIN_HEADERS)
    assert again.status_code == 404


NEW_QUESTION = {
    "question": "Who pays the author?",
    "points": 5,
    "date": "2026-03-03",
    "answers": [{"content": "Subscribers", "correct": True}],
}


def test_create_question_requires_profile_header(client):
    response = client.post("/api/daily-questions", json=NEW_QUESTION)
    assert response.status_code == 401


def test_create_question_requires_admin(client):
    response = client.post("/api/daily-questions", json=NEW_QUESTION, headers=HEADERS)
    assert response.status_code == 403
    assert client.get("/api/daily-questions").json() == []


def test_delete_question_requires_admin(client, question):
    response = client.delete(f"/api/daily-questions/{question['id']}", headers=HEADERS)
    assert response.status_code == 403
    assert [q["id"] for q in client.get("/api/daily-questions").json()] == [question["id"]]
