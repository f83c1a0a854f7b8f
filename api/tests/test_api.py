"""
HTTP tests for the progress, exercise and paragraph endpoints.
"""
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from lectio.api.deps import get_progress_store
from lectio.main import app
from lectio.services.progress_store import ProgressStore

USER = {"X-User-Id": "user-1"}


class FailingStore(ProgressStore):
    """Store whose writes always fail."""

    def upsert(self, *args, **kwargs):
        raise OperationalError("INSERT INTO user_progress", {}, Exception("database is locked"))


def submit(client, item_id, item_type="IMPORTANT_WORD", correct=True, headers=USER):
    return client.post(
        "/api/v1/exercises/submit",
        json={"id": item_id, "itemType": item_type, "correct": correct, "mode": "reading"},
        headers=headers,
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_submit_requires_user(client, paragraph):
    response = submit(client, paragraph["word_ids"][0], headers={})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_submit_rejects_invalid_payload(client, paragraph):
    response = submit(client, paragraph["word_ids"][0], item_type="FLASHCARD")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_REQUEST"

    response = client.post("/api/v1/exercises/submit", json={"itemType": "IMPORTANT_WORD"}, headers=USER)
    assert response.status_code == 400


def test_submit_unknown_item(client, paragraph):
    response = submit(client, "does-not-exist")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_submit_updates_progress(client, paragraph):
    word_id = paragraph["word_ids"][0]
    for _ in range(3):
        response = submit(client, word_id)
    assert response.status_code == 200
    body = response.json()
    assert body["itemType"] == "IMPORTANT_WORD"
    assert body["progress"]["correctCount"] == 3
    assert body["progress"]["successStreak"] == 3
    assert body["progress"]["knowledgeScore"] == 100.0

    body = submit(client, word_id, correct=False).json()
    assert body["progress"]["wrongCount"] == 1
    assert body["progress"]["successStreak"] == 0
    assert body["progress"]["knowledgeScore"] == 75.0
    assert body["progress"]["nextReview"] == body["progress"]["lastReviewed"]


def test_submit_defaults_to_correct(client, paragraph):
    response = client.post(
        "/api/v1/exercises/submit",
        json={"id": paragraph["question_id"], "itemType": "PARAGRAPH_QUESTION"},
        headers=USER,
    )
    assert response.status_code == 200
    assert response.json()["progress"]["correctCount"] == 1


def test_batch(client):
    events = [
        {"itemId": "W1", "itemType": "IMPORTANT_WORD", "result": "correct", "timestamp": 1},
        {"itemId": "W2", "itemType": "IMPORTANT_WORD", "result": "incorrect", "timestamp": 2},
        {"itemId": "W1", "itemType": "IMPORTANT_WORD", "result": "correct", "timestamp": 3},
        {"itemId": "W3", "itemType": "IMPORTANT_WORD", "result": "unsure", "timestamp": 4},
    ]
    response = client.post("/api/v1/progress/batch", json={"events": events}, headers=USER)
    assert response.status_code == 200
    progress = response.json()["progress"]
    assert set(progress) == {"W1", "W2"}
    assert progress["W1"]["correctCount"] == 2
    assert progress["W1"]["successStreak"] == 2
    assert progress["W1"]["userId"] == "user-1"
    assert progress["W2"]["wrongCount"] == 1
    assert progress["W2"]["successStreak"] == 0


def test_batch_errors(client):
    response = client.post("/api/v1/progress/batch", json={"events": []}, headers=USER)
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "No events provided"

    response = client.post("/api/v1/progress/batch", json={"events": [{"itemId": "W1"}]}, headers=USER)
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "No valid events provided"

    response = client.post("/api/v1/progress/batch", json={"events": []})
    assert response.status_code == 401


def test_batch_store_failure_is_500(client, engine):
    session = Session(engine)
    app.dependency_overrides[get_progress_store] = lambda: FailingStore(session)
    try:
        events = [{"itemId": "W1", "itemType": "IMPORTANT_WORD", "result": "correct", "timestamp": 1}]
        response = client.post("/api/v1/progress/batch", json={"events": events}, headers=USER)
    finally:
        del app.dependency_overrides[get_progress_store]
        session.close()

    assert response.status_code == 500
    assert response.json() == {"error": {"message": "Internal server error", "code": "SERVER_ERROR"}}

    response = client.get("/api/v1/progress/IMPORTANT_WORD/W1", headers=USER)
    assert response.status_code == 404


def test_item_progress_and_due(client, paragraph):
    question_id = paragraph["question_id"]
    response = client.get(f"/api/v1/progress/PARAGRAPH_QUESTION/{question_id}", headers=USER)
    assert response.status_code == 404

    submit(client, question_id, item_type="PARAGRAPH_QUESTION", correct=False)
    submit(client, paragraph["word_ids"][0], correct=True)

    response = client.get(f"/api/v1/progress/PARAGRAPH_QUESTION/{question_id}", headers=USER)
    assert response.status_code == 200
    assert response.json()["wrongCount"] == 1

    due = client.get("/api/v1/progress/due", headers=USER).json()["progress"]
    assert [r["itemId"] for r in due] == [question_id]

    due = client.get("/api/v1/progress/due?item_type=IMPORTANT_WORD", headers=USER).json()["progress"]
    assert due == []


def test_paragraphs(client):
    payload = {
        "title": "Trains",
        "theme": "Travel",
        "level": "A2",
        "content": "The train leaves at nine.",
        "questions": [{"question": "When does the train leave?", "answer": "At nine", "choices": ["At nine", "At ten"]}],
        "importantWords": [{"term": "leaves", "meaning": "part", "usageSentence": "The train leaves at nine."}],
    }
    assert client.post("/api/v1/paragraphs", json=payload).status_code == 401

    response = client.post("/api/v1/paragraphs", json=payload, headers=USER)
    assert response.status_code == 201
    created = response.json()
    word_id = created["importantWords"][0]["id"]
    assert created["importantWords"][0]["usageSentence"] == "The train leaves at nine."

    submit(client, word_id)

    anonymous = client.get("/api/v1/paragraphs", params={"theme": "Travel"}).json()
    assert anonymous[0]["importantWords"][0]["progress"]["correctCount"] == 0
    assert anonymous[0]["importantWords"][0]["progress"]["lastReviewed"].startswith("1970-01-01")

    mine = client.get("/api/v1/paragraphs", params={"theme": "Travel"}, headers=USER).json()
    assert mine[0]["importantWords"][0]["progress"]["correctCount"] == 1
    assert mine[0]["questions"][0]["progress"]["correctCount"] == 0

    assert client.get("/api/v1/paragraphs", params={"theme": "Food"}).json() == []


def test_blank_ids_and_non_numeric_timestamps_rejected(client, paragraph):
    assert submit(client, "   ").status_code == 400

    events = [
        {"itemId": "   ", "itemType": "IMPORTANT_WORD", "result": "correct", "timestamp": 1},
        {"itemId": "W1", "itemType": "IMPORTANT_WORD", "result": "correct", "timestamp": "1767268800000"},
        {"itemId": "W2", "itemType": "IMPORTANT_WORD", "result": "correct", "timestamp": True},
    ]
    response = client.post("/api/v1/progress/batch", json={"events": events}, headers=USER)
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "No valid events provided"


def test_paragraphs_due_only(client, paragraph):
    bread_id, buys_id = paragraph["word_ids"]
    submit(client, bread_id)

    listed = client.get("/api/v1/paragraphs", params={"due_only": "true"}, headers=USER).json()
    assert [w["id"] for w in listed[0]["importantWords"]] == [buys_id]
    assert [q["id"] for q in listed[0]["questions"]] == [paragraph["question_id"]]

    listed = client.get("/api/v1/paragraphs", headers=USER).json()
    assert len(listed[0]["importantWords"]) == 2
