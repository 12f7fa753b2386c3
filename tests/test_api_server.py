from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from exam_portal.server.api_server import create_api_app
from exam_portal.server.exam_store import ExamStore

EXAM_TEXT = """EXAM: e2
TITLE: Science Fundamentals
DURATION: 45
TOTALMARKS: 20
CODE: SCI456

---
Q: Which of the following are primary colors?
A: Red
B: Green
C: Blue
CORRECT: A, C
MARKS: 3
"""


@pytest.fixture
def store(data_dir) -> ExamStore:
    (data_dir / "science.txt").write_text(EXAM_TEXT, encoding="utf-8")
    return ExamStore(data_dir)


@pytest.fixture
def client(store) -> TestClient:
    return TestClient(create_api_app(store))


def _submission_body(submission_id: str = "sub-1", exam_id: str = "e2") -> dict[str, object]:
    return {
        "id": submission_id,
        "student_id": "s1",
        "student_name": "John Doe",
        "roll_number": "12345",
        "phone": "555-1234",
        "exam_id": exam_id,
        "exam_title": "Science Fundamentals",
        "answers": [{"question_id": "q1", "selected_option_ids": ["q1o1", "q1o3"]}],
        "score": 3,
        "total_marks": 20,
        "started_at": "2024-05-01T10:00:00+00:00",
        "ended_at": "2024-05-01T10:20:00+00:00",
        "released": False,
        "feedback": None,
    }


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_get_exam(client) -> None:
    response = client.get("/exams/e2")

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Science Fundamentals"
    assert body["total_marks"] == 20
    assert body["questions"][0]["correct_option_ids"] == ["q1o1", "q1o3"]
    assert "secret_code" not in body


def test_get_missing_exam_returns_404(client) -> None:
    assert client.get("/exams/e404").status_code == 404


def test_find_exam_by_code(client) -> None:
    assert client.get("/exams", params={"code": "SCI456"}).json()["id"] == "e2"
    assert client.get("/exams", params={"code": "WRONG"}).status_code == 404


def test_find_exam_requires_code(client) -> None:
    assert client.get("/exams").status_code == 422


def test_put_submission_then_list(client, store) -> None:
    response = client.put("/submissions/sub-1", json=_submission_body())

    assert response.status_code == 200
    listed = client.get("/students/s1/submissions").json()
    assert [item["id"] for item in listed] == ["sub-1"]
    assert store.fetch_submissions("s1")[0].score == 3


def test_put_submission_twice_keeps_one_copy(client) -> None:
    client.put("/submissions/sub-1", json=_submission_body())
    client.put("/submissions/sub-1", json=_submission_body())

    assert len(client.get("/students/s1/submissions").json()) == 1


def test_put_submission_id_mismatch(client) -> None:
    response = client.put("/submissions/other", json=_submission_body())

    assert response.status_code == 422


def test_put_submission_unknown_exam(client) -> None:
    response = client.put("/submissions/sub-1", json=_submission_body(exam_id="e404"))

    assert response.status_code == 422
    assert "e404" in response.json()["detail"]


def test_put_submission_validates_body(client) -> None:
    body = _submission_body()
    body["score"] = -1

    assert client.put("/submissions/sub-1", json=body).status_code == 422
