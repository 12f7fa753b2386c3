from __future__ import annotations

from dataclasses import replace

import pytest

from exam_portal.core.exceptions import (
    AlreadyAttemptedError,
    EmptyExamError,
    ExamLoadError,
    ExamNotFoundError,
    ExamUnavailableError,
)
from exam_portal.core.gateway import ensure_can_attempt, load_exam, resolve_exam_code


@pytest.fixture
def sleeps() -> list[float]:
    return []


def test_load_exam_returns_exam(gateway, sleeps) -> None:
    exam = load_exam(gateway, "e2", sleep=sleeps.append)

    assert exam.title == "Science Fundamentals"
    assert sleeps == []


def test_load_exam_retries_empty_question_list(gateway, sleeps) -> None:
    gateway.empty_fetches = 2

    exam = load_exam(gateway, "e2", sleep=sleeps.append)

    assert exam.question_count == 2
    assert gateway.fetch_calls == 3
    assert sleeps == [1.5, 1.5]


def test_load_exam_gives_up_after_bounded_retries(gateway, sleeps) -> None:
    gateway.empty_fetches = 10

    with pytest.raises(EmptyExamError):
        load_exam(gateway, "e2", attempts=3, delay_seconds=0.5, sleep=sleeps.append)

    assert gateway.fetch_calls == 4
    assert sleeps == [0.5, 0.5, 0.5]


def test_load_exam_unknown_id(gateway, sleeps) -> None:
    with pytest.raises(ExamNotFoundError, match="Exam not found"):
        load_exam(gateway, "nope", sleep=sleeps.append)


def test_load_exam_requires_id(gateway) -> None:
    with pytest.raises(ExamNotFoundError):
        load_exam(gateway, "")


def test_load_exam_wraps_gateway_errors(gateway, sleeps) -> None:
    gateway.failing_fetches = 1

    with pytest.raises(ExamLoadError, match="Failed to load exam") as excinfo:
        load_exam(gateway, "e2", sleep=sleeps.append)

    assert not isinstance(excinfo.value, ExamNotFoundError)


def test_resolve_exam_code(gateway) -> None:
    assert resolve_exam_code(gateway, " SCI456 ") == "e2"

    with pytest.raises(ExamNotFoundError):
        resolve_exam_code(gateway, "WRONG")
    with pytest.raises(ExamNotFoundError):
        resolve_exam_code(gateway, "   ")


def test_ensure_can_attempt_rejects_inactive_exam(gateway, science_exam, student) -> None:
    with pytest.raises(ExamUnavailableError):
        ensure_can_attempt(gateway, replace(science_exam, is_active=False), student)


def test_ensure_can_attempt_rejects_previous_submission(gateway, science_exam, student, started_session) -> None:
    ensure_can_attempt(gateway, science_exam, student)
    started_session.submit()

    with pytest.raises(AlreadyAttemptedError):
        ensure_can_attempt(gateway, science_exam, student)
