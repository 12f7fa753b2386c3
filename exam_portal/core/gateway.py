"""Contract with the persistence backend plus the pre-session checks built on it."""

from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

from exam_portal.constants.exam_constants import LOAD_RETRY_ATTEMPTS, LOAD_RETRY_DELAY_SECONDS
from exam_portal.core.exceptions import (
    AlreadyAttemptedError,
    EmptyExamError,
    ExamLoadError,
    ExamNotFoundError,
    ExamUnavailableError,
    GatewayError,
)
from exam_portal.core.models import Exam, StudentIdentity, Submission

logger = logging.getLogger(__name__)


class ExamGateway(Protocol):
    """Persistence collaborator that owns exams and submissions."""

    def fetch_exam(self, exam_id: str) -> Exam | None:
        """Return the exam with its questions resolved, or None if it does not exist."""

    def find_exam_by_code(self, code: str) -> Exam | None:
        """Return the active exam joined with ``code``, or None."""

    def fetch_submissions(self, student_id: str) -> list[Submission]:
        """Return every submission stored for the student."""

    def save_submission(self, submission: Submission) -> None:
        """Store the submission, replacing any earlier copy with the same id.

        Raises GatewayError when the submission could not be stored.
        """


def load_exam(
    gateway: ExamGateway,
    exam_id: str,
    attempts: int = LOAD_RETRY_ATTEMPTS,
    delay_seconds: float = LOAD_RETRY_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> Exam:
    """Load an exam, retrying while the backend reports it without questions.

    ``attempts`` counts the retries after the first load, so the backend is
    asked at most ``attempts + 1`` times.
    """
    if not exam_id:
        raise ExamNotFoundError("No exam ID provided")

    for attempt in range(attempts + 1):
        logger.info("Loading exam %s (attempt %d)", exam_id, attempt + 1)
        try:
            exam = gateway.fetch_exam(exam_id)
        except GatewayError as exc:
            raise ExamLoadError("Failed to load exam") from exc

        if exam is None:
            raise ExamNotFoundError("Exam not found")
        if exam.questions:
            logger.info("Loaded exam %s with %d questions", exam.title, exam.question_count)
            return exam
        if attempt < attempts:
            logger.info("Exam %s has no questions yet, retrying in %.1fs", exam_id, delay_seconds)
            sleep(delay_seconds)

    raise EmptyExamError("This exam does not have any questions yet.")


def resolve_exam_code(gateway: ExamGateway, code: str) -> str:
    """Return the id of the active exam joined with ``code``."""
    cleaned = code.strip()
    if not cleaned:
        raise ExamNotFoundError("Please enter an exam code.")
    try:
        exam = gateway.find_exam_by_code(cleaned)
    except GatewayError as exc:
        raise ExamLoadError("Failed to look up exam code") from exc
    if exam is None:
        raise ExamNotFoundError("Invalid exam code or exam is not active.")
    return exam.id


def ensure_can_attempt(gateway: ExamGateway, exam: Exam, student: StudentIdentity) -> None:
    """Reject inactive exams and exams the student already submitted."""
    if not exam.is_active:
        raise ExamUnavailableError("This exam is not currently active.")
    try:
        submissions = gateway.fetch_submissions(student.student_id)
    except GatewayError as exc:
        raise ExamLoadError("Failed to check previous attempts") from exc
    if any(submission.exam_id == exam.id for submission in submissions):
        raise AlreadyAttemptedError("You have already submitted this exam.")
