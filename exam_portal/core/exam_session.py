"""State machine for one student taking one timed exam.

The session moves Registering -> InProgress -> Completed and never back. It
owns the submit latch and coordinates the answer store, the countdown timer
and the integrity monitor. Manual submission, timer expiry and the third
integrity violation all go through :meth:`ExamSession.submit`, which persists
at most one submission per session.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum, auto
import logging
import time
from typing import Callable, Protocol
from uuid import uuid4

from exam_portal.constants.exam_constants import (
    COALESCE_WINDOW_MS,
    TICK_INTERVAL_MS,
    VIOLATION_LIMIT,
)
from exam_portal.core.exceptions import GatewayError, RegistrationError, SessionStateError
from exam_portal.core.gateway import ExamGateway, ensure_can_attempt, load_exam
from exam_portal.core.models import Exam, ExamQuestion, StudentIdentity, Submission
from exam_portal.core.services.answer_store import AnswerStore
from exam_portal.core.services.clock import Clock
from exam_portal.core.services.exam_timer import ExamTimer
from exam_portal.core.services.integrity_monitor import IntegrityMonitor, IntegritySignalSource
from exam_portal.core.services.scoring_engine import build_answer_records, calculate_score
from exam_portal.core.services.scratch_storage import ScratchStorage
from exam_portal.core.services.submit_latch import SubmitLatch

logger = logging.getLogger(__name__)


class SessionState(Enum):
    REGISTERING = auto()
    IN_PROGRESS = auto()
    COMPLETED = auto()


class SubmitReason(Enum):
    MANUAL = auto()
    TIMER = auto()
    VIOLATIONS = auto()

    @property
    def is_auto(self) -> bool:
        return self is not SubmitReason.MANUAL


class SessionPresenter(Protocol):
    """Surface that shows session progress to the student."""

    def enter_fullscreen(self) -> None: ...

    def exit_fullscreen(self) -> None: ...

    def show_exam_started(self, exam: Exam) -> None: ...

    def show_time_remaining(self, seconds: int) -> None: ...

    def show_violation_warning(self, count: int, limit: int) -> None: ...

    def show_submitting(self, reason: SubmitReason) -> None: ...

    def show_submitted(self, submission: Submission, reason: SubmitReason) -> None: ...

    def show_submit_error(self, message: str) -> None: ...


class NullPresenter:
    """Presenter that ignores every notification."""

    def enter_fullscreen(self) -> None:
        pass

    def exit_fullscreen(self) -> None:
        pass

    def show_exam_started(self, exam: Exam) -> None:
        pass

    def show_time_remaining(self, seconds: int) -> None:
        pass

    def show_violation_warning(self, count: int, limit: int) -> None:
        pass

    def show_submitting(self, reason: SubmitReason) -> None:
        pass

    def show_submitted(self, submission: Submission, reason: SubmitReason) -> None:
        pass

    def show_submit_error(self, message: str) -> None:
        pass


class ExamSession:
    """Coordinates registration, answering, and the single submit operation."""

    def __init__(
        self,
        exam: Exam,
        student: StudentIdentity,
        gateway: ExamGateway,
        scratch_storage: ScratchStorage,
        clock: Clock,
        signal_source: IntegritySignalSource,
        presenter: SessionPresenter | None = None,
        violation_limit: int = VIOLATION_LIMIT,
        coalesce_window_ms: int = COALESCE_WINDOW_MS,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        submission_id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        if not exam.questions:
            raise ValueError("Cannot start a session for an exam without questions.")
        if exam.duration_minutes <= 0:
            raise ValueError("Cannot start a session for an exam without a positive duration.")
        self._exam = exam
        self._student = student
        self._gateway = gateway
        self._clock = clock
        self._presenter: SessionPresenter = presenter or NullPresenter()
        self._submission_id_factory = submission_id_factory

        self._state = SessionState.REGISTERING
        self._latch = SubmitLatch()
        self._current_index: int = 0
        self._roll_number: str = ""
        self._phone: str = ""
        self._started_at: datetime | None = None
        self._submission_id: str | None = None
        self._submission: Submission | None = None
        self._last_error: str | None = None

        self._answers = AnswerStore(exam, scratch_storage, clock)
        self._timer = ExamTimer(
            clock,
            on_tick=self._handle_tick,
            on_expire=self._handle_time_expired,
            tick_interval_ms=tick_interval_ms,
        )
        self._monitor = IntegrityMonitor(
            signal_source,
            clock,
            self._latch,
            on_warning=self._handle_violation_warning,
            on_limit_reached=self._handle_violation_limit,
            violation_limit=violation_limit,
            coalesce_window_ms=coalesce_window_ms,
        )

    # --- State ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def exam(self) -> Exam:
        return self._exam

    @property
    def student(self) -> StudentIdentity:
        return self._student

    @property
    def is_submitting(self) -> bool:
        return self._latch.is_set and self._state is SessionState.IN_PROGRESS

    @property
    def submission(self) -> Submission | None:
        return self._submission

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def time_remaining(self) -> int:
        return self._timer.remaining_seconds

    @property
    def violation_count(self) -> int:
        return self._monitor.violation_count

    @property
    def violation_limit(self) -> int:
        return self._monitor.violation_limit

    @property
    def answer_store(self) -> AnswerStore:
        return self._answers

    # --- Registration ---

    def start(self, roll_number: str, phone: str) -> None:
        """Validate the registration details and begin the timed exam."""
        if self._state is not SessionState.REGISTERING:
            raise SessionStateError("The exam has already been started.")
        roll_number = (roll_number or "").strip()
        phone = (phone or "").strip()
        if not roll_number or not phone:
            raise RegistrationError("Both roll number and phone number are required.")

        self._roll_number = roll_number
        self._phone = phone
        self._started_at = self._clock.now()
        self._submission_id = self._submission_id_factory()
        self._answers.restore()
        self._state = SessionState.IN_PROGRESS

        logger.info(
            "Student %s started exam %s (%d questions, %d minutes)",
            self._student.student_id,
            self._exam.id,
            self._exam.question_count,
            self._exam.duration_minutes,
        )
        self._timer.start(self._exam.duration_seconds)
        self._presenter.enter_fullscreen()
        self._monitor.arm()
        self._presenter.show_exam_started(self._exam)

    # --- Answering & navigation ---

    def select_option(self, question_id: str, option_id: str) -> list[str]:
        """Toggle or replace a selection and return the question's new selection."""
        self._require_in_progress()
        if self._latch.is_set:
            logger.info("Ignoring selection while the exam is being submitted")
            return self._answers.selected_for(question_id)
        return self._answers.select(question_id, option_id)

    def selected_for(self, question_id: str) -> list[str]:
        return self._answers.selected_for(question_id)

    def answered_flags(self) -> list[bool]:
        """One flag per question, in exam order, True when it has a selection."""
        answers = self._answers.get_current()
        return [bool(answers.get(question.id)) for question in self._exam.questions]

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> ExamQuestion:
        return self._exam.questions[self._current_index]

    @property
    def is_first_question(self) -> bool:
        return self._current_index == 0

    @property
    def is_last_question(self) -> bool:
        return self._current_index == self._exam.question_count - 1

    def go_to_question(self, index: int) -> ExamQuestion:
        self._require_in_progress()
        self._current_index = min(max(index, 0), self._exam.question_count - 1)
        return self.current_question

    def next_question(self) -> ExamQuestion:
        return self.go_to_question(self._current_index + 1)

    def previous_question(self) -> ExamQuestion:
        return self.go_to_question(self._current_index - 1)

    # --- Submission ---

    def submit(self, reason: SubmitReason = SubmitReason.MANUAL) -> Submission | None:
        """Grade and persist the attempt.

        Returns the stored submission, or None when the call was a no-op
        (already completed, or another trigger's submission is in flight) or
        when saving failed and the attempt stays open for a retry.
        """
        if self._state is SessionState.COMPLETED:
            return None
        self._require_in_progress()
        if not self._latch.try_acquire():
            logger.info("Submission already in flight, ignoring %s trigger", reason.name.lower())
            return None

        logger.info("Submitting exam %s (%s)", self._exam.id, reason.name.lower())
        try:
            self._presenter.show_submitting(reason)
            submission = self._build_submission()
            self._gateway.save_submission(submission)
        except GatewayError as exc:
            self._handle_save_failure(str(exc))
            return None
        except Exception:
            # Release the latch on any failure so later triggers can retry.
            logger.exception("Unexpected error while submitting exam %s", self._exam.id)
            self._handle_save_failure("")
            return None

        self._answers.clear()
        self._submission = submission
        self._last_error = None
        self._state = SessionState.COMPLETED
        self._timer.stop()
        self._monitor.disarm()
        logger.info(
            "Stored submission %s: %d/%d", submission.id, submission.score, submission.total_marks
        )
        self._presenter.exit_fullscreen()
        self._presenter.show_submitted(submission, reason)
        return submission

    def handle_unload_attempt(self) -> bool:
        """Return True when closing the exam surface must be confirmed first."""
        return self._state is SessionState.IN_PROGRESS

    def _build_submission(self) -> Submission:
        if self._answers.reconcile():
            logger.debug("Using scratch answers for submission")
        answers = self._answers.get_current()
        questions = self._exam.questions
        return Submission(
            id=self._submission_id or self._submission_id_factory(),
            student_id=self._student.student_id,
            student_name=self._student.display_name or "Student",
            roll_number=self._roll_number,
            phone=self._phone,
            exam_id=self._exam.id,
            exam_title=self._exam.title,
            answers=build_answer_records(questions, answers),
            score=calculate_score(questions, answers),
            total_marks=self._exam.total_marks,
            started_at=self._started_at or self._clock.now(),
            ended_at=self._clock.now(),
            released=False,
            feedback=None,
        )

    def _handle_save_failure(self, message: str) -> None:
        logger.warning("Saving submission %s failed: %s", self._submission_id, message or "unexpected error")
        self._last_error = message or "Failed to save exam result"
        self._latch.release()
        if self._timer.expired:
            self._timer.resume()
        self._presenter.show_submit_error(self._last_error)

    # --- Collaborator callbacks ---

    def _handle_tick(self, remaining_seconds: int) -> None:
        self._presenter.show_time_remaining(remaining_seconds)

    def _handle_time_expired(self) -> None:
        if self._state is SessionState.IN_PROGRESS:
            self.submit(SubmitReason.TIMER)

    def _handle_violation_warning(self, count: int, limit: int) -> None:
        self._presenter.show_violation_warning(count, limit)

    def _handle_violation_limit(self) -> None:
        if self._state is SessionState.IN_PROGRESS:
            logger.warning("Violation limit reached, auto-submitting exam %s", self._exam.id)
            self.submit(SubmitReason.VIOLATIONS)

    def _require_in_progress(self) -> None:
        if self._state is not SessionState.IN_PROGRESS:
            raise SessionStateError(f"Operation not allowed while {self._state.name.lower()}.")


def open_exam_session(
    gateway: ExamGateway,
    exam_id: str,
    student: StudentIdentity,
    scratch_storage: ScratchStorage,
    clock: Clock,
    signal_source: IntegritySignalSource,
    presenter: SessionPresenter | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ExamSession:
    """Load the exam, check the student may attempt it, and build the session."""
    exam = load_exam(gateway, exam_id, sleep=sleep)
    ensure_can_attempt(gateway, exam, student)
    return ExamSession(
        exam=exam,
        student=student,
        gateway=gateway,
        scratch_storage=scratch_storage,
        clock=clock,
        signal_source=signal_source,
        presenter=presenter,
    )
