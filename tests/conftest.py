"""Shared fixtures and deterministic fakes for the exam portal tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest

from exam_portal.core.exam_session import ExamSession, SubmitReason
from exam_portal.core.exceptions import GatewayError
from exam_portal.core.models import Exam, ExamOption, ExamQuestion, StudentIdentity, Submission
from exam_portal.core.services.scratch_storage import InMemoryScratchStorage

START_TIME = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


class ManualClock:
    """Virtual-time clock; callbacks run only when :meth:`advance` is called."""

    def __init__(self, start: datetime = START_TIME) -> None:
        self._start = start
        self._elapsed_ms = 0
        self._next_handle = 0
        # handle -> [due_ms, interval_ms or None, callback]
        self._entries: dict[int, list] = {}

    def schedule_tick(self, callback: Callable[[], None], interval_ms: int) -> int:
        return self._add(callback, interval_ms, interval_ms)

    def schedule_once(self, callback: Callable[[], None], delay_ms: int) -> int:
        return self._add(callback, delay_ms, None)

    def cancel(self, handle: int) -> None:
        self._entries.pop(handle, None)

    def now(self) -> datetime:
        return self._start + timedelta(milliseconds=self._elapsed_ms)

    @property
    def pending(self) -> int:
        return len(self._entries)

    def advance(self, milliseconds: int) -> None:
        target = self._elapsed_ms + milliseconds
        while True:
            due = [
                (entry[0], handle)
                for handle, entry in self._entries.items()
                if entry[0] <= target
            ]
            if not due:
                break
            due_ms, handle = min(due)
            entry = self._entries[handle]
            self._elapsed_ms = due_ms
            if entry[1] is None:
                del self._entries[handle]
            else:
                entry[0] = due_ms + entry[1]
            entry[2]()
        self._elapsed_ms = target

    def advance_seconds(self, seconds: int) -> None:
        self.advance(seconds * 1000)

    def _add(self, callback: Callable[[], None], delay_ms: int, interval_ms: int | None) -> int:
        self._next_handle += 1
        self._entries[self._next_handle] = [self._elapsed_ms + delay_ms, interval_ms, callback]
        return self._next_handle


class FakeSignalSource:
    """Integrity signal source driven directly by the tests."""

    def __init__(self) -> None:
        self.hidden_callbacks: list[Callable[[], None]] = []
        self.blur_callbacks: list[Callable[[], None]] = []
        self.fullscreen_callbacks: list[Callable[[bool], None]] = []
        self.unload_callbacks: list[Callable[[], bool]] = []

    def on_hidden(self, callback: Callable[[], None]) -> None:
        self.hidden_callbacks.append(callback)

    def on_blur(self, callback: Callable[[], None]) -> None:
        self.blur_callbacks.append(callback)

    def on_fullscreen_change(self, callback: Callable[[bool], None]) -> None:
        self.fullscreen_callbacks.append(callback)

    def on_unload_attempt(self, callback: Callable[[], bool]) -> None:
        self.unload_callbacks.append(callback)

    def fire_hidden(self) -> None:
        for callback in list(self.hidden_callbacks):
            callback()

    def fire_blur(self) -> None:
        for callback in list(self.blur_callbacks):
            callback()

    def fire_fullscreen(self, is_fullscreen: bool) -> None:
        for callback in list(self.fullscreen_callbacks):
            callback(is_fullscreen)

    def attempt_unload(self) -> bool:
        return any([callback() for callback in self.unload_callbacks])


class FakeGateway:
    """In-memory gateway with scriptable failures."""

    def __init__(self, exams: list[Exam] | None = None) -> None:
        self.exams: dict[str, Exam] = {exam.id: exam for exam in exams or []}
        self.submissions: dict[str, Submission] = {}
        self.save_calls: list[Submission] = []
        self.fetch_calls: int = 0
        self.failing_saves: int = 0
        self.failing_fetches: int = 0
        self.empty_fetches: int = 0
        self.on_save: Callable[[Submission], None] | None = None

    def fetch_exam(self, exam_id: str) -> Exam | None:
        self.fetch_calls += 1
        if self.failing_fetches:
            self.failing_fetches -= 1
            raise GatewayError("backend unavailable")
        exam = self.exams.get(exam_id)
        if exam is not None and self.empty_fetches:
            self.empty_fetches -= 1
            return Exam(
                id=exam.id,
                title=exam.title,
                questions=(),
                duration_minutes=exam.duration_minutes,
                total_marks=exam.total_marks,
            )
        return exam

    def find_exam_by_code(self, code: str) -> Exam | None:
        return next(
            (
                exam
                for exam in self.exams.values()
                if exam.is_active and exam.secret_code == code
            ),
            None,
        )

    def fetch_submissions(self, student_id: str) -> list[Submission]:
        return [s for s in self.submissions.values() if s.student_id == student_id]

    def save_submission(self, submission: Submission) -> None:
        self.save_calls.append(submission)
        if self.on_save is not None:
            self.on_save(submission)
        if self.failing_saves:
            self.failing_saves -= 1
            raise GatewayError("Failed to save exam result")
        self.submissions[submission.id] = submission


class RecordingPresenter:
    """Presenter that records every notification in order."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def names(self) -> list[str]:
        return [event[0] for event in self.events]

    def enter_fullscreen(self) -> None:
        self.events.append(("enter_fullscreen",))

    def exit_fullscreen(self) -> None:
        self.events.append(("exit_fullscreen",))

    def show_exam_started(self, exam: Exam) -> None:
        self.events.append(("exam_started", exam.id))

    def show_time_remaining(self, seconds: int) -> None:
        self.events.append(("time_remaining", seconds))

    def show_violation_warning(self, count: int, limit: int) -> None:
        self.events.append(("violation_warning", count, limit))

    def show_submitting(self, reason: SubmitReason) -> None:
        self.events.append(("submitting", reason))

    def show_submitted(self, submission: Submission, reason: SubmitReason) -> None:
        self.events.append(("submitted", submission.id, reason))

    def show_submit_error(self, message: str) -> None:
        self.events.append(("submit_error", message))


def make_question(
    question_id: str,
    option_count: int,
    correct: list[int],
    marks: int = 1,
) -> ExamQuestion:
    options = tuple(
        ExamOption(id=f"{question_id}o{index}", text=f"Option {index}")
        for index in range(1, option_count + 1)
    )
    return ExamQuestion(
        id=question_id,
        text=f"Question {question_id}",
        options=options,
        correct_option_ids=frozenset(f"{question_id}o{index}" for index in correct),
        marks=marks,
    )


@pytest.fixture
def science_exam() -> Exam:
    """Multi-select q1 worth 3 (correct o1, o3) and single-choice q2 worth 2 (correct o1)."""
    return Exam(
        id="e2",
        title="Science Fundamentals",
        description="Basic concepts in science",
        questions=(
            make_question("q1", 4, [1, 3], marks=3),
            make_question("q2", 4, [1], marks=2),
        ),
        duration_minutes=45,
        total_marks=5,
        secret_code="SCI456",
    )


@pytest.fixture
def student() -> StudentIdentity:
    return StudentIdentity(student_id="s1", display_name="John Doe")


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def signal_source() -> FakeSignalSource:
    return FakeSignalSource()


@pytest.fixture
def scratch_storage() -> InMemoryScratchStorage:
    return InMemoryScratchStorage()


@pytest.fixture
def gateway(science_exam: Exam) -> FakeGateway:
    return FakeGateway([science_exam])


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def make_session(
    science_exam: Exam,
    student: StudentIdentity,
    gateway: FakeGateway,
    scratch_storage: InMemoryScratchStorage,
    clock: ManualClock,
    signal_source: FakeSignalSource,
    presenter: RecordingPresenter,
):
    def factory(exam: Exam | None = None, **kwargs) -> ExamSession:
        return ExamSession(
            exam=exam or science_exam,
            student=student,
            gateway=gateway,
            scratch_storage=scratch_storage,
            clock=clock,
            signal_source=signal_source,
            presenter=presenter,
            submission_id_factory=kwargs.pop("submission_id_factory", lambda: "sub-1"),
            **kwargs,
        )

    return factory


@pytest.fixture
def started_session(make_session):
    session = make_session()
    session.start("12345", "555-1234")
    return session


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "exams"
    directory.mkdir()
    return directory
