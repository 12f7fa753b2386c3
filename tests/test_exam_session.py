from __future__ import annotations

from dataclasses import replace
import json

import pytest

from exam_portal.core.exam_session import SessionState, SubmitReason, open_exam_session
from exam_portal.core.exceptions import (
    AlreadyAttemptedError,
    RegistrationError,
    SessionStateError,
)
from exam_portal.core.models import Exam
from exam_portal.core.services.scoring_engine import calculate_score


def test_new_session_waits_for_registration(make_session) -> None:
    session = make_session()

    assert session.state is SessionState.REGISTERING
    with pytest.raises(SessionStateError):
        session.select_option("q1", "q1o1")


@pytest.mark.parametrize(("roll", "phone"), [("", "555"), ("123", ""), ("  ", "  ")])
def test_start_requires_roll_number_and_phone(make_session, roll, phone) -> None:
    session = make_session()

    with pytest.raises(RegistrationError):
        session.start(roll, phone)
    assert session.state is SessionState.REGISTERING


def test_start_begins_timed_exam(make_session, presenter, clock) -> None:
    session = make_session()
    session.start(" 12345 ", "555-1234")

    assert session.state is SessionState.IN_PROGRESS
    assert session.started_at == clock.now()
    assert session.time_remaining == 45 * 60
    assert presenter.names() == ["time_remaining", "enter_fullscreen", "exam_started"]


def test_start_twice_is_rejected(started_session) -> None:
    with pytest.raises(SessionStateError):
        started_session.start("1", "2")


def test_start_restores_scratch_answers(make_session, scratch_storage) -> None:
    scratch_storage.set(
        "exam_e2_answers",
        json.dumps({"answers": {"q2": ["q2o3"]}, "saved_at": "2024-05-01T09:59:00+00:00"}),
    )
    session = make_session()
    session.start("12345", "555-1234")

    assert session.selected_for("q2") == ["q2o3"]


def test_navigation_is_clamped(started_session) -> None:
    assert started_session.is_first_question
    started_session.previous_question()
    assert started_session.current_index == 0

    started_session.next_question()
    started_session.next_question()
    assert started_session.current_index == 1
    assert started_session.is_last_question

    started_session.go_to_question(-10)
    assert started_session.current_index == 0
    started_session.go_to_question(99)
    assert started_session.current_index == 1


def test_answered_flags_follow_selections(started_session) -> None:
    assert started_session.answered_flags() == [False, False]

    started_session.select_option("q2", "q2o3")
    assert started_session.answered_flags() == [False, True]

    started_session.select_option("q1", "q1o1")
    started_session.select_option("q1", "q1o1")
    assert started_session.answered_flags() == [False, True]


def test_manual_submit_scores_and_stores(started_session, gateway, presenter, scratch_storage) -> None:
    started_session.select_option("q1", "q1o1")
    started_session.select_option("q1", "q1o3")
    started_session.select_option("q2", "q2o2")

    submission = started_session.submit()

    assert submission is not None
    assert submission.score == 3
    assert submission.total_marks == 5
    assert submission.roll_number == "12345"
    assert submission.phone == "555-1234"
    assert submission.student_name == "John Doe"
    assert submission.released is False
    assert submission.feedback is None
    assert [a.question_id for a in submission.answers] == ["q1", "q2"]
    assert gateway.submissions == {"sub-1": submission}
    assert started_session.state is SessionState.COMPLETED
    assert scratch_storage.get("exam_e2_answers") is None
    assert presenter.events[-2:] == [("exit_fullscreen",), ("submitted", "sub-1", SubmitReason.MANUAL)]


def test_submit_with_no_answers_scores_zero(started_session) -> None:
    submission = started_session.submit()

    assert submission.score == 0
    assert all(answer.selected_option_ids == () for answer in submission.answers)


def test_submit_after_completion_is_a_no_op(started_session, gateway) -> None:
    started_session.submit()
    assert started_session.submit() is None
    assert started_session.submit(SubmitReason.TIMER) is None

    assert len(gateway.save_calls) == 1


def test_reentrant_submit_is_ignored(started_session, gateway) -> None:
    nested_results = []
    gateway.on_save = lambda _submission: nested_results.append(
        started_session.submit(SubmitReason.VIOLATIONS)
    )

    started_session.submit()

    assert nested_results == [None]
    assert len(gateway.save_calls) == 1


def test_selection_is_ignored_while_submitting(started_session, gateway) -> None:
    started_session.select_option("q2", "q2o1")
    during = []
    gateway.on_save = lambda _submission: during.append(
        started_session.select_option("q2", "q2o4")
    )

    submission = started_session.submit()

    assert during == [["q2o1"]]
    assert submission.answers[1].selected_option_ids == ("q2o1",)


def test_failed_save_keeps_exam_open_for_retry(started_session, gateway, presenter) -> None:
    started_session.select_option("q2", "q2o1")
    gateway.failing_saves = 1

    assert started_session.submit() is None
    assert started_session.state is SessionState.IN_PROGRESS
    assert not started_session.is_submitting
    assert started_session.last_error == "Failed to save exam result"
    assert presenter.events[-1] == ("submit_error", "Failed to save exam result")

    retried = started_session.submit()
    assert retried is not None
    assert retried.score == 2
    assert [call.id for call in gateway.save_calls] == ["sub-1", "sub-1"]


def _fail_first_save(gateway) -> None:
    calls = []

    def raise_once(_submission) -> None:
        calls.append(1)
        if len(calls) == 1:
            raise ConnectionError("socket closed")

    gateway.on_save = raise_once


def test_unexpected_save_error_releases_latch(started_session, gateway, presenter) -> None:
    _fail_first_save(gateway)

    assert started_session.submit() is None
    assert started_session.state is SessionState.IN_PROGRESS
    assert not started_session.is_submitting
    assert started_session.last_error == "Failed to save exam result"
    assert presenter.events[-1] == ("submit_error", "Failed to save exam result")

    retried = started_session.submit()
    assert retried is not None
    assert started_session.state is SessionState.COMPLETED
    assert list(gateway.submissions) == ["sub-1"]


def test_timer_retries_after_unexpected_save_error(started_session, gateway, clock) -> None:
    _fail_first_save(gateway)

    clock.advance_seconds(45 * 60)
    assert started_session.state is SessionState.IN_PROGRESS

    clock.advance_seconds(1)
    assert started_session.state is SessionState.COMPLETED
    assert len(gateway.save_calls) == 2


def test_failed_save_keeps_answers_editable(started_session, gateway) -> None:
    gateway.failing_saves = 1
    started_session.submit()

    assert started_session.select_option("q2", "q2o1") == ["q2o1"]


def test_submit_uses_newer_scratch_copy(started_session, scratch_storage, clock) -> None:
    started_session.select_option("q2", "q2o1")
    clock.advance_seconds(1)
    scratch_storage.set(
        "exam_e2_answers",
        json.dumps({"answers": {"q2": ["q2o1"], "q1": ["q1o1", "q1o3"]}, "saved_at": clock.now().isoformat()}),
    )

    submission = started_session.submit()

    assert submission.score == 5


def test_timer_expiry_auto_submits_once(started_session, gateway, clock, presenter) -> None:
    started_session.select_option("q2", "q2o1")
    clock.advance_seconds(45 * 60)

    assert started_session.state is SessionState.COMPLETED
    assert len(gateway.save_calls) == 1
    assert ("submitted", "sub-1", SubmitReason.TIMER) in presenter.events

    clock.advance_seconds(10)
    assert len(gateway.save_calls) == 1


def test_timer_expiry_retries_failed_save_each_tick(started_session, gateway, clock) -> None:
    gateway.failing_saves = 2
    clock.advance_seconds(45 * 60)
    assert started_session.state is SessionState.IN_PROGRESS
    assert len(gateway.save_calls) == 1

    clock.advance_seconds(1)
    assert len(gateway.save_calls) == 2
    clock.advance_seconds(1)

    assert started_session.state is SessionState.COMPLETED
    assert len(gateway.save_calls) == 3


def test_three_violations_auto_submit(started_session, signal_source, clock, gateway, presenter) -> None:
    for _ in range(3):
        signal_source.fire_hidden()
        signal_source.fire_blur()
        clock.advance(500)

    assert started_session.state is SessionState.COMPLETED
    assert started_session.violation_count == 3
    warnings = [event for event in presenter.events if event[0] == "violation_warning"]
    assert warnings == [("violation_warning", 1, 3), ("violation_warning", 2, 3)]
    assert presenter.events[-1] == ("submitted", "sub-1", SubmitReason.VIOLATIONS)
    assert len(gateway.save_calls) == 1


def test_violation_after_failed_forced_save_retries(started_session, signal_source, clock, gateway) -> None:
    gateway.failing_saves = 1
    for _ in range(3):
        signal_source.fire_blur()
        clock.advance(500)
    assert started_session.state is SessionState.IN_PROGRESS
    assert started_session.violation_count == 3

    signal_source.fire_blur()

    assert started_session.state is SessionState.COMPLETED
    assert started_session.violation_count == 3
    assert len(gateway.save_calls) == 2


def test_completion_stops_timer_and_monitor(started_session, signal_source, clock, presenter) -> None:
    started_session.submit()
    events_before = list(presenter.events)

    signal_source.fire_blur()
    clock.advance_seconds(5)

    assert presenter.events == events_before
    assert started_session.violation_count == 0


def test_unload_confirmation_only_while_in_progress(make_session, signal_source) -> None:
    session = make_session()
    assert not session.handle_unload_attempt()
    assert not signal_source.attempt_unload()

    session.start("12345", "555-1234")
    assert session.handle_unload_attempt()
    assert signal_source.attempt_unload()

    session.submit()
    assert not session.handle_unload_attempt()


def test_session_rejects_exam_without_questions(make_session, science_exam) -> None:
    empty = Exam(id="e9", title="Empty", questions=(), duration_minutes=10, total_marks=0)
    with pytest.raises(ValueError):
        make_session(exam=empty)


def test_session_rejects_exam_without_positive_duration(make_session, science_exam) -> None:
    with pytest.raises(ValueError, match="duration"):
        make_session(exam=replace(science_exam, duration_minutes=0))


def test_open_exam_session_blocks_repeat_attempts(
    gateway, student, scratch_storage, clock, signal_source, started_session
) -> None:
    started_session.submit()

    with pytest.raises(AlreadyAttemptedError):
        open_exam_session(gateway, "e2", student, scratch_storage, clock, signal_source)


def test_open_exam_session_builds_registering_session(
    gateway, student, scratch_storage, clock, signal_source
) -> None:
    session = open_exam_session(gateway, "e2", student, scratch_storage, clock, signal_source)

    assert session.state is SessionState.REGISTERING
    assert session.exam.id == "e2"


def test_timer_expiry_during_manual_submit_persists_once(started_session, gateway, clock) -> None:
    clock.advance_seconds(45 * 60 - 1)
    gateway.on_save = lambda _submission: clock.advance_seconds(5)

    submission = started_session.submit()

    assert submission is not None
    assert len(gateway.save_calls) == 1
    assert list(gateway.submissions) == ["sub-1"]


def test_violation_submit_scores_like_manual_submit(
    started_session, signal_source, clock, science_exam
) -> None:
    started_session.select_option("q1", "q1o1")
    started_session.select_option("q1", "q1o3")
    started_session.select_option("q2", "q2o4")
    expected = calculate_score(science_exam.questions, started_session.answer_store.get_current())

    for _ in range(3):
        signal_source.fire_blur()
        clock.advance(500)

    assert started_session.submission.score == expected == 3


def test_scratch_answers_survive_memory_reset(started_session) -> None:
    started_session.select_option("q1", "q1o1")
    started_session.select_option("q1", "q1o3")
    started_session.select_option("q2", "q2o1")
    started_session.answer_store.reset()

    submission = started_session.submit()

    assert submission.score == 5
    assert submission.answers[0].selected_option_ids == ("q1o1", "q1o3")
