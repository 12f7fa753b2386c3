"""Exact-match scoring of recorded answers.

A question earns its full marks only when the selected option ids equal the
correct option ids exactly. Missing a correct option, adding an incorrect
one, or leaving the question unanswered all earn zero. There is no partial
credit, and nothing here reads clocks, storage, or global state.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from exam_portal.core.models import AnswerRecord, ExamQuestion


def is_exact_match(question: ExamQuestion, selected_option_ids: Iterable[str]) -> bool:
    selected = set(selected_option_ids)
    if not selected:
        return False
    return selected == set(question.correct_option_ids)


def score_question(question: ExamQuestion, selected_option_ids: Iterable[str]) -> int:
    return question.marks if is_exact_match(question, selected_option_ids) else 0


def calculate_score(
    questions: Sequence[ExamQuestion],
    answers: Mapping[str, Iterable[str]],
) -> int:
    """Sum the marks of every exactly-matched question."""
    return sum(score_question(question, answers.get(question.id, ())) for question in questions)


def build_answer_records(
    questions: Sequence[ExamQuestion],
    answers: Mapping[str, Iterable[str]],
) -> tuple[AnswerRecord, ...]:
    """Return one record per question in exam order, empty when unanswered."""
    return tuple(
        AnswerRecord(
            question_id=question.id,
            selected_option_ids=tuple(answers.get(question.id, ())),
        )
        for question in questions
    )
