"""Domain models for exams, questions, and submissions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class ExamOption:
    """Selectable option of a question."""

    id: str
    text: str


@dataclass(slots=True, frozen=True)
class ExamQuestion:
    """Question with one (single-choice) or several (multi-select) correct options."""

    id: str
    text: str
    options: tuple[ExamOption, ...]
    correct_option_ids: frozenset[str]
    marks: int = 1
    image_url: str | None = None
    chapter_name: str = ""
    co_number: str = ""
    subject: str = ""

    def __post_init__(self) -> None:
        if not self.options:
            raise ValueError(f"Question {self.id} must have at least one option.")
        option_ids = [option.id for option in self.options]
        if len(set(option_ids)) != len(option_ids):
            raise ValueError(f"Question {self.id} has duplicate option ids.")
        if not self.correct_option_ids:
            raise ValueError(f"Question {self.id} must mark at least one correct option.")
        unknown = self.correct_option_ids - set(option_ids)
        if unknown:
            raise ValueError(
                f"Question {self.id} marks unknown options as correct: {sorted(unknown)}"
            )
        if self.marks <= 0:
            raise ValueError(f"Question {self.id} must be worth a positive number of marks.")

    @property
    def is_multi_select(self) -> bool:
        return len(self.correct_option_ids) > 1

    def option_ids(self) -> list[str]:
        return [option.id for option in self.options]

    def has_option(self, option_id: str) -> bool:
        return any(option.id == option_id for option in self.options)


@dataclass(slots=True, frozen=True)
class Exam:
    """Exam definition; read-only for the duration of a session."""

    id: str
    title: str
    questions: tuple[ExamQuestion, ...]
    duration_minutes: int
    total_marks: int
    description: str = ""
    is_active: bool = True
    secret_code: str | None = None

    @property
    def duration_seconds(self) -> int:
        return self.duration_minutes * 60

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def get_question(self, question_id: str) -> ExamQuestion | None:
        return next((q for q in self.questions if q.id == question_id), None)


@dataclass(slots=True, frozen=True)
class StudentIdentity:
    """Authenticated student taking the exam."""

    student_id: str
    display_name: str


@dataclass(slots=True, frozen=True)
class AnswerRecord:
    """Options selected for one question at submission time."""

    question_id: str
    selected_option_ids: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class Submission:
    """Final graded attempt handed to the gateway."""

    id: str
    student_id: str
    student_name: str
    roll_number: str
    phone: str
    exam_id: str
    exam_title: str
    answers: tuple[AnswerRecord, ...]
    score: int
    total_marks: int
    started_at: datetime
    ended_at: datetime
    released: bool = False
    feedback: str | None = None

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self.answers if answer.selected_option_ids)
