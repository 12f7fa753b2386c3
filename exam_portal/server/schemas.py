"""Pydantic payload schemas shared by the backend API and the HTTP gateway."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from exam_portal.core.models import (
    AnswerRecord,
    Exam,
    ExamOption,
    ExamQuestion,
    Submission,
)


class OptionPayload(BaseModel):
    id: str
    text: str


class QuestionPayload(BaseModel):
    id: str
    text: str
    options: list[OptionPayload]
    correct_option_ids: list[str] = Field(min_length=1)
    marks: int = Field(default=1, gt=0)
    image_url: str | None = None
    chapter_name: str = ""
    co_number: str = ""
    subject: str = ""

    @classmethod
    def from_question(cls, question: ExamQuestion) -> "QuestionPayload":
        return cls(
            id=question.id,
            text=question.text,
            options=[OptionPayload(id=option.id, text=option.text) for option in question.options],
            correct_option_ids=sorted(question.correct_option_ids),
            marks=question.marks,
            image_url=question.image_url,
            chapter_name=question.chapter_name,
            co_number=question.co_number,
            subject=question.subject,
        )

    def to_question(self) -> ExamQuestion:
        return ExamQuestion(
            id=self.id,
            text=self.text,
            options=tuple(ExamOption(id=option.id, text=option.text) for option in self.options),
            correct_option_ids=frozenset(self.correct_option_ids),
            marks=self.marks,
            image_url=self.image_url,
            chapter_name=self.chapter_name,
            co_number=self.co_number,
            subject=self.subject,
        )


class ExamPayload(BaseModel):
    """Exam as served by the backend.

    The payload includes the correct option ids because grading happens on
    the student client.
    """

    id: str
    title: str
    description: str = ""
    duration_minutes: int = Field(gt=0)
    total_marks: int = Field(ge=0)
    is_active: bool = True
    questions: list[QuestionPayload] = Field(default_factory=list)

    @classmethod
    def from_exam(cls, exam: Exam) -> "ExamPayload":
        return cls(
            id=exam.id,
            title=exam.title,
            description=exam.description,
            duration_minutes=exam.duration_minutes,
            total_marks=exam.total_marks,
            is_active=exam.is_active,
            questions=[QuestionPayload.from_question(question) for question in exam.questions],
        )

    def to_exam(self) -> Exam:
        return Exam(
            id=self.id,
            title=self.title,
            description=self.description,
            questions=tuple(question.to_question() for question in self.questions),
            duration_minutes=self.duration_minutes,
            total_marks=self.total_marks,
            is_active=self.is_active,
        )


class AnswerPayload(BaseModel):
    question_id: str
    selected_option_ids: list[str] = Field(default_factory=list)


class SubmissionPayload(BaseModel):
    """Submission body accepted by ``PUT /submissions/{id}``."""

    id: str
    student_id: str
    student_name: str
    roll_number: str
    phone: str
    exam_id: str
    exam_title: str
    answers: list[AnswerPayload]
    score: int = Field(ge=0)
    total_marks: int = Field(ge=0)
    started_at: datetime
    ended_at: datetime
    released: bool = False
    feedback: str | None = None

    @classmethod
    def from_submission(cls, submission: Submission) -> "SubmissionPayload":
        return cls(
            id=submission.id,
            student_id=submission.student_id,
            student_name=submission.student_name,
            roll_number=submission.roll_number,
            phone=submission.phone,
            exam_id=submission.exam_id,
            exam_title=submission.exam_title,
            answers=[
                AnswerPayload(
                    question_id=answer.question_id,
                    selected_option_ids=list(answer.selected_option_ids),
                )
                for answer in submission.answers
            ],
            score=submission.score,
            total_marks=submission.total_marks,
            started_at=submission.started_at,
            ended_at=submission.ended_at,
            released=submission.released,
            feedback=submission.feedback,
        )

    def to_submission(self) -> Submission:
        return Submission(
            id=self.id,
            student_id=self.student_id,
            student_name=self.student_name,
            roll_number=self.roll_number,
            phone=self.phone,
            exam_id=self.exam_id,
            exam_title=self.exam_title,
            answers=tuple(
                AnswerRecord(
                    question_id=answer.question_id,
                    selected_option_ids=tuple(answer.selected_option_ids),
                )
                for answer in self.answers
            ),
            score=self.score,
            total_marks=self.total_marks,
            started_at=self.started_at,
            ended_at=self.ended_at,
            released=self.released,
            feedback=self.feedback,
        )


class SubmissionArchive(BaseModel):
    """On-disk layout of the backend's submissions file."""

    submissions: list[SubmissionPayload] = Field(default_factory=list)
