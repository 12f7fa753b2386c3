"""File-backed exam catalogue and submission archive used by the backend."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from threading import Lock

from pydantic import ValidationError

from exam_portal.constants.exam_constants import SUBMISSIONS_FILE_NAME
from exam_portal.core.exam_importer import load_exam_from_file
from exam_portal.core.exceptions import ExamImportError, GatewayError
from exam_portal.core.models import Exam, Submission
from exam_portal.server.schemas import SubmissionArchive, SubmissionPayload

logger = logging.getLogger(__name__)


class ExamStore:
    """Serves exams loaded from ``*.txt`` definitions and keeps submissions on disk.

    Implements the exam gateway contract, so the student client can also use
    it directly without going through HTTP.
    """

    def __init__(self, data_dir: Path, submissions_path: Path | None = None) -> None:
        self._data_dir = data_dir
        self._submissions_path = submissions_path or data_dir / SUBMISSIONS_FILE_NAME
        self._lock = Lock()
        self._exams: dict[str, Exam] = {}
        self._submissions: dict[str, Submission] = {}
        self.reload_exams()
        self._load_submissions()

    @property
    def submissions_path(self) -> Path:
        return self._submissions_path

    def reload_exams(self) -> int:
        """Re-read every exam definition in the data directory.

        Files that fail to parse are skipped with a warning. Returns the number
        of exams now available.
        """
        exams: dict[str, Exam] = {}
        for file_path in sorted(self._data_dir.glob("*.txt")):
            try:
                imported = load_exam_from_file(file_path)
            except (ExamImportError, OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping exam definition %s: %s", file_path.name, exc)
                continue
            exam = imported.exam
            if exam.id in exams:
                logger.warning("Duplicate exam id %s in %s, keeping the first", exam.id, file_path.name)
                continue
            exams[exam.id] = exam

        with self._lock:
            self._exams = exams
        logger.info("Loaded %d exams from %s", len(exams), self._data_dir)
        return len(exams)

    def add_exam(self, exam: Exam) -> None:
        with self._lock:
            self._exams[exam.id] = exam

    def list_exams(self) -> list[Exam]:
        with self._lock:
            return list(self._exams.values())

    # --- Gateway contract ---

    def fetch_exam(self, exam_id: str) -> Exam | None:
        with self._lock:
            return self._exams.get(exam_id)

    def find_exam_by_code(self, code: str) -> Exam | None:
        wanted = code.strip().casefold()
        if not wanted:
            return None
        with self._lock:
            for exam in self._exams.values():
                if exam.is_active and exam.secret_code and exam.secret_code.casefold() == wanted:
                    return exam
        return None

    def fetch_submissions(self, student_id: str) -> list[Submission]:
        with self._lock:
            return [
                submission
                for submission in self._submissions.values()
                if submission.student_id == student_id
            ]

    def save_submission(self, submission: Submission) -> None:
        with self._lock:
            if submission.exam_id not in self._exams:
                raise GatewayError(f"Unknown exam id: {submission.exam_id}")
            previous = self._submissions.get(submission.id)
            self._submissions[submission.id] = submission
            try:
                self._write_submissions()
            except OSError as exc:
                if previous is None:
                    self._submissions.pop(submission.id, None)
                else:
                    self._submissions[submission.id] = previous
                raise GatewayError("Failed to save exam result") from exc
        logger.info(
            "Saved submission %s for student %s (exam %s)",
            submission.id,
            submission.student_id,
            submission.exam_id,
        )

    # --- Persistence ---

    def _load_submissions(self) -> None:
        if not self._submissions_path.exists():
            return
        try:
            raw = self._submissions_path.read_text(encoding="utf-8")
            archive = SubmissionArchive.model_validate_json(raw)
        except (OSError, ValidationError) as exc:
            raise GatewayError(f"Could not read {self._submissions_path}") from exc
        with self._lock:
            self._submissions = {
                payload.id: payload.to_submission() for payload in archive.submissions
            }
        logger.info("Loaded %d stored submissions", len(archive.submissions))

    def _write_submissions(self) -> None:
        archive = SubmissionArchive(
            submissions=[
                SubmissionPayload.from_submission(submission)
                for submission in self._submissions.values()
            ]
        )
        self._submissions_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._submissions_path.with_suffix(".tmp")
        temp_path.write_text(archive.model_dump_json(indent=2), encoding="utf-8")
        os.replace(temp_path, self._submissions_path)
