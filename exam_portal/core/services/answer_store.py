"""Session-scoped answer map with write-through scratch persistence."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging

from exam_portal.constants.exam_constants import SCRATCH_KEY_TEMPLATE
from exam_portal.core.models import Exam
from exam_portal.core.services.clock import Clock
from exam_portal.core.services.scratch_storage import ScratchStorage

logger = logging.getLogger(__name__)


class AnswerStore:
    """Tracks the options a student selected for each question of one exam.

    Single-choice questions keep at most one selected id (a new selection
    replaces the old one). Multi-select questions toggle ids independently.
    Every mutation is written through to the scratch slot for the exam so a
    reload can restore progress.
    """

    def __init__(self, exam: Exam, storage: ScratchStorage, clock: Clock) -> None:
        self._exam = exam
        self._storage = storage
        self._clock = clock
        self._answers: dict[str, list[str]] = {}
        self._updated_at: datetime | None = None

    @property
    def scratch_key(self) -> str:
        return SCRATCH_KEY_TEMPLATE.format(exam_id=self._exam.id)

    @property
    def updated_at(self) -> datetime | None:
        return self._updated_at

    def select(self, question_id: str, option_id: str) -> list[str]:
        """Apply a selection event and return the new selection for the question."""
        question = self._exam.get_question(question_id)
        if question is None:
            raise ValueError(f"Unknown question id: {question_id}")
        if not question.has_option(option_id):
            raise ValueError(f"Option {option_id} does not belong to question {question_id}")

        current = self._answers.get(question_id, [])
        if not question.is_multi_select:
            updated = [option_id]
        elif option_id in current:
            updated = [existing for existing in current if existing != option_id]
        else:
            updated = [*current, option_id]

        self._answers[question_id] = updated
        self._updated_at = self._clock.now()
        self.persist()
        return list(updated)

    def get_current(self) -> dict[str, list[str]]:
        return {question_id: list(ids) for question_id, ids in self._answers.items()}

    def selected_for(self, question_id: str) -> list[str]:
        return list(self._answers.get(question_id, []))

    def persist(self) -> bool:
        """Write the current answers to the scratch slot. Failures are logged only."""
        saved_at = self._updated_at or self._clock.now()
        payload = json.dumps({"answers": self._answers, "saved_at": saved_at.isoformat()})
        try:
            self._storage.set(self.scratch_key, payload)
        except OSError:
            logger.exception("Could not write scratch answers for exam %s", self._exam.id)
            return False
        return True

    def restore(self) -> bool:
        """Load a previous in-progress attempt for this exam, if one exists."""
        snapshot = self._read_scratch()
        if snapshot is None:
            return False
        answers, saved_at = snapshot
        self._answers = answers
        self._updated_at = saved_at
        logger.info(
            "Restored %d saved answers for exam %s", len(answers), self._exam.id
        )
        return True

    def reconcile(self) -> bool:
        """Adopt the scratch copy when it is at least as recent as memory.

        Returns True when the scratch copy replaced the in-memory answers.
        """
        snapshot = self._read_scratch()
        if snapshot is None:
            return False
        answers, saved_at = snapshot
        if (
            self._updated_at is not None
            and saved_at is not None
            and saved_at < self._updated_at
        ):
            return False
        self._answers = answers
        if saved_at is not None:
            self._updated_at = saved_at
        return True

    def clear(self) -> None:
        """Remove the scratch slot after a confirmed final submission."""
        try:
            self._storage.remove(self.scratch_key)
        except OSError:
            logger.exception("Could not clear scratch answers for exam %s", self._exam.id)

    def reset(self) -> None:
        """Forget the in-memory answers without touching the scratch slot."""
        self._answers = {}
        self._updated_at = None

    def _read_scratch(self) -> tuple[dict[str, list[str]], datetime | None] | None:
        try:
            raw = self._storage.get(self.scratch_key)
        except (OSError, UnicodeDecodeError):
            logger.warning("Scratch slot for exam %s is unreadable", self._exam.id)
            return None
        if raw is None:
            return None

        try:
            decoded = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupt scratch answers for exam %s", self._exam.id)
            return None

        saved_at: datetime | None = None
        if isinstance(decoded, dict) and "answers" in decoded:
            raw_answers = decoded.get("answers")
            saved_at = _parse_timestamp(decoded.get("saved_at"))
        else:
            # Plain question -> options mapping without a timestamp.
            raw_answers = decoded

        if not isinstance(raw_answers, dict):
            logger.warning("Ignoring malformed scratch answers for exam %s", self._exam.id)
            return None
        return self._sanitize(raw_answers), saved_at

    def _sanitize(self, raw_answers: dict[object, object]) -> dict[str, list[str]]:
        cleaned: dict[str, list[str]] = {}
        for question_id, option_ids in raw_answers.items():
            question = self._exam.get_question(str(question_id))
            if question is None or not isinstance(option_ids, list):
                continue
            valid: list[str] = []
            for option_id in option_ids:
                if isinstance(option_id, str) and question.has_option(option_id) and option_id not in valid:
                    valid.append(option_id)
            if not question.is_multi_select:
                valid = valid[-1:]
            cleaned[question.id] = valid
        return cleaned


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
