"""Utilities for loading exam definitions from a human-friendly text file.

File format: one header block followed by question blocks. Blocks are
separated by blank lines or '---'.

    EXAM: e2
    TITLE: Science Fundamentals
    DESCRIPTION: Basic concepts in science
    DURATION: 45            (minutes)
    TOTALMARKS: 20          (optional, defaults to the sum of question marks)
    CODE: SCI456            (optional join code)
    ACTIVE: yes             (optional, yes/no)

    Q: Which of the following are primary colors?
    A: Red
    B: Green
    C: Blue
    D: Orange
    CORRECT: A, C           (one letter = single choice, several = multi-select)
    MARKS: 3                (optional, defaults to 1)
    IMAGE: https://...      (optional)
    CHAPTER: Art            (optional)
    CO: CO2                 (optional course outcome)
    SUBJECT: Science        (optional)

Question text and option text may span several lines. Question ids are
assigned in file order (q1, q2, ...) and option ids follow them (q1o1, ...).
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from pathlib import Path

from exam_portal.core.exceptions import ExamImportError
from exam_portal.core.models import Exam, ExamOption, ExamQuestion

_OPTION_ORDER = ["A", "B", "C", "D", "E", "F", "G", "H"]
_HEADER_KEYS = {"EXAM", "TITLE", "DESCRIPTION", "DURATION", "TOTALMARKS", "CODE", "ACTIVE"}
_QUESTION_META_KEYS = {"MARKS", "IMAGE", "CHAPTER", "CO", "SUBJECT"}
_TRUE_VALUES = {"yes", "true", "1", "y"}
_FALSE_VALUES = {"no", "false", "0", "n"}


@dataclass(slots=True)
class ImportedExam:
    """Container for an imported exam and the file it came from."""

    source_path: Path
    exam: Exam


def load_exam_from_file(file_path: Path) -> ImportedExam:
    text = file_path.read_text(encoding="utf-8")
    exam = parse_exam_text(text)
    return ImportedExam(source_path=file_path, exam=exam)


def parse_exam_text(text: str) -> Exam:
    blocks = _split_blocks(text)
    if not blocks:
        raise ExamImportError("Exam file is empty.")

    header = _parse_header(blocks[0])
    questions = tuple(
        _parse_question_block(block, number)
        for number, block in enumerate(blocks[1:], start=1)
    )

    computed_total = sum(question.marks for question in questions)
    total_marks = header.get("TOTALMARKS")
    return Exam(
        id=header["EXAM"],
        title=header["TITLE"],
        description=header.get("DESCRIPTION", ""),
        questions=questions,
        duration_minutes=header["DURATION"],
        total_marks=total_marks if total_marks is not None else computed_total,
        is_active=header.get("ACTIVE", True),
        secret_code=header.get("CODE"),
    )


def _split_blocks(text: str) -> list[str]:
    """Group the non-blank lines of ``text``; blank lines and ``---`` end a block."""
    return [
        "\n".join(lines).strip()
        for is_separator, lines in groupby(text.splitlines(), key=_is_block_separator)
        if not is_separator
    ]


def _is_block_separator(line: str) -> bool:
    return line.strip() in ("", "---")


def _split_marker(line: str) -> tuple[str, str] | None:
    if ":" not in line:
        return None
    key, value = line.split(":", 1)
    return key.strip().upper(), value.strip()


def _parse_header(block: str) -> dict[str, object]:
    header: dict[str, object] = {}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        marker = _split_marker(line)
        if marker is None or marker[0] not in _HEADER_KEYS:
            raise ExamImportError(f"Encountered text outside of the exam header: '{line}'.")
        key, value = marker
        if key in ("DURATION", "TOTALMARKS"):
            header[key] = _parse_positive_int(key, value)
        elif key == "ACTIVE":
            header[key] = _parse_bool(value)
        else:
            header[key] = value

    for required in ("EXAM", "TITLE", "DURATION"):
        if not header.get(required):
            raise ExamImportError(f"Exam header must define {required}.")
    return header


def _parse_question_block(block: str, number: int) -> ExamQuestion:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letters: list[str] = []
    meta: dict[str, str] = {}
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            raw_value = line.split(":", 1)[1]
            correct_letters = [part.strip().upper() for part in raw_value.split(",") if part.strip()]
            current_section = None
            continue

        marker = _split_marker(line)
        if marker is not None and marker[0] in _QUESTION_META_KEYS:
            meta[marker[0]] = marker[1]
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise ExamImportError(
                f"Question {number}: encountered text outside of a known section: '{line}'."
            )

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise ExamImportError(f"Question {number}: question text missing (Q: ...)")

    letters = [letter for letter in _OPTION_ORDER if letter in options]
    if len(letters) < 2:
        raise ExamImportError(f"Question {number}: at least two options (A, B, ...) are required.")
    if letters != _OPTION_ORDER[: len(letters)]:
        raise ExamImportError(f"Question {number}: options must be lettered consecutively from A.")
    if any(not options[letter].strip() for letter in letters):
        raise ExamImportError(f"Question {number}: option text cannot be empty.")

    if not correct_letters:
        raise ExamImportError(f"Question {number}: CORRECT must name at least one option.")
    unknown = [letter for letter in correct_letters if letter not in letters]
    if unknown:
        raise ExamImportError(
            f"Question {number}: CORRECT refers to undefined options {', '.join(unknown)}."
        )

    question_id = f"q{number}"
    option_objects = tuple(
        ExamOption(id=f"{question_id}o{index}", text=options[letter].strip())
        for index, letter in enumerate(letters, start=1)
    )
    correct_ids = frozenset(f"{question_id}o{letters.index(letter) + 1}" for letter in correct_letters)
    marks = _parse_positive_int("MARKS", meta["MARKS"]) if "MARKS" in meta else 1

    return ExamQuestion(
        id=question_id,
        text=question_text,
        options=option_objects,
        correct_option_ids=correct_ids,
        marks=marks,
        image_url=meta.get("IMAGE") or None,
        chapter_name=meta.get("CHAPTER", ""),
        co_number=meta.get("CO", ""),
        subject=meta.get("SUBJECT", ""),
    )


def _parse_positive_int(key: str, raw_value: str) -> int:
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise ExamImportError(f"{key} must be an integer.") from exc
    if parsed_value <= 0:
        raise ExamImportError(f"{key} must be a positive integer.")
    return parsed_value


def _parse_bool(raw_value: str) -> bool:
    lowered = raw_value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ExamImportError("ACTIVE must be yes or no.")
