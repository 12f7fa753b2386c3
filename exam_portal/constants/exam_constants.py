"""Exam session constants shared across core services and the UI."""

from pathlib import Path

VIOLATION_LIMIT: int = 3
COALESCE_WINDOW_MS: int = 100
TICK_INTERVAL_MS: int = 1000

LOAD_RETRY_ATTEMPTS: int = 3
LOAD_RETRY_DELAY_SECONDS: float = 1.5

SCRATCH_KEY_TEMPLATE: str = "exam_{exam_id}_answers"
DEFAULT_SCRATCH_DIR: Path = Path.home() / ".exam_portal" / "scratch"
DEFAULT_DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"
SUBMISSIONS_FILE_NAME: str = "submissions.json"
DEFAULT_SUBMISSIONS_PATH: Path = Path.home() / ".exam_portal" / SUBMISSIONS_FILE_NAME
