"""Device-local key-value storage used to recover in-progress answers.

Scratch storage is a crash/reload recovery aid and never the system of
record. Values are opaque strings; the answer store owns their format.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
import re
from threading import Lock
from typing import Protocol

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class ScratchStorage(Protocol):
    """Minimal key-value slot interface."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryScratchStorage:
    """Process-local scratch storage, lost when the process exits."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)


class JsonFileScratchStorage:
    """Stores each key as a file inside a device-local directory.

    Writes go to a temporary file first and are moved into place so a crash
    mid-write never leaves a truncated slot behind.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)
        self._lock = Lock()

    @property
    def directory(self) -> Path:
        return self._directory

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        with self._lock:
            if not path.exists():
                return None
            return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        with self._lock:
            self._directory.mkdir(parents=True, exist_ok=True)
            temp_path = path.with_suffix(".tmp")
            temp_path.write_text(value, encoding="utf-8")
            os.replace(temp_path, path)

    def remove(self, key: str) -> None:
        path = self._path_for(key)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                logger.debug("Scratch slot %s already removed", key)

    def _path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("Scratch key must not be empty.")
        return self._directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"
