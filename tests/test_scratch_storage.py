from __future__ import annotations

import pytest

from exam_portal.core.services.scratch_storage import InMemoryScratchStorage, JsonFileScratchStorage


def test_in_memory_storage_round_trip() -> None:
    storage = InMemoryScratchStorage()

    assert storage.get("exam_e1_answers") is None
    storage.set("exam_e1_answers", "{}")
    assert storage.get("exam_e1_answers") == "{}"
    storage.remove("exam_e1_answers")
    storage.remove("exam_e1_answers")
    assert storage.get("exam_e1_answers") is None


def test_file_storage_survives_new_instance(tmp_path) -> None:
    JsonFileScratchStorage(tmp_path / "scratch").set("exam_e1_answers", '{"answers": {}}')

    reopened = JsonFileScratchStorage(tmp_path / "scratch")
    assert reopened.get("exam_e1_answers") == '{"answers": {}}'
    assert (tmp_path / "scratch" / "exam_e1_answers.json").exists()


def test_file_storage_remove_is_idempotent(tmp_path) -> None:
    storage = JsonFileScratchStorage(tmp_path)
    storage.set("exam_e1_answers", "{}")

    storage.remove("exam_e1_answers")
    storage.remove("exam_e1_answers")

    assert storage.get("exam_e1_answers") is None


def test_file_storage_sanitises_keys(tmp_path) -> None:
    storage = JsonFileScratchStorage(tmp_path)
    storage.set("exam_../../etc_answers", "{}")

    assert [path.name for path in tmp_path.iterdir()] == ["exam_.._.._etc_answers.json"]


def test_file_storage_rejects_empty_key(tmp_path) -> None:
    with pytest.raises(ValueError):
        JsonFileScratchStorage(tmp_path).get("")
