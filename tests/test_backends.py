# tests/test_backends.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from weekly_todo.checklist.backends import JsonFileBackend, SqliteBackend
from weekly_todo.checklist.store import ChecklistStore
from weekly_todo.core.errors import PersistenceFailure


def test_sqlite_backend_load_save(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "todo.sqlite3"
    backend = SqliteBackend(db, key="k1")

    assert backend.load() is None
    assert backend.save('{"todos": []}') is True
    assert backend.load() == '{"todos": []}'
    assert backend.save('{"todos": [1]}') is True
    assert backend.load() == '{"todos": [1]}'

    # other keys are separate slots in the same file
    other = SqliteBackend(db, key="k2")
    assert other.load() is None


def test_json_file_backend_load_save(tmp_path: Path) -> None:
    path = tmp_path / "data" / "todo.json"
    backend = JsonFileBackend(path)

    assert backend.load() is None
    assert backend.save('{"todos": []}') is True
    assert path.read_text("utf-8") == '{"todos": []}'
    assert not path.with_suffix(".tmp").exists()
    assert backend.load() == '{"todos": []}'


def test_json_file_backend_unreadable_raises(tmp_path: Path) -> None:
    path = tmp_path / "todo.json"
    path.write_bytes(b"\xff\xfe\x00bad")
    with pytest.raises(PersistenceFailure):
        JsonFileBackend(path).load()


def test_json_file_backend_write_failure_returns_false(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", "utf-8")
    backend = JsonFileBackend(blocker / "todo.json")
    assert backend.save("{}") is False


@pytest.mark.parametrize("kind", ["sqlite", "json"])
def test_store_state_survives_a_new_store_instance(tmp_path: Path, kind: str) -> None:
    def make_backend():
        if kind == "sqlite":
            return SqliteBackend(tmp_path / "todo.sqlite3")
        return JsonFileBackend(tmp_path / "todo.json")

    clock = lambda: datetime(2026, 10, 21, 12, 0)  # noqa: E731
    first = ChecklistStore(make_backend(), clock=clock, seed_starter_tasks=False)
    task = first.add_task("Call mom", "whatsapp", {"phone": "123"})
    assert task is not None
    first.check_weekly_reset()
    first.toggle_checked(task.id)

    second = ChecklistStore(make_backend(), clock=clock, seed_starter_tasks=False)
    assert [t.text for t in second.get_tasks()] == ["Call mom"]
    assert second.get_checked_ids() == {task.id}
    assert second.check_weekly_reset() is False
