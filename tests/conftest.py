# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from weekly_todo.checklist.store import ChecklistStore
from weekly_todo.cli.bootstrap import create_initial_state
from weekly_todo.core.state import AppState

from .fakes import FakeClock, FakeOpener, MemoryBackend

# Monday of ISO week 2026-W43.
MONDAY_W43 = datetime(2026, 10, 19, 9, 30)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="weekly-todo-test",
        log_level="DEBUG",
        backend="sqlite",
        storage_key="weekly-todo-app",
        seed_starter_tasks=False,
        timezone=None,
        open_links=True,
        data_dir=tmp_path,
        db_path=tmp_path / "weekly_todo.sqlite3",
        json_path=tmp_path / "weekly_todo.json",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(MONDAY_W43)


@pytest.fixture()
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture()
def store(backend: MemoryBackend, clock: FakeClock) -> ChecklistStore:
    """Empty (unseeded) store over an in-memory backend."""
    return ChecklistStore(backend, clock=clock, seed_starter_tasks=False)


@pytest.fixture()
def opener() -> FakeOpener:
    return FakeOpener()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    backend: MemoryBackend,
    clock: FakeClock,
    opener: FakeOpener,
) -> AppState:
    """
    AppState wired with deterministic fakes.

    The store itself is real: its behaviour is what the CLI tests exercise.
    """
    return create_initial_state(settings=settings, backend=backend, clock=clock, opener=opener)
