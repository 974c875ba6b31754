# src/weekly_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the storage backend, store, link resolver and opener into AppState,
- runs the automatic weekly reset exactly once per session.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..checklist.backends import JsonFileBackend, SqliteBackend
from ..checklist.store import ChecklistStore
from ..config import get_settings
from ..core.ports import Clock, StorageBackend, UrlOpener
from ..core.state import AppState
from ..links.opener import PrintOpener, WebBrowserOpener
from ..links.resolver import resolver as default_resolver

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.json_path.parent.mkdir(parents=True, exist_ok=True)


def make_backend(settings) -> StorageBackend:
    if getattr(settings, "backend", "sqlite") == "json":
        return JsonFileBackend(settings.json_path)
    return SqliteBackend(settings.db_path, key=settings.storage_key)


def make_clock(settings) -> Clock:
    tz = getattr(settings, "timezone", None)
    if tz is None:
        return datetime.now
    return lambda: datetime.now(tz)


def create_initial_state(
    *,
    settings=None,
    backend: StorageBackend | None = None,
    clock: Clock | None = None,
    opener: UrlOpener | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the backend/clock/opener) injectable makes the app
    easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if backend is None:
        _ensure_local_dirs(settings)
        backend = make_backend(settings)

    if opener is None:
        opener = WebBrowserOpener() if getattr(settings, "open_links", True) else PrintOpener()

    store = ChecklistStore(
        backend,
        clock=clock or make_clock(settings),
        seed_starter_tasks=getattr(settings, "seed_starter_tasks", True),
    )

    state = AppState(
        settings=settings,
        store=store,
        links=default_resolver,
        opener=opener,
    )

    # Must run before anything renders checked state.
    state.week_was_reset = store.check_weekly_reset()
    logger.info(
        "Session started week=%s reset=%s tasks=%d",
        store.current_week_id(),
        state.week_was_reset,
        store.count_tasks(),
    )
    return state
