# src/weekly_todo/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..checklist.store import ChecklistStore
from ..links.resolver import LinkResolver
from .ports import UrlOpener


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    store: ChecklistStore
    links: LinkResolver
    opener: UrlOpener

    # Set once by bootstrap: the automatic weekly reset fired this session.
    week_was_reset: bool = False
