# src/weekly_todo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The checklist store and the link dispatcher depend on Protocols instead of
concrete implementations. This keeps storage and the browser swappable and
lets tests use in-memory doubles.
"""

from datetime import datetime
from typing import Callable, Protocol

Clock = Callable[[], datetime]
# Returns "now"; the store only looks at its calendar date.


class StorageBackend(Protocol):
    """
    A single key-value slot holding the serialized checklist document.

    - load() returns None when nothing was stored yet
    - load() raises PersistenceFailure when the slot cannot be read
    - save() returns False when the write failed (nothing partial is kept)
    """

    def load(self) -> str | None: ...

    def save(self, payload: str) -> bool: ...


class UrlOpener(Protocol):
    """
    Side-effecting half of link handling.

    new_context=True opens an unrelated browsing context (new tab/window);
    new_context=False navigates in place (app-custom schemes like mailto:).
    """

    def open(self, url: str, *, new_context: bool) -> bool: ...
