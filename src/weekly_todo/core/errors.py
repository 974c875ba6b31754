# src/weekly_todo/core/errors.py

from __future__ import annotations


class WeeklyTodoError(Exception):
    """Base class for all application errors."""


class InvalidInput(WeeklyTodoError, ValueError):
    """Rejected user input (blank task text, out-of-range preference, ...)."""


class NotFound(WeeklyTodoError, LookupError):
    """A task id that does not (or no longer) exist."""


class PersistenceFailure(WeeklyTodoError):
    """The storage backend could not read or write the document."""


class ParseFailure(WeeklyTodoError):
    """A serialized document is not well-formed."""
