# src/weekly_todo/__init__.py

"""Weekly checklist manager: tasks, weekly checkmarks, deep links."""

__version__ = "0.1.0"
