# src/weekly_todo/checklist/week.py

"""
ISO-8601 week helpers.

Weeks run Monday..Sunday; week 1 is the week holding the year's first
Thursday, so the week-year can differ from the calendar year around
New Year (2021-01-03 is 2020-W53, 2024-12-30 is 2025-W01).
"""

from __future__ import annotations

import re
from datetime import date, datetime

WEEK_ID_RE = re.compile(r"^(\d{4})-W(\d{2})$")

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def iso_week_id(value: date | datetime) -> str:
    """Return the week identifier, e.g. "2026-W05"."""
    iso = _as_date(value).isocalendar()
    return f"{iso.year}-W{iso.week:02d}"


def week_number(value: date | datetime) -> int:
    return _as_date(value).isocalendar().week


def parse_week_id(week_id: str | None) -> tuple[int, int] | None:
    """Split "YYYY-W##" into (year, week); None if it is not a week id."""
    if not week_id:
        return None
    m = WEEK_ID_RE.match(week_id)
    if not m:
        return None
    year, week = int(m.group(1)), int(m.group(2))
    if not 1 <= week <= 53:
        return None
    return year, week
