# tests/test_week.py

from __future__ import annotations

from datetime import date, datetime

import pytest

from weekly_todo.checklist.week import iso_week_id, parse_week_id, week_number


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (date(2026, 10, 19), "2026-W43"),  # Monday
        (date(2026, 10, 18), "2026-W42"),  # Sunday before
        (date(2026, 1, 1), "2026-W01"),  # Thursday: week 1 by definition
        (date(2025, 12, 29), "2026-W01"),  # Monday of that week, previous calendar year
        (date(2021, 1, 3), "2020-W53"),  # Sunday in a 53-week year
        (date(2021, 1, 4), "2021-W01"),
        (date(2024, 12, 30), "2025-W01"),
        (date(2027, 1, 3), "2026-W53"),
        (date(2026, 2, 2), "2026-W06"),
    ],
)
def test_iso_week_id_matches_iso_8601(day: date, expected: str) -> None:
    assert iso_week_id(day) == expected


def test_iso_week_id_accepts_datetime() -> None:
    assert iso_week_id(datetime(2026, 10, 25, 23, 59)) == "2026-W43"
    assert week_number(datetime(2026, 10, 26, 0, 0)) == 44


def test_week_number_is_zero_padded_in_id() -> None:
    assert iso_week_id(date(2026, 1, 5)) == "2026-W02"
    assert week_number(date(2026, 1, 5)) == 2


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2026-W05", (2026, 5)),
        ("2020-W53", (2020, 53)),
        ("2026-W00", None),
        ("2026-W54", None),
        ("2026-05", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_week_id(raw: str | None, expected: tuple[int, int] | None) -> None:
    assert parse_week_id(raw) == expected
