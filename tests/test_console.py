# tests/test_console.py

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from weekly_todo.cli.main import console_log_level
from weekly_todo.connectors.console_connector import NEW_WEEK_MESSAGE, run_console_loop
from weekly_todo.core.state import AppState


def test_console_loop_runs_commands_until_exit(
    state: AppState, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    inputs = iter(["", "/add Water plants", "/check 1", "/exit", "/add never"])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(inputs))

    run_console_loop(state)

    out = capsys.readouterr().out
    assert NEW_WEEK_MESSAGE in out
    assert "Added #1: Water plants" in out
    assert "All done for this week!" in out
    assert [t.text for t in state.store.get_tasks()] == ["Water plants"]


def test_console_loop_stops_on_eof(state: AppState, monkeypatch: pytest.MonkeyPatch) -> None:
    def _eof(_prompt: str = "") -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)
    run_console_loop(state)


@pytest.mark.parametrize(
    ("configured", "expected"),
    [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        ("ERROR", logging.ERROR),
        ("nonsense", logging.WARNING),
        ("basic_format", logging.WARNING),
    ],
)
def test_console_log_level_follows_configured_level(configured: str, expected: int) -> None:
    assert console_log_level(SimpleNamespace(log_level=configured)) == expected
