# tests/test_view.py

from __future__ import annotations

import pytest

from weekly_todo.checklist.store import ChecklistStore
from weekly_todo.checklist.view import build_snapshot, move_id
from weekly_todo.links.resolver import resolver


def test_snapshot_of_empty_store(store: ChecklistStore) -> None:
    snap = build_snapshot(store, resolver)
    assert snap.rows == ()
    assert snap.total == 0
    assert snap.ratio == 0.0
    assert snap.all_complete is False
    assert snap.progress_text == "0 of 0 done"
    assert snap.week_id == "2026-W43"
    assert snap.week_number == 43


def test_snapshot_rows_and_progress(store: ChecklistStore) -> None:
    a = store.add_task("Call mom", "whatsapp", {"phone": "123"})
    b = store.add_task("Walk")
    assert a is not None and b is not None
    store.toggle_checked(a.id)

    snap = build_snapshot(store, resolver)
    assert [r.position for r in snap.rows] == [1, 2]
    assert [r.checked for r in snap.rows] == [True, False]
    assert (snap.rows[0].icon, snap.rows[0].label, snap.rows[0].has_link) == ("💬", "WhatsApp", True)
    assert snap.rows[1].has_link is False
    assert snap.ratio == 0.5
    assert snap.progress_text == "1 of 2 done"
    assert snap.all_complete is False

    store.toggle_checked(b.id)
    assert build_snapshot(store, resolver).all_complete is True


def test_move_id_computes_final_order() -> None:
    ids = ["a", "b", "c", "d"]
    assert move_id(ids, 0, 2) == ["b", "c", "a", "d"]
    assert move_id(ids, 3, 0) == ["d", "a", "b", "c"]
    assert move_id(ids, 1, 99) == ["a", "c", "d", "b"]
    assert ids == ["a", "b", "c", "d"]
    with pytest.raises(IndexError):
        move_id(ids, 4, 0)
