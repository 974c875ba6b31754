# src/weekly_todo/checklist/view.py

"""
Render data for the presentation layer.

The console (or any other front end) reads the checklist through
build_snapshot() and never touches the document directly.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..links.resolver import LinkResolver
from .models import Task
from .store import ChecklistStore


@dataclass(frozen=True, slots=True)
class TaskRow:
    position: int  # 1-based, as shown to the user
    task: Task
    checked: bool
    icon: str
    label: str

    @property
    def has_link(self) -> bool:
        return self.task.has_link


@dataclass(frozen=True, slots=True)
class ChecklistSnapshot:
    rows: tuple[TaskRow, ...]
    week_id: str
    week_number: int

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def completed(self) -> int:
        return sum(1 for r in self.rows if r.checked)

    @property
    def ratio(self) -> float:
        return self.completed / self.total if self.total else 0.0

    @property
    def all_complete(self) -> bool:
        return self.total > 0 and self.completed == self.total

    @property
    def progress_text(self) -> str:
        return f"{self.completed} of {self.total} done"


def build_snapshot(store: ChecklistStore, resolver: LinkResolver) -> ChecklistSnapshot:
    tasks = store.get_tasks()
    checked = store.get_checked_ids()
    rows = []
    for position, task in enumerate(tasks, start=1):
        info = resolver.describe(task.link_type)
        rows.append(
            TaskRow(
                position=position,
                task=task,
                checked=task.id in checked,
                icon=info.icon,
                label=info.label,
            )
        )
    return ChecklistSnapshot(
        rows=tuple(rows),
        week_id=store.current_week_id(),
        week_number=store.week_number(),
    )


def move_id(ids: Sequence[str], from_index: int, to_index: int) -> list[str]:
    """
    Final id order after dragging the item at from_index to to_index.

    Indexes are 0-based; to_index is clamped to the list bounds.
    """
    out = list(ids)
    if not 0 <= from_index < len(out):
        raise IndexError(f"no item at position {from_index}")
    item = out.pop(from_index)
    to_index = max(0, min(to_index, len(out)))
    out.insert(to_index, item)
    return out
