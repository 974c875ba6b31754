# src/weekly_todo/checklist/models.py

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from ..core.errors import ParseFailure
from .week import parse_week_id

logger = logging.getLogger(__name__)

DEFAULT_RESET_DAY = 1  # Monday


@dataclass(slots=True)
class Task:
    id: str
    text: str
    link_type: str = "none"
    link_data: dict[str, str] = field(default_factory=dict)
    order: int = 0

    @property
    def has_link(self) -> bool:
        return self.link_type != "none"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "linkType": self.link_type,
            "linkData": dict(self.link_data),
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, raw: Any, *, position: int = 0) -> Task | None:
        """
        Build a Task from its stored form.

        Returns None for entries that cannot be a task (no id or no text).
        A missing/invalid order falls back to the entry's list position.
        """
        if not isinstance(raw, dict):
            return None
        task_id = raw.get("id")
        text = raw.get("text")
        if not isinstance(task_id, str) or not task_id or not isinstance(text, str):
            return None
        text = text.strip()
        if not text:
            return None

        link_type = raw.get("linkType")
        if not isinstance(link_type, str) or not link_type:
            link_type = "none"

        link_data_raw = raw.get("linkData")
        link_data: dict[str, str] = {}
        if isinstance(link_data_raw, dict):
            for k, v in link_data_raw.items():
                if v is None:
                    continue
                link_data[str(k)] = str(v)

        order = raw.get("order")
        if not isinstance(order, int) or isinstance(order, bool):
            order = position

        return cls(id=task_id, text=text, link_type=link_type, link_data=link_data, order=order)


@dataclass(slots=True)
class WeeklyStatus:
    week_id: str | None = None
    checked: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"weekId": self.week_id, "checked": list(self.checked)}

    @classmethod
    def from_dict(cls, raw: Any) -> WeeklyStatus:
        if not isinstance(raw, dict):
            return cls()
        week_id = raw.get("weekId")
        if not isinstance(week_id, str) or parse_week_id(week_id) is None:
            week_id = None
        checked: list[str] = []
        raw_checked = raw.get("checked")
        for cid in raw_checked if isinstance(raw_checked, list) else []:
            if isinstance(cid, str) and cid not in checked:
                checked.append(cid)
        return cls(week_id=week_id, checked=checked)


@dataclass(slots=True)
class Preferences:
    """
    Persisted user preferences.

    reset_day (0=Sunday .. 6=Saturday) only frames the manual reset in the
    UI; the automatic reset always follows the Monday-based ISO week.
    """

    reset_day: int = DEFAULT_RESET_DAY

    def to_dict(self) -> dict[str, Any]:
        return {"resetDay": self.reset_day}

    @classmethod
    def from_dict(cls, raw: Any) -> Preferences:
        if not isinstance(raw, dict):
            return cls()
        day = raw.get("resetDay")
        if not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6:
            day = DEFAULT_RESET_DAY
        return cls(reset_day=day)


@dataclass(slots=True)
class ChecklistDocument:
    """The root persisted object. Always read and written as a whole."""

    tasks: list[Task] = field(default_factory=list)
    weekly_status: WeeklyStatus = field(default_factory=WeeklyStatus)
    settings: Preferences = field(default_factory=Preferences)

    # ---- queries ----

    def ordered_tasks(self) -> list[Task]:
        return sorted(self.tasks, key=lambda t: t.order)

    def find(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    # ---- invariants ----

    def renumber(self) -> None:
        """Make order dense (0..n-1), keeping the current relative order."""
        for index, task in enumerate(self.ordered_tasks()):
            task.order = index

    def normalize(self) -> None:
        """Drop duplicate task ids and dangling checks, then renumber."""
        seen: set[str] = set()
        kept: list[Task] = []
        for task in self.ordered_tasks():
            if task.id in seen:
                logger.warning("Dropping duplicate task id=%s", task.id)
                continue
            seen.add(task.id)
            kept.append(task)
        self.tasks = kept
        self.weekly_status.checked = [cid for cid in self.weekly_status.checked if cid in seen]
        self.renumber()

    # ---- codec ----

    def to_dict(self) -> dict[str, Any]:
        return {
            "todos": [t.to_dict() for t in self.tasks],
            "weeklyStatus": self.weekly_status.to_dict(),
            "settings": self.settings.to_dict(),
        }

    def to_json(self, *, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ChecklistDocument:
        tasks: list[Task] = []
        todos = raw.get("todos")
        if isinstance(todos, list):
            for position, entry in enumerate(todos):
                task = Task.from_dict(entry, position=position)
                if task is None:
                    logger.warning("Skipping malformed task entry at position %d", position)
                    continue
                tasks.append(task)
        return cls(
            tasks=tasks,
            weekly_status=WeeklyStatus.from_dict(raw.get("weeklyStatus")),
            settings=Preferences.from_dict(raw.get("settings")),
        )

    @classmethod
    def from_json(cls, text: str) -> ChecklistDocument:
        return cls.from_dict(parse_document_json(text))


def parse_document_json(text: str) -> dict[str, Any]:
    """Decode a serialized document into its top-level mapping."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ParseFailure(f"not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseFailure("document must be a JSON object")
    return data


def default_document_dict() -> dict[str, Any]:
    return ChecklistDocument().to_dict()


STARTER_TASKS: tuple[dict[str, Any], ...] = (
    {
        "id": "default-1",
        "text": "Message a friend",
        "linkType": "whatsapp",
        "linkData": {"phone": "", "message": "Hey! How are you?"},
        "order": 0,
    },
    {
        "id": "default-2",
        "text": "Check weekly schedule",
        "linkType": "calendar",
        "linkData": {},
        "order": 1,
    },
    {
        "id": "default-3",
        "text": "Go for a walk",
        "linkType": "none",
        "linkData": {},
        "order": 2,
    },
)


def starter_document() -> ChecklistDocument:
    doc = ChecklistDocument()
    for position, raw in enumerate(STARTER_TASKS):
        task = Task.from_dict(raw, position=position)
        if task is not None:
            doc.tasks.append(task)
    return doc
