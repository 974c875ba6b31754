# src/weekly_todo/checklist/store.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from ..core.errors import InvalidInput, ParseFailure, PersistenceFailure
from ..core.ports import Clock, StorageBackend
from .models import (
    ChecklistDocument,
    Preferences,
    Task,
    WeeklyStatus,
    default_document_dict,
    parse_document_json,
    starter_document,
)
from .week import iso_week_id, week_number as iso_week_number

logger = logging.getLogger(__name__)


def _new_task_id() -> str:
    return uuid.uuid4().hex[:12]


class ChecklistStore:
    """
    Owner of the persisted checklist document.

    Every operation is a whole-document read-modify-write:
      load -> apply change -> save
    nothing is cached between calls except the last successfully stored
    payload, which stands in when a later read fails.

    Failure policy:
    - blank task text / bad preferences raise InvalidInput before any change
    - unknown ids and failed writes are reported as None / False
    - storage and parse errors never escape a public method
    - a change is never applied on top of a document that could not be loaded
    """

    def __init__(
        self,
        backend: StorageBackend,
        *,
        clock: Clock | None = None,
        seed_starter_tasks: bool = True,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._backend = backend
        self._clock: Clock = clock or datetime.now
        self._seed = seed_starter_tasks
        self._new_id = id_factory or _new_task_id
        self._last_good: str | None = None

    # ---- low-level helpers ----

    def _default_document(self) -> ChecklistDocument:
        return starter_document() if self._seed else ChecklistDocument()

    def _read(self) -> ChecklistDocument:
        try:
            raw = self._backend.load()
        except PersistenceFailure:
            logger.exception("Failed to read checklist document.")
            return self._fallback_document()
        return self._parse_or_seed(raw)

    def _parse_or_seed(self, raw: str | None) -> ChecklistDocument:
        if raw is None:
            doc = self._default_document()
            logger.info("No stored checklist yet; creating default (tasks=%d).", len(doc.tasks))
            self._write(doc)
            return doc

        try:
            data = parse_document_json(raw)
        except ParseFailure:
            logger.exception("Stored checklist document is corrupted; using defaults.")
            return self._fallback_document()

        merged = {**default_document_dict(), **data}
        doc = ChecklistDocument.from_dict(merged)
        self._last_good = raw
        return doc

    def _read_for_write(self) -> ChecklistDocument | None:
        """Like _read, but None when the stored document could not be loaded at all."""
        try:
            raw = self._backend.load()
        except PersistenceFailure:
            if self._last_good is None:
                logger.exception("Failed to read checklist document; change not applied.")
                return None
            logger.exception("Failed to read checklist document; using last good copy.")
            return ChecklistDocument.from_json(self._last_good)
        return self._parse_or_seed(raw)

    def _fallback_document(self) -> ChecklistDocument:
        if self._last_good is not None:
            return ChecklistDocument.from_json(self._last_good)
        return ChecklistDocument()

    def _write(self, doc: ChecklistDocument) -> bool:
        try:
            payload = doc.to_json()
        except (TypeError, ValueError):
            logger.exception("Failed to serialize checklist document.")
            return False
        try:
            ok = self._backend.save(payload)
        except Exception:
            logger.exception("Storage backend raised while saving.")
            ok = False
        if ok:
            self._last_good = payload
        else:
            logger.error("Checklist document was not saved; previous state kept.")
        return ok

    @staticmethod
    def _clean_text(text: Any) -> str:
        if not isinstance(text, str) or not text.strip():
            raise InvalidInput("Task text is required.")
        return text.strip()

    @staticmethod
    def _clean_link_data(link_data: Mapping[str, Any] | None) -> dict[str, str]:
        if not link_data:
            return {}
        return {str(k): str(v) for k, v in link_data.items() if v is not None}

    # ---- week ----

    def current_week_id(self) -> str:
        return iso_week_id(self._clock())

    def week_number(self) -> int:
        return iso_week_number(self._clock())

    # ---- tasks ----

    def get_tasks(self) -> list[Task]:
        return self._read().ordered_tasks()

    def count_tasks(self) -> int:
        return len(self._read().tasks)

    def add_task(
        self,
        text: str,
        link_type: str | None = "none",
        link_data: Mapping[str, Any] | None = None,
    ) -> Task | None:
        clean = self._clean_text(text)
        doc = self._read_for_write()
        if doc is None:
            return None
        task = Task(
            id=self._new_id(),
            text=clean,
            link_type=link_type or "none",
            link_data=self._clean_link_data(link_data),
            order=len(doc.tasks),
        )
        while doc.find(task.id) is not None:
            task.id = self._new_id()
        doc.tasks.append(task)
        if not self._write(doc):
            return None
        logger.debug("Task added id=%s link_type=%s order=%d", task.id, task.link_type, task.order)
        return Task.from_dict(task.to_dict())

    def update_task(
        self,
        task_id: str,
        *,
        text: str | None = None,
        link_type: str | None = None,
        link_data: Mapping[str, Any] | None = None,
    ) -> Task | None:
        clean = self._clean_text(text) if text is not None else None
        doc = self._read_for_write()
        if doc is None:
            return None
        task = doc.find(task_id)
        if task is None:
            logger.warning("update_task: task not found id=%s", task_id)
            return None

        if clean is not None:
            task.text = clean
        if link_type is not None:
            task.link_type = link_type or "none"
        if link_data is not None:
            task.link_data = self._clean_link_data(link_data)

        if not self._write(doc):
            return None
        return Task.from_dict(task.to_dict())

    def delete_task(self, task_id: str) -> bool:
        doc = self._read_for_write()
        if doc is None:
            return False
        if doc.find(task_id) is None:
            logger.warning("delete_task: task not found id=%s", task_id)
            return False
        doc.tasks = [t for t in doc.tasks if t.id != task_id]
        doc.weekly_status.checked = [cid for cid in doc.weekly_status.checked if cid != task_id]
        doc.renumber()
        ok = self._write(doc)
        if ok:
            logger.debug("Task deleted id=%s remaining=%d", task_id, len(doc.tasks))
        return ok

    def reorder_tasks(self, ordered_ids: Iterable[str]) -> bool:
        """
        Apply a new display order.

        Listed ids take their position; unknown or repeated ids are ignored.
        Tasks missing from the list keep their relative order after the
        listed ones, so order stays dense.
        """
        doc = self._read_for_write()
        if doc is None:
            return False
        by_id = {t.id: t for t in doc.tasks}

        placed: list[Task] = []
        seen: set[str] = set()
        for task_id in ordered_ids:
            task = by_id.get(task_id)
            if task is None or task_id in seen:
                continue
            seen.add(task_id)
            placed.append(task)

        rest = [t for t in doc.ordered_tasks() if t.id not in seen]
        if rest and placed:
            logger.debug("reorder_tasks: %d task(s) not listed, appended after", len(rest))
        for index, task in enumerate(placed + rest):
            task.order = index
        return self._write(doc)

    # ---- weekly status ----

    def get_checked_ids(self) -> set[str]:
        return set(self._read().weekly_status.checked)

    def toggle_checked(self, task_id: str) -> bool:
        """
        Flip the checkmark of a task; returns the membership after the call.

        Unknown ids are rejected (nothing recorded). If the write fails the
        previous membership is returned.
        """
        doc = self._read_for_write()
        if doc is None:
            return False
        checked = doc.weekly_status.checked
        was_checked = task_id in checked

        if doc.find(task_id) is None:
            logger.warning("toggle_checked: task not found id=%s", task_id)
            return was_checked

        if was_checked:
            checked.remove(task_id)
        else:
            checked.append(task_id)

        if not self._write(doc):
            return was_checked
        return not was_checked

    def check_weekly_reset(self) -> bool:
        """
        Clear checkmarks when the ISO week changed since the last run.

        Returns True only when a reset happened and was persisted.
        """
        doc = self._read_for_write()
        if doc is None:
            return False
        current = self.current_week_id()
        stored = doc.weekly_status.week_id
        if stored == current:
            return False

        doc.weekly_status = WeeklyStatus(week_id=current, checked=[])
        if not self._write(doc):
            return False
        logger.info("Weekly reset: %s -> %s", stored, current)
        return True

    def manual_reset(self) -> bool:
        doc = self._read_for_write()
        if doc is None:
            return False
        doc.weekly_status = WeeklyStatus(week_id=self.current_week_id(), checked=[])
        ok = self._write(doc)
        if ok:
            logger.info("Manual reset for week %s", doc.weekly_status.week_id)
        return ok

    # ---- settings ----

    def get_settings(self) -> Preferences:
        return self._read().settings

    def update_settings(self, **changes: Any) -> Preferences:
        unknown = set(changes) - {"reset_day"}
        if unknown:
            raise InvalidInput(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        reset_day = changes.get("reset_day")
        if reset_day is not None and (
            not isinstance(reset_day, int) or isinstance(reset_day, bool) or not 0 <= reset_day <= 6
        ):
            raise InvalidInput("reset_day must be an integer between 0 and 6.")

        doc = self._read_for_write()
        if doc is None:
            return Preferences()
        previous = Preferences(reset_day=doc.settings.reset_day)
        if reset_day is not None:
            doc.settings.reset_day = reset_day
        if not self._write(doc):
            return previous
        return doc.settings

    # ---- import / export ----

    def export_snapshot(self) -> str:
        return self._read().to_json(indent=2)

    def import_snapshot(self, payload: str) -> bool:
        """
        Replace the whole document with an exported snapshot.

        Fails closed (returns False, nothing written) when the payload is
        not a JSON object or its "todos" is missing / not a list.
        """
        try:
            data = parse_document_json(payload)
        except ParseFailure as e:
            logger.warning("Import rejected: %s", e)
            return False

        if not isinstance(data.get("todos"), list):
            logger.warning("Import rejected: 'todos' is missing or not a list.")
            return False

        doc = ChecklistDocument.from_dict({**default_document_dict(), **data})
        doc.normalize()
        ok = self._write(doc)
        if ok:
            logger.info(
                "Imported checklist: tasks=%d checked=%d week=%s",
                len(doc.tasks),
                len(doc.weekly_status.checked),
                doc.weekly_status.week_id,
            )
        return ok
