from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from ..data import EventStore, dump_events
from ..domain import (
    ConflictError,
    Event,
    EventDraft,
    NotFoundError,
    ScheduleError,
    StorageError,
    ValidationError,
)
from .conflicts import first_conflict
from .grid import Cell, cells_for_month
from .notifications import (
    EVENT_ADDED,
    EVENT_DELETED,
    EVENT_MOVED,
    EVENT_UPDATED,
    EVENTS_EXPORTED,
    LoggingNotifier,
    Notification,
    Notifier,
)

logger = logging.getLogger(__name__)

MOVE_CONFLICT_DESCRIPTION = "This event overlaps with an existing event on the new date."


@dataclass(frozen=True)
class MonthExport:
    year: int
    month: int
    events: Tuple[Event, ...]

    @property
    def file_name(self) -> str:
        return f"events_{self.year}_{self.month}.json"

    def to_json(self) -> bytes:
        return dump_events(self.events)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileName": self.file_name,
            "year": self.year,
            "month": self.month,
            "events": [event.to_record() for event in self.events],
        }


def filter_events(collection: Iterable[Event], query: str) -> List[Event]:
    """Case-insensitive substring match on name or description, preserving order."""

    needle = (query or "").lower()
    return [
        event
        for event in collection
        if needle in event.name.lower() or needle in event.description.lower()
    ]


def export_month(collection: Iterable[Event], year: int, month: int) -> MonthExport:
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    selected = tuple(event for event in collection if event.date.year == year and event.date.month == month)
    return MonthExport(year=year, month=month, events=selected)


@dataclass(slots=True)
class ScheduleController:
    """Single entry point for every intent that reads or mutates the event store."""

    store: EventStore
    notifier: Notifier = field(default_factory=LoggingNotifier)
    _lock: Any = field(default_factory=threading.RLock, init=False, repr=False)
    _depth: int = field(default=0, init=False, repr=False)

    @contextmanager
    def intent(self, name: str) -> Iterator[None]:
        """Serialize one intent and report its rejection through the notifier.

        Intents may nest (an API call wrapping ``add_event``); a rejection is
        reported once, by the outermost intent.
        """

        # Check-then-mutate must not interleave with another intent.
        with self._lock:
            self._depth += 1
            try:
                yield
            except ScheduleError as exc:
                if self._depth == 1:
                    logger.warning("%s rejected: %s", name, exc)
                    self.notifier.notify(Notification.from_error(exc))
                raise
            finally:
                self._depth -= 1

    def _ensure_free(self, candidate: Event, *, exclude_id: Optional[int] = None, description: Optional[str] = None) -> None:
        conflicting = first_conflict(candidate, self.store.events_on(candidate.date), exclude_id)
        if conflicting is None:
            return
        if description:
            raise ConflictError(candidate, conflicting, description=description)
        raise ConflictError(candidate, conflicting)

    # Intents ------------------------------------------------------------
    def add_event(self, draft: EventDraft) -> Event:
        with self.intent("add_event"):
            candidate = draft.to_event()
            self._ensure_free(candidate)
            stored = self.store.add(candidate)
            logger.info("Added event %s '%s' on %s %s", stored.id, stored.name, stored.date, stored.time_range)
        self.notifier.notify(EVENT_ADDED)
        return stored

    def update_event(self, updated: Event) -> Event:
        with self.intent("update_event"):
            if updated.id is None:
                raise NotFoundError(None)
            self.store.get(updated.id)
            updated.validate()
            self._ensure_free(updated, exclude_id=updated.id)
            stored = self.store.replace(updated.id, updated)
            logger.info("Updated event %s", stored.id)
        self.notifier.notify(EVENT_UPDATED)
        return stored

    def edit_event(self, event_id: int, draft: EventDraft) -> Event:
        with self.intent("edit_event"):
            return self.update_event(draft.to_event(event_id))

    def move_event(self, event_id: int, new_date: date) -> Event:
        with self.intent("move_event"):
            existing = self.store.get(event_id)
            moved = existing.moved_to(new_date)
            self._ensure_free(moved, exclude_id=event_id, description=MOVE_CONFLICT_DESCRIPTION)
            stored = self.store.replace(event_id, moved)
            logger.info("Moved event %s from %s to %s", event_id, existing.date, new_date)
        self.notifier.notify(EVENT_MOVED)
        return stored

    def delete_event(self, event_id: int) -> bool:
        with self.intent("delete_event"):
            removed = self.store.remove(event_id)
            if removed:
                logger.info("Deleted event %s", event_id)
            else:
                logger.debug("Delete for unknown event %s ignored", event_id)
        self.notifier.notify(EVENT_DELETED)
        return removed

    # Queries ------------------------------------------------------------
    def list_events(self) -> List[Event]:
        with self._lock:
            return self.store.list()

    def get_event(self, event_id: int) -> Event:
        with self.intent("get_event"):
            return self.store.get(event_id)

    def filter_events(self, collection: Iterable[Event], query: str) -> List[Event]:
        return filter_events(collection, query)

    def events_on(self, day: date, query: str = "") -> List[Event]:
        with self._lock:
            events = filter_events(self.store.events_on(day), query)
        return sorted(events, key=lambda event: event.start_time)

    def month_view(
        self,
        reference: date,
        *,
        query: str = "",
        selected: Optional[date] = None,
        today: Optional[date] = None,
    ) -> List[Cell]:
        with self._lock:
            visible = filter_events(self.store.list(), query)
        return cells_for_month(reference, visible, selected=selected, today=today)

    # Export -------------------------------------------------------------
    def export_month(self, collection: Iterable[Event], year: int, month: int) -> MonthExport:
        with self.intent("export_month"):
            return export_month(collection, year, month)

    def write_export(self, export: MonthExport, directory: Path) -> Path:
        target = Path(directory) / export.file_name
        with self.intent("write_export"):
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(export.to_json() + b"\n")
            except OSError as exc:
                raise StorageError(
                    f"Could not write export {target}: {exc}",
                    description="The export file could not be written.",
                ) from exc
            logger.info("Exported %d events to %s", len(export.events), target)
        self.notifier.notify(EVENTS_EXPORTED)
        return target


__all__ = ["MonthExport", "ScheduleController", "export_month", "filter_events"]
