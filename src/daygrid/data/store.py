from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable, Dict, Iterable, List

from ..domain import DuplicateEventError, Event, NotFoundError, StorageError, ValidationError
from .index import DayIndex
from .storage import EventStorage

logger = logging.getLogger(__name__)


_UNREADABLE = "Saved events could not be read."


def _verified(events: List[Event]) -> List[Event]:
    seen: Dict[int, Event] = {}
    by_day: Dict[date, List[Event]] = {}
    for event in events:
        try:
            event.validate()
        except ValidationError as exc:
            raise StorageError(f"Stored event {event.id} is invalid: {exc}", description=_UNREADABLE) from exc
        if event.id is not None:
            if event.id in seen:
                raise StorageError(f"Duplicate event id {event.id} in stored events", description=_UNREADABLE)
            seen[event.id] = event
        for other in by_day.get(event.date, []):
            if event.overlaps(other):
                raise StorageError(
                    f"Stored events {other.id} and {event.id} overlap on {event.date.isoformat()}",
                    description=_UNREADABLE,
                )
        by_day.setdefault(event.date, []).append(event)
    return events


class EventStore:
    """Authoritative in-memory event collection with write-through persistence.

    Every mutating call flushes the complete collection through the storage
    adapter before returning. When the flush fails the in-memory change is kept
    and :class:`~daygrid.domain.StorageError` propagates to the caller.
    """

    def __init__(
        self,
        storage: EventStorage,
        events: Iterable[Event] = (),
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._events: Dict[int, Event] = {}
        self._index = DayIndex()
        for event in events:
            if event.id is None:
                event = event.with_id(self._next_id())
            if event.id in self._events:
                raise DuplicateEventError(f"Duplicate event id {event.id} in stored events")
            self._insert(event)

    @classmethod
    def hydrate(cls, storage: EventStorage, **kwargs) -> "EventStore":
        """Build a store from saved events, refusing data that breaks the store invariants.

        Invalid events, repeated ids and same-day overlaps raise
        :class:`~daygrid.domain.StorageError`.
        """

        events = _verified(storage.load())
        store = cls(storage, events, **kwargs)
        logger.info("Event store hydrated with %d events", len(store))
        return store

    def __len__(self) -> int:
        return len(self._events)

    def list(self) -> List[Event]:
        return list(self._events.values())

    def get(self, event_id: int) -> Event:
        try:
            return self._events[event_id]
        except KeyError as exc:
            raise NotFoundError(event_id) from exc

    def events_on(self, day: date) -> List[Event]:
        return [self._events[event_id] for event_id in self._index.ids_on(day)]

    def add(self, event: Event) -> Event:
        if event.id is None:
            event = event.with_id(self._next_id())
        elif event.id in self._events:
            raise DuplicateEventError(f"Event id {event.id} already exists")
        self._insert(event)
        logger.debug("Added event %s on %s", event.id, event.date)
        self._flush()
        return event

    def replace(self, event_id: int, event: Event) -> Event:
        existing = self.get(event_id)
        if event.id != event_id:
            event = event.with_id(event_id)
        self._index.discard(existing.date, event_id)
        self._events[event_id] = event
        self._index.add(event.date, event_id)
        logger.debug("Replaced event %s", event_id)
        self._flush()
        return event

    def remove(self, event_id: int) -> bool:
        event = self._events.pop(event_id, None)
        if event is None:
            return False
        self._index.discard(event.date, event_id)
        logger.debug("Removed event %s", event_id)
        self._flush()
        return True

    def _insert(self, event: Event) -> None:
        assert event.id is not None
        self._events[event.id] = event
        self._index.add(event.date, event.id)

    def _next_id(self) -> int:
        candidate = int(self._clock() * 1000)
        highest = max(self._events, default=0)
        return max(candidate, highest + 1)

    def _flush(self) -> None:
        self._storage.save(self.list())


__all__ = ["EventStore"]
