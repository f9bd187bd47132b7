"""Data access layer."""

from __future__ import annotations

from .index import DayIndex
from .storage import EventStorage, JsonFileStorage, MemoryStorage, dump_events, load_events
from .store import EventStore

__all__ = [
    "DayIndex",
    "EventStorage",
    "EventStore",
    "JsonFileStorage",
    "MemoryStorage",
    "dump_events",
    "load_events",
]
