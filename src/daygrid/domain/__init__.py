"""Domain models for the event calendar."""

from __future__ import annotations

from .enums import EventCategory
from .errors import (
    ConflictError,
    DuplicateEventError,
    NotFoundError,
    ScheduleError,
    StorageError,
    ValidationError,
)
from .models import Event, EventDraft, format_time, parse_date, parse_time

__all__ = [
    "ConflictError",
    "DuplicateEventError",
    "Event",
    "EventCategory",
    "EventDraft",
    "NotFoundError",
    "ScheduleError",
    "StorageError",
    "ValidationError",
    "format_time",
    "parse_date",
    "parse_time",
]
