"""Error types raised by the scheduling engine.

Every :class:`ScheduleError` carries a human readable ``title``/``description``
pair so presentation layers can surface the outcome without knowing the error
type in detail.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import Event


class ScheduleError(Exception):
    """Base class for failures raised by scheduling intents."""

    title = "Request Failed"

    def __init__(self, message: str, *, description: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.description = description or message


class ConflictError(ScheduleError):
    """Raised when a candidate event overlaps an existing event on the same day."""

    title = "Event Overlap"

    def __init__(
        self,
        candidate: "Event",
        conflicting: Optional["Event"] = None,
        *,
        description: str = "This event overlaps with an existing event. Please choose a different time.",
    ) -> None:
        message = f"'{candidate.name}' on {candidate.date.isoformat()} overlaps an existing event"
        if conflicting is not None:
            message += f" ('{conflicting.name}' {conflicting.time_range})"
        super().__init__(message, description=description)
        self.candidate = candidate
        self.conflicting = conflicting


class NotFoundError(ScheduleError, LookupError):
    """Raised when an intent references an event id that is not in the store."""

    title = "Event Not Found"

    def __init__(self, event_id: object) -> None:
        super().__init__(
            f"Event {event_id!r} not found",
            description="The event no longer exists. It may have been deleted.",
        )
        self.event_id = event_id


class ValidationError(ScheduleError, ValueError):
    """Raised when a draft or record does not describe a valid event."""

    title = "Invalid Event"


class StorageError(ScheduleError):
    """Raised when the persistence adapter cannot read or write events."""

    title = "Storage Failed"

    def __init__(
        self,
        message: str,
        *,
        description: str = "Your changes are kept for this session but could not be saved.",
    ) -> None:
        super().__init__(message, description=description)


class DuplicateEventError(ValueError):
    """Raised when an event is inserted with an id that already exists."""
