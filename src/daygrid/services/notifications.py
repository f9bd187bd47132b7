from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List

from ..domain import ScheduleError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "default"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"

    @classmethod
    def from_error(cls, error: ScheduleError) -> "Notification":
        return cls(title=error.title, description=error.description, variant="destructive")

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "description": self.description, "variant": self.variant}


EVENT_ADDED = Notification("Event Added", "Your event has been successfully added.")
EVENT_UPDATED = Notification("Event Updated", "Your event has been successfully updated.")
EVENT_MOVED = Notification("Event Moved", "Your event has been moved to the new date.")
EVENT_DELETED = Notification("Event Deleted", "Your event has been successfully deleted.")
EVENTS_EXPORTED = Notification("Events Exported", "Your events have been exported successfully.")


class Notifier(ABC):
    @abstractmethod
    def notify(self, notification: Notification) -> None:
        ...


class LoggingNotifier(Notifier):
    """Logs every outcome and keeps the most recent ones for display."""

    def __init__(self, history_size: int = 50) -> None:
        self._history: Deque[Notification] = deque(maxlen=history_size)

    def notify(self, notification: Notification) -> None:
        level = logging.WARNING if notification.is_error else logging.INFO
        logger.log(level, "%s: %s", notification.title, notification.description)
        self._history.append(notification)

    @property
    def history(self) -> List[Notification]:
        return list(self._history)


__all__ = [
    "EVENTS_EXPORTED",
    "EVENT_ADDED",
    "EVENT_DELETED",
    "EVENT_MOVED",
    "EVENT_UPDATED",
    "LoggingNotifier",
    "Notification",
    "Notifier",
]
