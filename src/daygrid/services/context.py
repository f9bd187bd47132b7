from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..config import AppSettings, get_settings
from ..data import EventStorage, EventStore, JsonFileStorage
from .notifications import LoggingNotifier
from .schedule import ScheduleController


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root wiring settings, storage, the event store and the controller."""

    settings: AppSettings = field(default_factory=get_settings)
    storage: Optional[EventStorage] = None
    notifier: LoggingNotifier = field(default_factory=LoggingNotifier)
    store: EventStore = field(init=False)
    schedule: ScheduleController = field(init=False)

    def __post_init__(self) -> None:
        if self.storage is None:
            self.storage = JsonFileStorage(self.settings.storage.events_file)
        self.store = EventStore.hydrate(self.storage)
        self.schedule = ScheduleController(self.store, notifier=self.notifier)
