"""Shared fixtures for the daygrid test suite."""

import os
from datetime import date, time

import pytest

# Keep test runs from writing log files into the user data directory.
os.environ.setdefault("DAYGRID_LOG_FILE", "")

from daygrid.config import AppSettings, LoggingSettings, ServerSettings, StorageSettings
from daygrid.data import EventStore, MemoryStorage
from daygrid.domain import Event, EventCategory, EventDraft
from daygrid.services import LoggingNotifier, ScheduleController

FIXED_CLOCK = 1_718_000_000.0


def _time(value):
    return value if isinstance(value, time) else time.fromisoformat(value)


@pytest.fixture
def make_event():
    def factory(
        name="Standup",
        day="2024-06-10",
        start="09:00",
        end="09:30",
        *,
        event_id=None,
        description="",
        category=EventCategory.DEFAULT,
    ):
        return Event(
            id=event_id,
            name=name,
            date=day if isinstance(day, date) else date.fromisoformat(day),
            start_time=_time(start),
            end_time=_time(end),
            description=description,
            category=category,
        )

    return factory


@pytest.fixture
def make_draft():
    def factory(name="Standup", day="2024-06-10", start="09:00", end="09:30", description="", category="default"):
        return EventDraft(
            name=name,
            date=date.fromisoformat(day) if day else None,
            start_time=_time(start) if start else None,
            end_time=_time(end) if end else None,
            description=description,
            category=EventCategory.parse(category),
        )

    return factory


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return EventStore(storage, clock=lambda: FIXED_CLOCK)


@pytest.fixture
def notifier():
    return LoggingNotifier()


@pytest.fixture
def controller(store, notifier):
    return ScheduleController(store, notifier=notifier)


@pytest.fixture
def app_settings(tmp_path):
    return AppSettings(
        storage=StorageSettings(
            data_dir=tmp_path,
            events_file=tmp_path / "events.json",
            export_dir=tmp_path / "exports",
        ),
        server=ServerSettings(host="127.0.0.1", port=8000),
        logging=LoggingSettings(level="INFO", log_file=None),
    )
