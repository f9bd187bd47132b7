from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import orjson

from ..core import ensure_data_dir
from ..domain import Event, StorageError, ValidationError

logger = logging.getLogger(__name__)


def dump_events(events: Iterable[Event]) -> bytes:
    """Serialize events as a pretty-printed JSON array (two-space indent)."""

    return orjson.dumps([event.to_record() for event in events], option=orjson.OPT_INDENT_2)


def load_events(raw: bytes) -> List[Event]:
    payload = orjson.loads(raw)
    if not isinstance(payload, list):
        raise StorageError(
            "Event file must contain a JSON array",
            description="Saved events could not be read.",
        )
    for record in payload:
        if not isinstance(record, dict):
            raise ValidationError(f"Event record must be an object, got {record!r}")
    return [Event.from_record(record) for record in payload]


class EventStorage(ABC):
    """Persistence adapter the event store flushes through after every mutation."""

    @abstractmethod
    def load(self) -> List[Event]:
        ...

    @abstractmethod
    def save(self, events: Iterable[Event]) -> None:
        ...


class JsonFileStorage(EventStorage):
    """Stores the full event collection as a JSON array in a single file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> List[Event]:
        if not self._path.exists():
            logger.debug("No event file at %s; starting empty", self._path)
            return []
        try:
            raw = self._path.read_bytes()
        except OSError as exc:
            raise StorageError(
                f"Could not read {self._path}: {exc}",
                description="Saved events could not be read.",
            ) from exc
        if not raw.strip():
            return []
        try:
            events = load_events(raw)
        except (orjson.JSONDecodeError, ValidationError) as exc:
            raise StorageError(
                f"Malformed event file {self._path}: {exc}",
                description="Saved events could not be read.",
            ) from exc
        logger.info("Loaded %d events from %s", len(events), self._path)
        return events

    def save(self, events: Iterable[Event]) -> None:
        payload = dump_events(events) + b"\n"
        try:
            ensure_data_dir(self._path.parent)
            fd, tmp_name = tempfile.mkstemp(prefix=".events-", suffix=".json", dir=str(self._path.parent))
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(payload)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, self._path)
            finally:
                if os.path.exists(tmp_name):
                    os.remove(tmp_name)
        except OSError as exc:
            logger.error("Failed to save events to %s: %s", self._path, exc)
            raise StorageError(f"Could not write {self._path}: {exc}") from exc
        logger.debug("Saved events to %s", self._path)


class MemoryStorage(EventStorage):
    """Keeps serialized records in memory; used for tests and throwaway sessions."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None) -> None:
        self.records: List[Dict[str, Any]] = list(records or [])
        self.save_count = 0

    def load(self) -> List[Event]:
        return [Event.from_record(record) for record in self.records]

    def save(self, events: Iterable[Event]) -> None:
        self.records = [event.to_record() for event in events]
        self.save_count += 1


__all__ = ["EventStorage", "JsonFileStorage", "MemoryStorage", "dump_events", "load_events"]
