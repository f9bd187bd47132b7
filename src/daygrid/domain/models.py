from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Optional

from .enums import EventCategory
from .errors import ValidationError

TIME_FORMAT = "%H:%M"


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValidationError(f"Invalid date {value!r}; expected YYYY-MM-DD") from exc
    raise ValidationError(f"Unsupported date value: {value!r}")


def parse_time(value: Any) -> time:
    if isinstance(value, time):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = time.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValidationError(f"Invalid time {value!r}; expected HH:MM") from exc
    else:
        raise ValidationError(f"Unsupported time value: {value!r}")
    # Events are minute-granular; seconds from HH:MM:SS input are dropped.
    return parsed.replace(second=0, microsecond=0, tzinfo=None)


def format_time(value: time) -> str:
    return value.strftime(TIME_FORMAT)


@dataclass(frozen=True, slots=True)
class Event:
    name: str
    date: date
    start_time: time
    end_time: time
    description: str = ""
    category: EventCategory = EventCategory.DEFAULT
    id: Optional[int] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Event":
        try:
            raw_id = record["id"]
            name = record["name"]
            day = record["date"]
            start = record["startTime"]
            end = record["endTime"]
        except KeyError as exc:
            raise ValidationError(f"Event record is missing field {exc.args[0]!r}") from exc
        try:
            identifier = int(raw_id) if raw_id is not None else None
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Event id must be a number, got {raw_id!r}") from exc
        return cls(
            id=identifier,
            name=str(name),
            date=parse_date(day),
            start_time=parse_time(start),
            end_time=parse_time(end),
            description=str(record.get("description") or ""),
            category=EventCategory.parse(record.get("category")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date.isoformat(),
            "startTime": format_time(self.start_time),
            "endTime": format_time(self.end_time),
            "description": self.description,
            "category": self.category.value,
        }

    @property
    def time_range(self) -> str:
        return f"{format_time(self.start_time)}-{format_time(self.end_time)}"

    @property
    def duration(self) -> timedelta:
        return datetime.combine(self.date, self.end_time) - datetime.combine(self.date, self.start_time)

    def validate(self) -> "Event":
        if not self.name or not self.name.strip():
            raise ValidationError("Event name is required")
        if self.start_time >= self.end_time:
            raise ValidationError(
                f"Start time {format_time(self.start_time)} must be before end time {format_time(self.end_time)}"
            )
        if not isinstance(self.category, EventCategory):
            raise ValidationError(f"Unknown category {self.category!r}")
        return self

    def overlaps(self, other: "Event") -> bool:
        # Half-open [start, end) on the same date: touching boundaries do not overlap.
        return self.date == other.date and self.start_time < other.end_time and self.end_time > other.start_time

    def with_id(self, event_id: int) -> "Event":
        return replace(self, id=event_id)

    def moved_to(self, new_date: date) -> "Event":
        return replace(self, date=new_date)


@dataclass(slots=True)
class EventDraft:
    """Editable, possibly incomplete event as collected from a form or request."""

    name: str = ""
    date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    description: str = ""
    category: EventCategory = EventCategory.DEFAULT

    @classmethod
    def from_event(cls, event: Event) -> "EventDraft":
        return cls(
            name=event.name,
            date=event.date,
            start_time=event.start_time,
            end_time=event.end_time,
            description=event.description,
            category=event.category,
        )

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.name.strip():
            missing.append("name")
        if self.date is None:
            missing.append("date")
        if self.start_time is None:
            missing.append("start_time")
        if self.end_time is None:
            missing.append("end_time")
        return missing

    def to_event(self, event_id: Optional[int] = None) -> Event:
        missing = self.missing_fields()
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        assert self.date is not None and self.start_time is not None and self.end_time is not None
        event = Event(
            id=event_id,
            name=self.name.strip(),
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            description=self.description,
            category=EventCategory.parse(self.category),
        )
        return event.validate()
