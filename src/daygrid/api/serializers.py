from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..domain import Event
from ..services import CalendarMonth, Notification
from .models import EventPayload, MonthPayload


def serialize_event(event: Event) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump(by_alias=True)


def serialize_events(events: Iterable[Event]) -> List[Dict[str, Any]]:
    return [serialize_event(event) for event in events]


def serialize_month(month: CalendarMonth) -> Dict[str, Any]:
    return MonthPayload(
        year=month.year,
        month=month.month,
        label=month.label,
        days_in_month=month.days_in_month,
        first_day_offset=month.first_day_offset,
    ).to_response()


def serialize_notification(notification: Notification) -> Dict[str, Any]:
    return notification.to_dict()
