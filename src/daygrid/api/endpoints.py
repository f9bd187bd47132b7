from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Optional

import pydantic

from ..domain import ValidationError, parse_date
from ..services import build_month, shift_month
from ..services.grid import WEEKDAY_LABELS
from ..services.notifications import (
    EVENT_ADDED,
    EVENT_DELETED,
    EVENT_MOVED,
    EVENT_UPDATED,
    EVENTS_EXPORTED,
)
from .models import EventDraftPayload
from .registry import format_validation_errors, register_api
from .serializers import serialize_event, serialize_events, serialize_month, serialize_notification
from .state import api_state


def _draft_payload(**fields: Any) -> EventDraftPayload:
    try:
        return EventDraftPayload.model_validate(fields)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid event: {format_validation_errors(exc)}") from exc


def _reference_day(value: Optional[str]) -> dt.date:
    return parse_date(value) if value else dt.date.today()


@register_api(
    "list_events",
    description="List every stored event, optionally filtered by a name/description substring.",
    category="calendar",
    tags=("read",),
)
def list_events(query: str = "") -> Dict[str, Any]:
    events = api_state.schedule.filter_events(api_state.schedule.list_events(), query)
    return {"query": query, "events": serialize_events(events)}


@register_api(
    "events_for_day",
    description="Return the events on a specific day ordered by start time.",
    category="calendar",
    tags=("read",),
)
def events_for_day(day: str, query: str = "") -> Dict[str, Any]:
    target = parse_date(day)
    events = api_state.schedule.events_on(target, query)
    return {"day": target.isoformat(), "events": serialize_events(events)}


@register_api(
    "filter_events",
    description="Case-insensitive search of event names and descriptions.",
    category="calendar",
    tags=("read", "filter"),
)
def filter_events(query: str) -> Dict[str, Any]:
    return list_events(query=query)


@register_api(
    "add_event",
    description="Create an event; rejected when it overlaps another event on the same day.",
    category="calendar",
    tags=("write",),
)
def add_event(
    *,
    name: str,
    date: str,
    start_time: str,
    end_time: str,
    description: str = "",
    category: str = "default",
) -> Dict[str, Any]:
    payload = _draft_payload(
        name=name,
        date=date,
        start_time=start_time,
        end_time=end_time,
        description=description,
        category=category,
    )
    event = api_state.schedule.add_event(payload.to_draft())
    return {"event": serialize_event(event), "notification": serialize_notification(EVENT_ADDED)}


@register_api(
    "update_event",
    description="Replace every field of an existing event; rejected on overlap.",
    category="calendar",
    tags=("write",),
)
def update_event(
    *,
    event_id: int,
    name: str,
    date: str,
    start_time: str,
    end_time: str,
    description: str = "",
    category: str = "default",
) -> Dict[str, Any]:
    payload = _draft_payload(
        name=name,
        date=date,
        start_time=start_time,
        end_time=end_time,
        description=description,
        category=category,
    )
    event = api_state.schedule.edit_event(event_id, payload.to_draft())
    return {"event": serialize_event(event), "notification": serialize_notification(EVENT_UPDATED)}


@register_api(
    "move_event",
    description="Move an event to another day keeping its times; rejected on overlap.",
    category="calendar",
    tags=("write", "move"),
)
def move_event(event_id: int, new_date: str) -> Dict[str, Any]:
    event = api_state.schedule.move_event(event_id, parse_date(new_date))
    return {"event": serialize_event(event), "notification": serialize_notification(EVENT_MOVED)}


@register_api(
    "delete_event",
    description="Delete an event. Unknown ids are ignored.",
    category="calendar",
    tags=("write",),
)
def delete_event(event_id: int) -> Dict[str, Any]:
    removed = api_state.schedule.delete_event(event_id)
    return {"deleted": event_id, "removed": removed, "notification": serialize_notification(EVENT_DELETED)}


@register_api(
    "month_grid",
    description="Lay out a month as leading blank cells followed by one cell per day with its events.",
    category="grid",
    tags=("read", "grid"),
)
def month_grid(reference: Optional[str] = None, query: str = "", selected: Optional[str] = None) -> Dict[str, Any]:
    reference_day = _reference_day(reference)
    selected_day = parse_date(selected) if selected else None
    cells = api_state.schedule.month_view(reference_day, query=query, selected=selected_day)
    return {
        "month": serialize_month(build_month(reference_day)),
        "weekdays": list(WEEKDAY_LABELS),
        "cells": [cell.to_dict() for cell in cells],
    }


@register_api(
    "navigate_month",
    description="Return the first day of the month a number of months before or after the reference.",
    category="grid",
    tags=("navigate",),
)
def navigate_month(reference: Optional[str] = None, delta: int = 1) -> Dict[str, Any]:
    target = shift_month(_reference_day(reference), delta)
    return {"reference": target.isoformat(), "month": serialize_month(build_month(target))}


@register_api(
    "export_month",
    description="Export the events of a month as a JSON document; optionally write it to the export directory.",
    category="export",
    tags=("export",),
)
def export_month(year: int, month: int, write: bool = False) -> Dict[str, Any]:
    schedule = api_state.schedule
    export = schedule.export_month(schedule.list_events(), year, month)
    result = export.to_dict()
    if write:
        path = schedule.write_export(export, api_state.context.settings.storage.export_dir)
        result["path"] = str(path)
        result["notification"] = serialize_notification(EVENTS_EXPORTED)
    return result
