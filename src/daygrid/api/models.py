from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..domain import Event, EventCategory, EventDraft


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = Field(default=None)
    name: str
    date: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    description: str = Field(default="")
    category: str = Field(default=EventCategory.DEFAULT.value)

    @classmethod
    def from_domain(cls, event: Event) -> "EventPayload":
        return cls.model_validate(event.to_record())


class EventDraftPayload(BaseModel):
    """Validated form input for creating or editing an event."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    date: dt.date
    start_time: dt.time = Field(alias="startTime")
    end_time: dt.time = Field(alias="endTime")
    description: str = Field(default="")
    category: EventCategory = Field(default=EventCategory.DEFAULT)

    @field_validator("start_time", "end_time")
    @classmethod
    def _minute_precision(cls, value: dt.time) -> dt.time:
        return value.replace(second=0, microsecond=0, tzinfo=None)

    @model_validator(mode="after")
    def _check_order(self) -> "EventDraftPayload":
        if self.start_time >= self.end_time:
            raise ValueError("start time must be before end time")
        return self

    def to_draft(self) -> EventDraft:
        return EventDraft(
            name=self.name,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            description=self.description,
            category=self.category,
        )


class MonthPayload(BaseModel):
    year: int
    month: int = Field(ge=1, le=12)
    label: str
    days_in_month: int = Field(alias="daysInMonth")
    first_day_offset: int = Field(alias="firstDayOffset", ge=0, le=6)

    model_config = ConfigDict(populate_by_name=True)

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
