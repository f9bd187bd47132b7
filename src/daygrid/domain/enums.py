from __future__ import annotations

from enum import Enum

from .errors import ValidationError


class EventCategory(str, Enum):
    DEFAULT = "default"
    WORK = "work"
    PERSONAL = "personal"
    OTHER = "other"

    @classmethod
    def parse(cls, value: "EventCategory | str | None") -> "EventCategory":
        if value is None or value == "":
            return cls.DEFAULT
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ValidationError(f"Unknown category {value!r}; expected one of: {choices}") from exc
