from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..domain import Event

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class CalendarMonth:
    year: int
    month: int
    days_in_month: int
    first_day_offset: int

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"


@dataclass(frozen=True)
class EmptyCell:
    is_empty: bool = field(default=True, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"empty": True}


@dataclass(frozen=True)
class DayCell:
    day: int
    date: date
    is_today: bool
    is_selected: bool
    matching_events: Tuple[Event, ...] = ()
    is_empty: bool = field(default=False, init=False)

    @property
    def has_events(self) -> bool:
        return bool(self.matching_events)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "empty": False,
            "day": self.day,
            "date": self.date.isoformat(),
            "isToday": self.is_today,
            "isSelected": self.is_selected,
            "events": [event.to_record() for event in self.matching_events],
        }


Cell = Union[EmptyCell, DayCell]


def build_month(reference: date) -> CalendarMonth:
    """Describe the month containing ``reference`` with a Sunday-first offset."""

    monday_first, days_in_month = calendar.monthrange(reference.year, reference.month)
    return CalendarMonth(
        year=reference.year,
        month=reference.month,
        days_in_month=days_in_month,
        first_day_offset=(monday_first + 1) % 7,
    )


def cells_for_month(
    reference: date,
    events: Iterable[Event],
    *,
    selected: Optional[date] = None,
    today: Optional[date] = None,
) -> List[Cell]:
    """Lay out the month of ``reference`` as leading blanks followed by one cell per day.

    ``selected`` defaults to ``reference`` and ``today`` to the process clock.
    Trailing padding to complete the last week is left to the renderer.
    """

    month = build_month(reference)
    selected_day = selected or reference
    current_day = today or date.today()

    by_day: Dict[date, List[Event]] = {}
    for event in events:
        if event.date.year == month.year and event.date.month == month.month:
            by_day.setdefault(event.date, []).append(event)

    cells: List[Cell] = [EmptyCell() for _ in range(month.first_day_offset)]
    for day in range(1, month.days_in_month + 1):
        cell_date = date(month.year, month.month, day)
        cells.append(
            DayCell(
                day=day,
                date=cell_date,
                is_today=cell_date == current_day,
                is_selected=cell_date == selected_day,
                matching_events=tuple(by_day.get(cell_date, ())),
            )
        )
    return cells


def weeks(cells: List[Cell]) -> List[List[Optional[Cell]]]:
    """Split cells into rows of seven, padding the final row with ``None``."""

    rows: List[List[Optional[Cell]]] = []
    for start in range(0, len(cells), 7):
        row: List[Optional[Cell]] = list(cells[start : start + 7])
        row.extend([None] * (7 - len(row)))
        rows.append(row)
    return rows


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    described = build_month(date(year, month, 1))
    return described.first_day, described.last_day


def shift_month(reference: date, delta: int) -> date:
    """Return the first day of the month ``delta`` months away from ``reference``."""

    index = reference.year * 12 + (reference.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


__all__ = [
    "CalendarMonth",
    "Cell",
    "DayCell",
    "EmptyCell",
    "WEEKDAY_LABELS",
    "build_month",
    "cells_for_month",
    "month_bounds",
    "shift_month",
    "weeks",
]
