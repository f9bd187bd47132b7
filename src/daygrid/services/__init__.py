"""Application services orchestrating the event store and calendar logic."""

from __future__ import annotations

from .conflicts import find_conflicts, first_conflict, overlaps
from .context import ServiceContext
from .grid import CalendarMonth, DayCell, EmptyCell, build_month, cells_for_month, shift_month
from .notifications import LoggingNotifier, Notification, Notifier
from .schedule import MonthExport, ScheduleController, export_month, filter_events

__all__ = [
    "CalendarMonth",
    "DayCell",
    "EmptyCell",
    "LoggingNotifier",
    "MonthExport",
    "Notification",
    "Notifier",
    "ScheduleController",
    "ServiceContext",
    "build_month",
    "cells_for_month",
    "export_month",
    "filter_events",
    "find_conflicts",
    "first_conflict",
    "overlaps",
    "shift_month",
]
