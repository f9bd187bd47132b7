from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List


@dataclass
class DayIndex:
    """Buckets event ids by calendar day for constant-time same-day lookups."""

    days: Dict[date, List[int]] = field(default_factory=dict)

    def add(self, day: date, event_id: int) -> None:
        self.days.setdefault(day, []).append(event_id)

    def discard(self, day: date, event_id: int) -> None:
        ids = self.days.get(day, [])
        if event_id in ids:
            ids.remove(event_id)
        if not ids:
            self.days.pop(day, None)

    def ids_on(self, day: date) -> List[int]:
        return list(self.days.get(day, []))
