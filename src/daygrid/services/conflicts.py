"""Overlap detection between events on the same calendar day."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from ..domain import Event


def _blocking(candidate: Event, existing: Iterable[Event], exclude_id: Optional[int]) -> Iterator[Event]:
    for event in existing:
        if exclude_id is not None and event.id == exclude_id:
            continue
        if candidate.overlaps(event):
            yield event


def first_conflict(candidate: Event, existing: Iterable[Event], exclude_id: Optional[int] = None) -> Optional[Event]:
    return next(_blocking(candidate, existing, exclude_id), None)


def overlaps(candidate: Event, existing: Iterable[Event], exclude_id: Optional[int] = None) -> bool:
    """Return ``True`` when ``candidate`` intersects any other event on its date."""

    return first_conflict(candidate, existing, exclude_id) is not None


def find_conflicts(candidate: Event, existing: Iterable[Event], exclude_id: Optional[int] = None) -> List[Event]:
    return list(_blocking(candidate, existing, exclude_id))


__all__ = ["find_conflicts", "first_conflict", "overlaps"]
