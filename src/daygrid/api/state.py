from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..services import ScheduleController, ServiceContext


@dataclass(slots=True)
class ApiState:
    """Holds the service context; hydrated from storage on first use."""

    _context: Optional[ServiceContext] = None

    @property
    def context(self) -> ServiceContext:
        if self._context is None:
            self._context = ServiceContext()
        return self._context

    @property
    def schedule(self) -> ScheduleController:
        return self.context.schedule

    def bind(self, context: ServiceContext) -> None:
        self._context = context

    def reset(self) -> None:
        self._context = None


api_state = ApiState()
