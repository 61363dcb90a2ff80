from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..services import ServiceContext


@dataclass(slots=True)
class ApiState:
    """Lazily built service context shared by the action functions."""

    _context: Optional[ServiceContext] = field(default=None)

    @property
    def context(self) -> ServiceContext:
        if self._context is None:
            self._context = ServiceContext()
        return self._context

    def use(self, context: ServiceContext) -> None:
        self._context = context


api_state = ApiState()
