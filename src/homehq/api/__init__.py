"""Action layer returning structured results to the front end."""

from __future__ import annotations

from .actions import (
    ActionResult,
    create_event,
    create_task_from_suggestion,
    delete_event,
    get_event,
    preview_suggestions,
    update_event,
)
from .state import ApiState, api_state

__all__ = [
    "ActionResult",
    "ApiState",
    "api_state",
    "create_event",
    "create_task_from_suggestion",
    "delete_event",
    "get_event",
    "preview_suggestions",
    "update_event",
]
