"""Action functions called by the front end.

Each action validates its input with the pydantic request models, delegates
to a service and converts every outcome into an ``ActionResult``: either
``data`` or a structured ``error`` with ``code``, ``message`` and optional
``details``. No exception escapes an action.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from pydantic import ValidationError

from ..domain import ErrorCode, RepositoryError, ServiceError, UserContext
from ..suggestions import SuggestionRequest
from .models import AnalyzeEventRequest, CreateEventRequest, CreateTaskFromSuggestionRequest, UpdateEventRequest
from .serializers import serialize_creation, serialize_event, serialize_suggestions, serialize_task
from .state import ApiState, api_state

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ActionResult:
    success: bool
    data: Any = None
    error: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


def validation_details(exc: ValidationError) -> Dict[str, str]:
    details: Dict[str, str] = {}
    for item in exc.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "_"
        details.setdefault(field, item.get("msg", "Invalid value"))
    return details


def to_service_error(exc: Exception) -> ServiceError:
    if isinstance(exc, ServiceError):
        return exc
    if isinstance(exc, ValidationError):
        return ServiceError(ErrorCode.VALIDATION_ERROR, "Invalid input data", validation_details(exc))
    if isinstance(exc, RepositoryError):
        return ServiceError(ErrorCode.DATABASE_ERROR, "Database operation failed", {"technical": exc.message})
    return ServiceError(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")


async def _run(name: str, operation: Callable[[], Awaitable[Any]]) -> ActionResult:
    try:
        data = await operation()
    except (ServiceError, ValidationError, RepositoryError) as exc:
        error = to_service_error(exc)
        logger.info("Action %s failed: %s %s", name, error.code.value, error.message)
        return ActionResult(success=False, error=error.to_dict())
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error in action %s", name)
        error = ServiceError(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")
        return ActionResult(success=False, error=error.to_dict())
    return ActionResult(success=True, data=data)


def _state(state: Optional[ApiState]) -> ApiState:
    return state or api_state


async def create_event(payload: Mapping[str, Any], user: UserContext, *, state: Optional[ApiState] = None) -> ActionResult:
    async def operation() -> Dict[str, Any]:
        request = CreateEventRequest.model_validate(payload)
        result = await _state(state).context.creation.create(
            request.to_draft(),
            creator_id=user.user_id,
            family_id=user.family_id,
            requester_role=user.role,
        )
        return serialize_creation(result)

    return await _run("create_event", operation)


async def get_event(event_id: str, user: UserContext, *, state: Optional[ApiState] = None) -> ActionResult:
    async def operation() -> Dict[str, Any]:
        event = await _state(state).context.events_service.get_event(event_id, user)
        return serialize_event(event)

    return await _run("get_event", operation)


async def update_event(
    event_id: str,
    payload: Mapping[str, Any],
    user: UserContext,
    *,
    state: Optional[ApiState] = None,
) -> ActionResult:
    async def operation() -> Dict[str, Any]:
        request = UpdateEventRequest.model_validate(payload)
        event = await _state(state).context.events_service.update_event(event_id, request.to_update(), user)
        return serialize_event(event)

    return await _run("update_event", operation)


async def delete_event(event_id: str, user: UserContext, *, state: Optional[ApiState] = None) -> ActionResult:
    async def operation() -> None:
        await _state(state).context.events_service.delete_event(event_id, user)

    return await _run("delete_event", operation)


async def preview_suggestions(
    payload: Mapping[str, Any],
    user: UserContext,
    *,
    state: Optional[ApiState] = None,
) -> ActionResult:
    """Suggestions for an event being drafted, without persisting anything."""

    async def operation() -> Dict[str, Any]:
        request = AnalyzeEventRequest.model_validate(payload)
        suggestion_request = SuggestionRequest(
            title=request.title,
            start_time=request.start_time,
            family_id=user.family_id,
            requester_role=user.role,
            participant_account_ids=tuple(str(item) for item in request.participant_ids),
            participant_member_ids=tuple(str(item) for item in request.member_ids),
        )
        try:
            suggestions = await _state(state).context.engine.suggest(suggestion_request)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Suggestion preview failed: %s", exc)
            raise ServiceError(ErrorCode.AI_ENGINE_ERROR, "Failed to analyze event for suggestions") from exc
        return {"suggestions": serialize_suggestions(suggestions)}

    return await _run("preview_suggestions", operation)


async def create_task_from_suggestion(
    payload: Mapping[str, Any],
    user: UserContext,
    *,
    state: Optional[ApiState] = None,
) -> ActionResult:
    async def operation() -> Dict[str, Any]:
        request = CreateTaskFromSuggestionRequest.model_validate(payload)
        task = await _state(state).context.task_service.create_from_suggestion(request.to_draft(), user)
        return serialize_task(task)

    return await _run("create_task_from_suggestion", operation)


__all__ = [
    "ActionResult",
    "create_event",
    "create_task_from_suggestion",
    "delete_event",
    "get_event",
    "preview_suggestions",
    "to_service_error",
    "update_event",
    "validation_details",
]
