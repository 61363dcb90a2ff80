from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..data.repositories import EventRepository, ProfileRepository, TaskRepository
from ..domain import ErrorCode, RepositoryError, ServiceError, Task, TaskFromSuggestionDraft, UserContext

logger = logging.getLogger(__name__)


def suggestion_task_record(
    *,
    family_id: str,
    created_by: str,
    event_id: str,
    suggestion_id: str,
    title: str,
    due_date: Optional[datetime],
    is_private: bool,
    assigned_to: Optional[str] = None,
) -> Dict[str, Any]:
    """Insert payload for a task that came from an accepted suggestion."""

    return {
        "family_id": family_id,
        "created_by": created_by,
        "title": title,
        "due_date": due_date.isoformat() if due_date else None,
        "is_private": is_private,
        "event_id": event_id,
        "suggestion_id": suggestion_id,
        "created_from_suggestion": True,
        "assigned_to": assigned_to,
        "is_completed": False,
    }


@dataclass(slots=True)
class TaskService:
    events: EventRepository
    tasks: TaskRepository
    profiles: ProfileRepository

    async def create_from_suggestion(self, draft: TaskFromSuggestionDraft, user: UserContext) -> Task:
        """Create a task from a suggestion for an event that already exists.

        The event must be active, belong to the caller's family and, when
        private, have been created by the caller. An assignee must be a
        profile in the same family.
        """

        try:
            event = await self.events.fetch(draft.event_id)
        except RepositoryError as exc:
            raise ServiceError(ErrorCode.DATABASE_ERROR, "Failed to load event", {"technical": exc.message}) from exc
        if event is None:
            raise ServiceError(
                ErrorCode.NOT_FOUND,
                "Event not found or has been archived",
                {"event_id": draft.event_id},
            )
        if event.family_id != user.family_id:
            raise ServiceError(
                ErrorCode.FORBIDDEN,
                "Cannot create task from event outside your family",
                {"event_id": draft.event_id},
            )
        if event.is_private and event.created_by != user.user_id:
            raise ServiceError(
                ErrorCode.FORBIDDEN,
                "Cannot create tasks from private events created by other users",
                {"event_id": draft.event_id},
            )

        if draft.assigned_to:
            await self._check_assignee(draft.assigned_to, user.family_id)

        record = suggestion_task_record(
            family_id=user.family_id,
            created_by=user.user_id,
            event_id=event.id,
            suggestion_id=draft.suggestion_id,
            title=draft.title,
            due_date=draft.due_date,
            is_private=draft.is_private,
            assigned_to=draft.assigned_to,
        )
        try:
            task = await self.tasks.insert(record)
        except RepositoryError as exc:
            raise ServiceError(
                ErrorCode.TASK_CREATION_FAILED,
                "Failed to create task from suggestion",
                {"error": exc.message},
            ) from exc
        logger.info("Task %s created from suggestion %s for event %s", task.id, draft.suggestion_id, event.id)
        return task

    async def _check_assignee(self, assignee_id: str, family_id: str) -> None:
        try:
            assignee = await self.profiles.fetch(assignee_id)
        except RepositoryError as exc:
            raise ServiceError(ErrorCode.DATABASE_ERROR, "Failed to load assignee", {"technical": exc.message}) from exc
        if assignee is None:
            raise ServiceError(ErrorCode.NOT_FOUND, "Assigned user not found", {"assigned_to": assignee_id})
        if assignee.family_id != family_id:
            raise ServiceError(
                ErrorCode.FORBIDDEN,
                "Cannot assign task to user outside your family",
                {"assigned_to": assignee_id},
            )
