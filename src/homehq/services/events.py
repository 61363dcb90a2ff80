from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from ..data.repositories import EventRepository, TaskRepository
from ..domain import ErrorCode, Event, EventUpdate, RepositoryError, ServiceError, UserContext
from .guard import EventMutationGuard

logger = logging.getLogger(__name__)


def require_event_id(event_id: str) -> str:
    try:
        UUID(str(event_id))
    except ValueError as exc:
        logger.warning("Invalid event ID format: %s", event_id)
        raise ServiceError(
            ErrorCode.VALIDATION_ERROR,
            "Event ID must be a valid UUID",
            {"event_id": event_id},
        ) from exc
    return str(event_id)


@dataclass(slots=True)
class EventsService:
    events: EventRepository
    tasks: TaskRepository
    guard: EventMutationGuard

    async def get_event(self, event_id: str, user: UserContext) -> Event:
        event_id = require_event_id(event_id)
        try:
            event = await self.events.fetch(event_id)
        except RepositoryError as exc:
            raise ServiceError(ErrorCode.DATABASE_ERROR, "Failed to fetch event", {"technical": exc.message}) from exc
        if event is None:
            logger.info("Event not found or inaccessible: %s (user %s)", event_id, user.user_id)
            raise ServiceError(ErrorCode.NOT_FOUND, "Event not found or has been archived")
        if event.family_id != user.family_id:
            logger.warning(
                "Family mismatch: user %s (family %s) tried to access event %s from family %s",
                user.user_id,
                user.family_id,
                event_id,
                event.family_id,
            )
            raise ServiceError(
                ErrorCode.FORBIDDEN,
                "You do not have permission to access this event",
                {"reason": "Event belongs to a different family"},
            )
        if event.is_private and event.created_by != user.user_id:
            logger.warning("Privacy violation: user %s tried to access private event %s", user.user_id, event_id)
            raise ServiceError(
                ErrorCode.FORBIDDEN,
                "You do not have permission to access this event",
                {"reason": "Event is private and you are not the creator"},
            )
        return event

    async def update_event(self, event_id: str, update: EventUpdate, user: UserContext) -> Event:
        event_id = require_event_id(event_id)
        logger.info("Updating event %s by user %s", event_id, user.user_id)

        self.guard.check_privacy(update)
        await self.guard.check_time_range(event_id, update)
        # Participants are resolved before any write so a rejected set leaves the row untouched.
        participants = await self.guard.resolve_participants(update, user.family_id)

        changes = update.to_changes()
        if changes:
            updated = await self._write(self.events.update_owned(event_id, user.user_id, changes), "update")
        else:
            # Participant-only update: still has to prove the caller owns an active event.
            ownership = await self._write(self.events.fetch_ownership(event_id), "update")
            updated = ownership is not None and not ownership.is_archived and ownership.created_by == user.user_id
        if not updated:
            await self.guard.explain_zero_rows(event_id, user.user_id, "update")

        if participants is not None:
            await self.guard.replace_participants(event_id, participants)

        try:
            event = await self.events.fetch(event_id)
        except RepositoryError as exc:
            raise ServiceError(
                ErrorCode.EVENT_FETCH_FAILED,
                "Failed to retrieve updated event",
                {"error": exc.message},
            ) from exc
        if event is None:
            raise ServiceError(ErrorCode.EVENT_FETCH_FAILED, "Failed to retrieve updated event")
        logger.info("Event %s updated successfully by user %s", event_id, user.user_id)
        return event

    async def delete_event(self, event_id: str, user: UserContext) -> None:
        """Archive an event; its tasks stay but lose the link to it."""

        event_id = require_event_id(event_id)
        logger.info("Attempting to delete event %s by user %s", event_id, user.user_id)
        archived_at = datetime.now(timezone.utc)
        archived = await self._write(self.events.archive_owned(event_id, user.user_id, archived_at), "delete")
        if not archived:
            await self.guard.explain_zero_rows(event_id, user.user_id, "delete")

        try:
            detached = await self.tasks.detach_event(event_id)
        except RepositoryError as exc:
            raise ServiceError(
                ErrorCode.DATABASE_ERROR,
                "Event archived but its tasks could not be detached",
                {"technical": exc.message},
            ) from exc
        logger.info("Event %s archived by user %s (%d tasks detached)", event_id, user.user_id, detached)

    @staticmethod
    async def _write(operation, action: str):
        try:
            return await operation
        except RepositoryError as exc:
            logger.error("Database error during event %s: %s", action, exc.message)
            raise ServiceError(
                ErrorCode.DATABASE_ERROR,
                f"Failed to {action} event",
                {"technical": exc.message},
            ) from exc
