from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, NoReturn, Optional, Sequence

from ..data.repositories import EventRepository, ParticipantRepository
from ..domain import ErrorCode, EventUpdate, RepositoryError, ResolvedParticipant, ServiceError
from .participants import ParticipantResolver

logger = logging.getLogger(__name__)

_NOT_FOUND_MESSAGE = "Event not found or has been archived"


@dataclass(slots=True)
class EventMutationGuard:
    """Checks shared by event update and archive.

    The store enforces creator-only writes through row-level security as
    well; these checks run first and turn its silent zero-row results into
    ``NOT_FOUND`` or ``FORBIDDEN``.
    """

    events: EventRepository
    participants: ParticipantRepository
    resolver: ParticipantResolver

    def check_privacy(self, update: EventUpdate) -> None:
        if update.is_private is True and update.has_participants:
            logger.warning("Attempt to add participants to private event")
            raise ServiceError(
                ErrorCode.INVALID_PRIVATE_EVENT,
                "Cannot add participants to private event",
                {"participant_ids": "Private events cannot have participants"},
            )

    async def check_time_range(self, event_id: str, update: EventUpdate) -> None:
        if update.start_time is None and update.end_time is None:
            return
        start, end = update.start_time, update.end_time
        if update.touches_one_time_bound:
            try:
                stored = await self.events.fetch_time_range(event_id)
            except RepositoryError as exc:
                raise ServiceError(
                    ErrorCode.DATABASE_ERROR,
                    "Failed to validate time range",
                    {"technical": exc.message},
                ) from exc
            if stored is None:
                logger.warning("Event not found during time validation: %s", event_id)
                raise ServiceError(ErrorCode.NOT_FOUND, _NOT_FOUND_MESSAGE)
            start = start or stored[0]
            end = end or stored[1]
        if end <= start:
            logger.warning("Invalid time range for event %s: %s -> %s", event_id, start.isoformat(), end.isoformat())
            raise ServiceError(
                ErrorCode.INVALID_TIME_RANGE,
                "End time must be after start time",
                {"start_time": start.isoformat(), "end_time": end.isoformat()},
            )

    async def explain_zero_rows(self, event_id: str, requester_id: str, action: str) -> NoReturn:
        """Raise the error behind a write that matched no rows."""

        try:
            existing = await self.events.fetch_ownership(event_id)
        except RepositoryError as exc:
            raise ServiceError(
                ErrorCode.DATABASE_ERROR,
                "Failed to verify event status",
                {"technical": exc.message},
            ) from exc

        if existing is None:
            logger.warning("Event not found: %s", event_id)
            raise ServiceError(ErrorCode.NOT_FOUND, _NOT_FOUND_MESSAGE)
        if existing.is_archived:
            logger.warning("Event %s is archived", event_id)
            raise ServiceError(ErrorCode.NOT_FOUND, _NOT_FOUND_MESSAGE)
        if existing.created_by != requester_id:
            logger.warning("User %s attempted to %s event %s but is not the creator", requester_id, action, event_id)
            raise ServiceError(
                ErrorCode.FORBIDDEN,
                f"You do not have permission to {action} this event",
                {"reason": f"Only event creator can {action} events"},
            )
        raise ServiceError(
            ErrorCode.DATABASE_ERROR,
            f"Failed to {action} event",
            {"technical": "write matched no rows for an active event owned by the requester"},
        )

    async def resolve_participants(self, update: EventUpdate, family_id: str) -> Optional[List[ResolvedParticipant]]:
        """Strictly resolve the replacement participant set; ``None`` when the update keeps the current one."""

        if not update.replaces_participants:
            return None
        return await self.resolver.resolve(
            update.participant_account_ids or (),
            update.participant_member_ids or (),
            family_id,
            strict=True,
        )

    async def replace_participants(self, event_id: str, participants: Sequence[ResolvedParticipant]) -> None:
        try:
            await self.participants.delete_for_event(event_id)
            await self.participants.insert_many(event_id, participants)
        except RepositoryError as exc:
            logger.error("Failed to replace participants of event %s: %s", event_id, exc.message)
            raise ServiceError(
                ErrorCode.PARTICIPANT_UPDATE_FAILED,
                "Failed to update participants",
                {"error": exc.message},
            ) from exc
