"""Event creation with suggestion matching and all-or-nothing persistence.

Creation is several independent writes (event row, participant rows, task
rows). Once the event row exists, any later failure deletes it again and the
store's cascades remove whatever participants or tasks were already written.
``CreationProgress`` records how far a run got so the rollback is observable.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..data.repositories import EventRepository, ParticipantRepository, TaskRepository
from ..domain import (
    CreationStage,
    ErrorCode,
    Event,
    EventDraft,
    RepositoryError,
    ServiceError,
    Task,
    TaskSuggestion,
    UserRole,
)
from ..suggestions import SuggestionEngine, SuggestionRequest
from .participants import ParticipantResolver
from .tasks import suggestion_task_record

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION_TIMEOUT = 5.0

_SAME_FAMILY_VIOLATION = "same family"


@dataclass(slots=True)
class CreationProgress:
    stage: CreationStage = CreationStage.STARTED
    history: List[CreationStage] = field(default_factory=lambda: [CreationStage.STARTED])
    event_id: Optional[str] = None
    task_ids: List[str] = field(default_factory=list)
    error: Optional[Exception] = None
    rolled_back: bool = False

    def advance(self, stage: CreationStage) -> None:
        self.stage = stage
        self.history.append(stage)

    def fail(self, error: Exception) -> None:
        self.error = error
        self.advance(CreationStage.FAILED)

    @property
    def succeeded(self) -> bool:
        return self.stage is CreationStage.RESPONSE_READY


@dataclass(slots=True)
class EventCreationResult:
    event: Event
    suggestions: List[TaskSuggestion]
    created_tasks: List[Task]


@dataclass(slots=True)
class CreationOutcome:
    progress: CreationProgress
    result: Optional[EventCreationResult] = None

    def unwrap(self) -> EventCreationResult:
        """Return the result or re-raise the error that stopped the run."""

        if self.result is None:
            if self.progress.error is not None:
                raise self.progress.error
            raise ServiceError(ErrorCode.INTERNAL_ERROR, "Event creation did not complete")
        return self.result


@dataclass(slots=True)
class EventCreationOrchestrator:
    events: EventRepository
    participants: ParticipantRepository
    tasks: TaskRepository
    resolver: ParticipantResolver
    engine: SuggestionEngine
    suggestion_timeout: float = DEFAULT_SUGGESTION_TIMEOUT

    async def create(
        self,
        draft: EventDraft,
        creator_id: str,
        family_id: str,
        requester_role: UserRole = UserRole.MEMBER,
    ) -> EventCreationResult:
        outcome = await self.create_or_rollback(draft, creator_id, family_id, requester_role)
        return outcome.unwrap()

    async def create_or_rollback(
        self,
        draft: EventDraft,
        creator_id: str,
        family_id: str,
        requester_role: UserRole = UserRole.MEMBER,
    ) -> CreationOutcome:
        progress = CreationProgress()
        logger.info("Creating event for user %s in family %s", creator_id, family_id)

        try:
            self._validate(draft, creator_id)
        except ServiceError as error:
            progress.fail(error)
            return CreationOutcome(progress)

        suggestions = await self._fetch_suggestions(draft, family_id, requester_role, progress)

        try:
            event = await self._persist_event(draft, creator_id, family_id)
        except ServiceError as error:
            progress.fail(error)
            return CreationOutcome(progress)
        progress.event_id = event.id
        progress.advance(CreationStage.EVENT_PERSISTED)

        try:
            await self._attach_participants(event.id, draft, family_id)
            progress.advance(CreationStage.PARTICIPANTS_ATTACHED)

            created_tasks = await self._create_tasks(suggestions, draft, event, progress)
            progress.advance(CreationStage.TASKS_CREATED)

            persisted = await self._reload(event.id)
        except Exception as error:  # noqa: BLE001
            await self._rollback(progress, error)
            return CreationOutcome(progress)

        accepted = set(draft.accepted_suggestion_ids)
        marked = [suggestion.with_accepted(suggestion.suggestion_id in accepted) for suggestion in suggestions]
        progress.advance(CreationStage.RESPONSE_READY)
        logger.info("Event %s created successfully with %d tasks", event.id, len(created_tasks))
        return CreationOutcome(
            progress,
            EventCreationResult(event=persisted, suggestions=marked, created_tasks=created_tasks),
        )

    @staticmethod
    def _validate(draft: EventDraft, creator_id: str) -> None:
        if draft.end_time <= draft.start_time:
            raise ServiceError(
                ErrorCode.INVALID_TIME_RANGE,
                "End time must be after start time",
                {"start_time": draft.start_time.isoformat(), "end_time": draft.end_time.isoformat()},
            )
        if draft.is_private:
            others = [identifier for identifier in draft.participant_account_ids if identifier != creator_id]
            if others or draft.participant_member_ids:
                raise ServiceError(
                    ErrorCode.INVALID_PRIVATE_EVENT,
                    "Private events cannot have participants other than the creator",
                    {"participant_ids": "Private events cannot have participants"},
                )

    async def _fetch_suggestions(
        self,
        draft: EventDraft,
        family_id: str,
        requester_role: UserRole,
        progress: CreationProgress,
    ) -> List[TaskSuggestion]:
        request = SuggestionRequest(
            title=draft.title,
            start_time=draft.start_time,
            family_id=family_id,
            requester_role=requester_role,
            participant_account_ids=tuple(draft.participant_account_ids),
            participant_member_ids=tuple(draft.participant_member_ids),
        )
        try:
            suggestions = await asyncio.wait_for(self.engine.suggest(request), timeout=self.suggestion_timeout)
        except asyncio.TimeoutError:
            logger.warning("Suggestion engine timed out after %.1fs (continuing without suggestions)", self.suggestion_timeout)
            progress.advance(CreationStage.SUGGESTIONS_SKIPPED)
            return []
        except Exception as exc:  # noqa: BLE001
            logger.warning("Suggestion engine failed (continuing without suggestions): %s", exc)
            progress.advance(CreationStage.SUGGESTIONS_SKIPPED)
            return []
        progress.advance(CreationStage.SUGGESTIONS_FETCHED)
        return list(suggestions)

    async def _persist_event(self, draft: EventDraft, creator_id: str, family_id: str) -> Event:
        try:
            return await self.events.insert(draft.to_record(family_id=family_id, created_by=creator_id))
        except RepositoryError as exc:
            logger.error("Failed to create event: %s", exc.message)
            raise ServiceError(
                ErrorCode.EVENT_CREATION_FAILED,
                "Failed to create event. Please try again.",
                {"error": exc.message},
            ) from exc

    async def _attach_participants(self, event_id: str, draft: EventDraft, family_id: str) -> None:
        if not draft.has_participants:
            return
        participants = await self.resolver.resolve(
            draft.participant_account_ids,
            draft.participant_member_ids,
            family_id,
            strict=True,
        )
        try:
            await self.participants.insert_many(event_id, participants)
        except RepositoryError as exc:
            if _SAME_FAMILY_VIOLATION in exc.message:
                raise ServiceError(
                    ErrorCode.FORBIDDEN,
                    "Cannot add participants from other families",
                    {"error": exc.message},
                ) from exc
            raise ServiceError(
                ErrorCode.PARTICIPANT_INSERT_FAILED,
                "Failed to add participants to event",
                {"error": exc.message},
            ) from exc

    async def _create_tasks(
        self,
        suggestions: Sequence[TaskSuggestion],
        draft: EventDraft,
        event: Event,
        progress: CreationProgress,
    ) -> List[Task]:
        accepted = set(draft.accepted_suggestion_ids)
        created: list[Task] = []
        for suggestion in suggestions:
            if suggestion.suggestion_id not in accepted:
                continue
            record = suggestion_task_record(
                family_id=event.family_id,
                created_by=event.created_by,
                event_id=event.id,
                suggestion_id=suggestion.suggestion_id,
                title=suggestion.title,
                due_date=suggestion.due_date,
                is_private=draft.is_private,
            )
            try:
                task = await self.tasks.insert(record)
            except RepositoryError as exc:
                raise ServiceError(
                    ErrorCode.TASK_CREATION_FAILED,
                    "Failed to create task from suggestion",
                    {"error": exc.message, "suggestion_id": suggestion.suggestion_id},
                ) from exc
            progress.task_ids.append(task.id)
            created.append(task)
        return created

    async def _reload(self, event_id: str) -> Event:
        try:
            event = await self.events.fetch(event_id)
        except RepositoryError as exc:
            raise ServiceError(
                ErrorCode.EVENT_FETCH_FAILED,
                "Failed to fetch event details",
                {"error": exc.message},
            ) from exc
        if event is None:
            raise ServiceError(ErrorCode.EVENT_FETCH_FAILED, "Created event could not be read back")
        return event

    async def _rollback(self, progress: CreationProgress, error: Exception) -> None:
        progress.advance(CreationStage.ROLLBACK_IN_PROGRESS)
        logger.error("Event creation failed, rolling back event %s: %s", progress.event_id, error)
        try:
            progress.rolled_back = await self.events.delete(progress.event_id)
        except RepositoryError:
            logger.exception("Rollback of event %s failed", progress.event_id)
        progress.fail(error)


__all__ = [
    "CreationOutcome",
    "CreationProgress",
    "DEFAULT_SUGGESTION_TIMEOUT",
    "EventCreationOrchestrator",
    "EventCreationResult",
]
