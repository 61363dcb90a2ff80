"""Application services orchestrating data access and domain logic."""

from __future__ import annotations

from .context import ServiceContext
from .creation import CreationOutcome, CreationProgress, EventCreationOrchestrator, EventCreationResult
from .events import EventsService, require_event_id
from .guard import EventMutationGuard
from .participants import ParticipantResolver
from .tasks import TaskService

__all__ = [
    "CreationOutcome",
    "CreationProgress",
    "EventCreationOrchestrator",
    "EventCreationResult",
    "EventMutationGuard",
    "EventsService",
    "ParticipantResolver",
    "ServiceContext",
    "TaskService",
    "require_event_id",
]
