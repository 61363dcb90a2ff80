from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..domain import Event, Task, TaskSuggestion
from ..services import EventCreationResult
from .models import CreateEventPayload, EventPayload, SuggestionPayload, TaskPayload


def serialize_event(event: Event) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump()


def serialize_task(task: Task) -> Dict[str, Any]:
    return TaskPayload.from_domain(task).model_dump()


def serialize_suggestions(suggestions: Sequence[TaskSuggestion]) -> List[Dict[str, Any]]:
    return [SuggestionPayload.from_domain(suggestion).model_dump() for suggestion in suggestions]


def serialize_creation(result: EventCreationResult) -> Dict[str, Any]:
    payload = CreateEventPayload(
        event=EventPayload.from_domain(result.event),
        suggestions=[SuggestionPayload.from_domain(item) for item in result.suggestions],
        created_tasks=[TaskPayload.from_domain(task) for task in result.created_tasks],
    )
    return payload.model_dump()
