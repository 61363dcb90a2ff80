from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator, model_validator

from ..domain import (
    Event,
    EventDraft,
    EventParticipant,
    EventUpdate,
    Task,
    TaskFromSuggestionDraft,
    TaskSuggestion,
    UserRole,
)
from ..suggestions import SUGGESTION_IDS

TITLE_MAX_LENGTH = 200


def _clean_title(value: str) -> str:
    title = value.strip()
    if not title:
        raise ValueError("Title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return title


def _check_suggestion_id(value: str) -> str:
    if value not in SUGGESTION_IDS:
        raise ValueError(f"Unknown suggestion id: {value}")
    return value


def _ids(values: List[UUID]) -> tuple[str, ...]:
    return tuple(str(value) for value in values)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class CreateEventRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: Optional[str] = Field(default=None, max_length=2000)
    start_time: AwareDatetime
    end_time: AwareDatetime
    is_private: bool = False
    participant_ids: List[UUID] = Field(default_factory=list)
    member_ids: List[UUID] = Field(default_factory=list)
    accept_suggestions: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return _clean_title(value)

    @field_validator("accept_suggestions")
    @classmethod
    def _suggestions(cls, values: List[str]) -> List[str]:
        return [_check_suggestion_id(value) for value in values]

    @model_validator(mode="after")
    def _consistency(self) -> "CreateEventRequest":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        if self.is_private and (len(self.participant_ids) > 1 or self.member_ids):
            raise ValueError("Private events can only have the creator as participant")
        return self

    def to_draft(self) -> EventDraft:
        return EventDraft(
            title=self.title,
            start_time=self.start_time,
            end_time=self.end_time,
            is_private=self.is_private,
            description=self.description,
            participant_account_ids=_ids(self.participant_ids),
            participant_member_ids=_ids(self.member_ids),
            accepted_suggestion_ids=tuple(self.accept_suggestions),
        )


class UpdateEventRequest(BaseModel):
    """Partial update; fields left out stay as they are."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    start_time: Optional[AwareDatetime] = None
    end_time: Optional[AwareDatetime] = None
    is_private: Optional[bool] = None
    participant_ids: Optional[List[UUID]] = None
    member_ids: Optional[List[UUID]] = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: Optional[str]) -> Optional[str]:
        return _clean_title(value) if value is not None else None

    @model_validator(mode="after")
    def _consistency(self) -> "UpdateEventRequest":
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        if self.is_private and (self.participant_ids or self.member_ids):
            raise ValueError("Cannot add participants to private event")
        return self

    def to_update(self) -> EventUpdate:
        return EventUpdate(
            title=self.title,
            description=self.description,
            start_time=self.start_time,
            end_time=self.end_time,
            is_private=self.is_private,
            participant_account_ids=_ids(self.participant_ids) if self.participant_ids is not None else None,
            participant_member_ids=_ids(self.member_ids) if self.member_ids is not None else None,
        )


class AnalyzeEventRequest(BaseModel):
    title: str
    start_time: AwareDatetime
    participant_ids: List[UUID] = Field(default_factory=list)
    member_ids: List[UUID] = Field(default_factory=list)
    user_role: Optional[UserRole] = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return _clean_title(value)


class CreateTaskFromSuggestionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    event_id: UUID
    suggestion_id: str
    title: str
    due_date: Optional[AwareDatetime] = None
    is_private: bool = False
    assigned_to: Optional[UUID] = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return _clean_title(value)

    @field_validator("suggestion_id")
    @classmethod
    def _suggestion(cls, value: str) -> str:
        return _check_suggestion_id(value)

    def to_draft(self) -> TaskFromSuggestionDraft:
        return TaskFromSuggestionDraft(
            event_id=str(self.event_id),
            suggestion_id=self.suggestion_id,
            title=self.title,
            due_date=self.due_date,
            is_private=self.is_private,
            assigned_to=str(self.assigned_to) if self.assigned_to else None,
        )


class ParticipantPayload(BaseModel):
    id: str
    event_id: str
    profile_id: Optional[str] = None
    member_id: Optional[str] = None
    display_name: Optional[str] = None
    is_admin: Optional[bool] = None
    kind: str

    @classmethod
    def from_domain(cls, participant: EventParticipant) -> "ParticipantPayload":
        return cls(
            id=participant.id,
            event_id=participant.event_id,
            profile_id=participant.profile_id,
            member_id=participant.member_id,
            display_name=participant.display_name,
            is_admin=participant.is_admin,
            kind=participant.kind.value,
        )


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    family_id: str
    created_by: str
    title: str
    description: Optional[str] = Field(default=None)
    start_time: str
    end_time: str
    is_private: bool = False
    created_at: Optional[str] = Field(default=None)
    updated_at: Optional[str] = Field(default=None)
    participants: List[ParticipantPayload] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, event: Event) -> "EventPayload":
        return cls(
            id=event.id,
            family_id=event.family_id,
            created_by=event.created_by,
            title=event.title,
            description=event.description,
            start_time=event.start_time.isoformat(),
            end_time=event.end_time.isoformat(),
            is_private=event.is_private,
            created_at=_iso(event.created_at),
            updated_at=_iso(event.updated_at),
            participants=[ParticipantPayload.from_domain(item) for item in event.participants],
        )


class TaskPayload(BaseModel):
    id: str
    family_id: str
    created_by: Optional[str] = None
    title: str
    due_date: Optional[str] = None
    assigned_to: Optional[str] = None
    is_completed: bool = False
    is_private: bool = False
    event_id: Optional[str] = None
    suggestion_id: Optional[str] = None
    created_from_suggestion: bool = False

    @classmethod
    def from_domain(cls, task: Task) -> "TaskPayload":
        return cls(
            id=task.id,
            family_id=task.family_id,
            created_by=task.created_by,
            title=task.title,
            due_date=_iso(task.due_date),
            assigned_to=task.assigned_to,
            is_completed=task.is_completed,
            is_private=task.is_private,
            event_id=task.event_id,
            suggestion_id=task.suggestion_id,
            created_from_suggestion=task.created_from_suggestion,
        )


class SuggestionPayload(BaseModel):
    suggestion_id: str
    title: str
    due_date: str
    description: str = ""
    accepted: bool = False

    @classmethod
    def from_domain(cls, suggestion: TaskSuggestion) -> "SuggestionPayload":
        return cls(
            suggestion_id=suggestion.suggestion_id,
            title=suggestion.title,
            due_date=suggestion.due_date.isoformat(),
            description=suggestion.description,
            accepted=suggestion.accepted,
        )


class CreateEventPayload(BaseModel):
    event: EventPayload
    suggestions: List[SuggestionPayload] = Field(default_factory=list)
    created_tasks: List[TaskPayload] = Field(default_factory=list)


__all__ = [
    "AnalyzeEventRequest",
    "CreateEventPayload",
    "CreateEventRequest",
    "CreateTaskFromSuggestionRequest",
    "EventPayload",
    "ParticipantPayload",
    "SuggestionPayload",
    "TaskPayload",
    "UpdateEventRequest",
]
