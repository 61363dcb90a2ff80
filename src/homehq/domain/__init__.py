"""Domain models for family events, tasks and suggestions."""

from __future__ import annotations

from .enums import CreationStage, ParticipantKind, SpecialRule, UserRole
from .errors import ErrorCode, RepositoryError, ServiceError
from .models import (
    AccountParticipant,
    Event,
    EventDraft,
    EventOwnership,
    EventParticipant,
    EventUpdate,
    FamilyMember,
    MemberParticipant,
    Profile,
    ResolvedParticipant,
    Task,
    TaskFromSuggestionDraft,
    TaskSuggestion,
    UserContext,
)

__all__ = [
    "AccountParticipant",
    "CreationStage",
    "ErrorCode",
    "Event",
    "EventDraft",
    "EventOwnership",
    "EventParticipant",
    "EventUpdate",
    "FamilyMember",
    "MemberParticipant",
    "ParticipantKind",
    "Profile",
    "RepositoryError",
    "ResolvedParticipant",
    "ServiceError",
    "SpecialRule",
    "Task",
    "TaskFromSuggestionDraft",
    "TaskSuggestion",
    "UserContext",
    "UserRole",
]
