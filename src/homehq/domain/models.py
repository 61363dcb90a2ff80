from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from .enums import ParticipantKind, UserRole


def parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    raise ValueError(f"Unsupported datetime value: {value!r}")


def _optional_datetime(value: Any) -> Optional[datetime]:
    return parse_datetime(value) if value else None


def _embedded(value: Any) -> Optional[Dict[str, Any]]:
    # PostgREST returns to-one embeds as an object or a one-element list
    # depending on how the relationship was detected.
    if isinstance(value, list):
        return value[0] if value else None
    if isinstance(value, dict):
        return value
    return None


@dataclass(frozen=True, slots=True)
class UserContext:
    """Authenticated caller, resolved by the session collaborator."""

    user_id: str
    family_id: str
    role: UserRole = UserRole.MEMBER


@dataclass(slots=True)
class Profile:
    id: str
    family_id: str
    role: UserRole = UserRole.MEMBER
    display_name: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Profile":
        return cls(
            id=str(record["id"]),
            family_id=str(record["family_id"]),
            role=UserRole(record.get("role") or UserRole.MEMBER),
            display_name=record.get("display_name") or "",
        )


@dataclass(slots=True)
class FamilyMember:
    id: str
    family_id: str
    name: str = ""
    is_admin: bool = False

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "FamilyMember":
        return cls(
            id=str(record["id"]),
            family_id=str(record["family_id"]),
            name=record.get("name") or "",
            is_admin=bool(record.get("is_admin")),
        )


@dataclass(frozen=True, slots=True)
class AccountParticipant:
    """Participant with login credentials (a profile)."""

    id: str
    role: UserRole = UserRole.MEMBER

    @property
    def kind(self) -> ParticipantKind:
        return ParticipantKind.ACCOUNT

    @property
    def is_adult(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass(frozen=True, slots=True)
class MemberParticipant:
    """Account-less family member, flagged adult or child."""

    id: str
    is_adult: bool = False

    @property
    def kind(self) -> ParticipantKind:
        return ParticipantKind.MEMBER


ResolvedParticipant = Union[AccountParticipant, MemberParticipant]


@dataclass(slots=True)
class EventParticipant:
    id: str
    event_id: str
    profile_id: Optional[str] = None
    member_id: Optional[str] = None
    display_name: Optional[str] = None
    is_admin: Optional[bool] = None
    created_at: Optional[datetime] = None

    @property
    def kind(self) -> ParticipantKind:
        return ParticipantKind.ACCOUNT if self.profile_id else ParticipantKind.MEMBER

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "EventParticipant":
        profile = _embedded(record.get("profile"))
        member = _embedded(record.get("member"))
        display_name = None
        is_admin = None
        if profile:
            display_name = profile.get("display_name")
            if profile.get("role"):
                is_admin = profile["role"] == UserRole.ADMIN.value
        elif member:
            display_name = member.get("name")
            is_admin = bool(member.get("is_admin"))
        return cls(
            id=str(record["id"]),
            event_id=str(record["event_id"]),
            profile_id=record.get("profile_id"),
            member_id=record.get("member_id"),
            display_name=display_name,
            is_admin=is_admin,
            created_at=_optional_datetime(record.get("created_at")),
        )


@dataclass(slots=True)
class Event:
    id: str
    family_id: str
    created_by: str
    title: str
    start_time: datetime
    end_time: datetime
    is_private: bool = False
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    participants: List[EventParticipant] = field(default_factory=list)

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Event":
        participants = [EventParticipant.from_record(item) for item in record.get("event_participants") or []]
        return cls(
            id=str(record["id"]),
            family_id=str(record["family_id"]),
            created_by=str(record["created_by"]),
            title=str(record["title"]),
            start_time=parse_datetime(record["start_time"]),
            end_time=parse_datetime(record["end_time"]),
            is_private=bool(record.get("is_private")),
            description=record.get("description"),
            created_at=_optional_datetime(record.get("created_at")),
            updated_at=_optional_datetime(record.get("updated_at")),
            archived_at=_optional_datetime(record.get("archived_at")),
            participants=participants,
        )


@dataclass(frozen=True, slots=True)
class EventOwnership:
    """Minimal projection used to explain why a write touched no rows."""

    id: str
    created_by: str
    archived_at: Optional[datetime] = None

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "EventOwnership":
        return cls(
            id=str(record["id"]),
            created_by=str(record["created_by"]),
            archived_at=_optional_datetime(record.get("archived_at")),
        )


@dataclass(slots=True)
class Task:
    id: str
    family_id: str
    created_by: Optional[str]
    title: str
    due_date: Optional[datetime] = None
    assigned_to: Optional[str] = None
    is_completed: bool = False
    is_private: bool = False
    event_id: Optional[str] = None
    suggestion_id: Optional[str] = None
    created_from_suggestion: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Task":
        return cls(
            id=str(record["id"]),
            family_id=str(record["family_id"]),
            created_by=record.get("created_by"),
            title=str(record["title"]),
            due_date=_optional_datetime(record.get("due_date")),
            assigned_to=record.get("assigned_to"),
            is_completed=bool(record.get("is_completed")),
            is_private=bool(record.get("is_private")),
            event_id=record.get("event_id"),
            suggestion_id=record.get("suggestion_id"),
            created_from_suggestion=bool(record.get("created_from_suggestion")),
            created_at=_optional_datetime(record.get("created_at")),
            updated_at=_optional_datetime(record.get("updated_at")),
            archived_at=_optional_datetime(record.get("archived_at")),
        )


@dataclass(frozen=True, slots=True)
class TaskSuggestion:
    suggestion_id: str
    title: str
    due_date: datetime
    description: str = ""
    accepted: bool = False

    def with_accepted(self, accepted: bool) -> "TaskSuggestion":
        return replace(self, accepted=accepted)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "TaskSuggestion":
        return cls(
            suggestion_id=str(record["suggestion_id"]),
            title=str(record["title"]),
            due_date=parse_datetime(record["due_date"]),
            description=record.get("description") or "",
            accepted=bool(record.get("accepted", False)),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "suggestion_id": self.suggestion_id,
            "title": self.title,
            "due_date": self.due_date.isoformat(),
            "description": self.description,
            "accepted": self.accepted,
        }


@dataclass(frozen=True, slots=True)
class EventDraft:
    title: str
    start_time: datetime
    end_time: datetime
    is_private: bool = False
    description: Optional[str] = None
    participant_account_ids: Tuple[str, ...] = ()
    participant_member_ids: Tuple[str, ...] = ()
    accepted_suggestion_ids: Tuple[str, ...] = ()

    @property
    def has_participants(self) -> bool:
        return bool(self.participant_account_ids or self.participant_member_ids)

    def to_record(self, *, family_id: str, created_by: str) -> Dict[str, Any]:
        return {
            "family_id": family_id,
            "created_by": created_by,
            "title": self.title,
            "description": self.description,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "is_private": self.is_private,
        }


@dataclass(frozen=True, slots=True)
class EventUpdate:
    """Partial update. ``None`` leaves a field untouched.

    Supplying either participant list replaces the whole participant set; an
    omitted list counts as empty in that case.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_private: Optional[bool] = None
    participant_account_ids: Optional[Tuple[str, ...]] = None
    participant_member_ids: Optional[Tuple[str, ...]] = None

    @property
    def replaces_participants(self) -> bool:
        return self.participant_account_ids is not None or self.participant_member_ids is not None

    @property
    def has_participants(self) -> bool:
        return bool(self.participant_account_ids or self.participant_member_ids)

    @property
    def touches_one_time_bound(self) -> bool:
        return (self.start_time is None) != (self.end_time is None)

    def to_changes(self) -> Dict[str, Any]:
        changes: Dict[str, Any] = {}
        if self.title is not None:
            changes["title"] = self.title
        if self.description is not None:
            changes["description"] = self.description or None
        if self.start_time is not None:
            changes["start_time"] = self.start_time.isoformat()
        if self.end_time is not None:
            changes["end_time"] = self.end_time.isoformat()
        if self.is_private is not None:
            changes["is_private"] = self.is_private
        return changes


@dataclass(frozen=True, slots=True)
class TaskFromSuggestionDraft:
    event_id: str
    suggestion_id: str
    title: str
    due_date: Optional[datetime] = None
    is_private: bool = False
    assigned_to: Optional[str] = None


__all__ = [
    "AccountParticipant",
    "Event",
    "EventDraft",
    "EventOwnership",
    "EventParticipant",
    "EventUpdate",
    "FamilyMember",
    "MemberParticipant",
    "Profile",
    "ResolvedParticipant",
    "Task",
    "TaskFromSuggestionDraft",
    "TaskSuggestion",
    "UserContext",
]
