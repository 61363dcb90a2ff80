from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


class ParticipantKind(str, Enum):
    ACCOUNT = "account"
    MEMBER = "member"


class SpecialRule(str, Enum):
    NEEDS_BABYSITTER = "needs_babysitter"


class CreationStage(str, Enum):
    STARTED = "started"
    SUGGESTIONS_FETCHED = "suggestions_fetched"
    SUGGESTIONS_SKIPPED = "suggestions_skipped"
    EVENT_PERSISTED = "event_persisted"
    PARTICIPANTS_ATTACHED = "participants_attached"
    TASKS_CREATED = "tasks_created"
    RESPONSE_READY = "response_ready"
    ROLLBACK_IN_PROGRESS = "rollback_in_progress"
    FAILED = "failed"
