"""Supabase repositories for first-class domain objects."""

from __future__ import annotations

from .events import EventRepository
from .family_members import FamilyMemberRepository
from .participants import ParticipantRepository
from .profiles import ProfileRepository
from .tasks import TaskRepository

__all__ = [
    "EventRepository",
    "FamilyMemberRepository",
    "ParticipantRepository",
    "ProfileRepository",
    "TaskRepository",
]
