"""Shared test fixtures.

Provides an in-memory store that stands in for the Supabase tables, fake
repositories exposing the same async methods as ``homehq.data.repositories``,
and ready-wired services built on top of them. Any repository call can be
made to fail with ``store.fail_on("events.insert")``.
"""

import os

# Keep settings and log output away from the developer's environment.
os.environ.setdefault("HOMEHQ_SUGGESTION_MODE", "inline")
os.environ.setdefault("HOMEHQ_LOG_LEVEL", "DEBUG")

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import pytest

from homehq.domain import (
    Event,
    EventOwnership,
    EventParticipant,
    FamilyMember,
    ParticipantKind,
    Profile,
    RepositoryError,
    ResolvedParticipant,
    Task,
    UserContext,
    UserRole,
)
from homehq.services import (
    EventCreationOrchestrator,
    EventMutationGuard,
    EventsService,
    ParticipantResolver,
    TaskService,
)
from homehq.suggestions import InlineSuggestionEngine, SuggestionMatcher


def new_id() -> str:
    return str(uuid.uuid4())


def utc(year, month, day, hour=0, minute=0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


class FakeStore:
    """Rows keyed by id, one dict per table."""

    def __init__(self):
        self.events: Dict[str, Dict[str, Any]] = {}
        self.participants: Dict[str, Dict[str, Any]] = {}
        self.tasks: Dict[str, Dict[str, Any]] = {}
        self.profiles: Dict[str, Profile] = {}
        self.members: Dict[str, FamilyMember] = {}
        self.failures: Dict[str, str] = {}
        self.calls: List[str] = []

    def fail_on(self, operation: str, message: str = "simulated failure") -> None:
        self.failures[operation] = message

    def check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failures:
            raise RepositoryError(self.failures[operation], code="XX000")

    # seeding helpers

    def add_profile(self, family_id: str, role: UserRole = UserRole.MEMBER, name: str = "") -> Profile:
        profile = Profile(id=new_id(), family_id=family_id, role=role, display_name=name)
        self.profiles[profile.id] = profile
        return profile

    def add_member(self, family_id: str, name: str, *, is_admin: bool = False) -> FamilyMember:
        member = FamilyMember(id=new_id(), family_id=family_id, name=name, is_admin=is_admin)
        self.members[member.id] = member
        return member

    def add_event(
        self,
        family_id: str,
        created_by: str,
        *,
        title: str = "Event",
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        is_private: bool = False,
        archived: bool = False,
    ) -> str:
        start = start or utc(2026, 3, 1, 10)
        end = end or utc(2026, 3, 1, 11)
        event_id = new_id()
        self.events[event_id] = {
            "id": event_id,
            "family_id": family_id,
            "created_by": created_by,
            "title": title,
            "description": None,
            "start_time": start.isoformat(),
            "end_time": end.isoformat(),
            "is_private": is_private,
            "created_at": utc(2026, 1, 1).isoformat(),
            "updated_at": utc(2026, 1, 1).isoformat(),
            "archived_at": utc(2026, 1, 2).isoformat() if archived else None,
        }
        return event_id

    def add_task(self, family_id: str, created_by: str, event_id: Optional[str]) -> str:
        task_id = new_id()
        self.tasks[task_id] = {
            "id": task_id,
            "family_id": family_id,
            "created_by": created_by,
            "title": "Existing task",
            "event_id": event_id,
        }
        return task_id

    def participants_of(self, event_id: str) -> List[Dict[str, Any]]:
        return [row for row in self.participants.values() if row["event_id"] == event_id]

    def event_record(self, event_id: str) -> Dict[str, Any]:
        record = dict(self.events[event_id])
        embedded = []
        for row in self.participants_of(event_id):
            item = dict(row)
            if row.get("profile_id") and row["profile_id"] in self.profiles:
                profile = self.profiles[row["profile_id"]]
                item["profile"] = {"id": profile.id, "display_name": profile.display_name, "role": profile.role.value}
            if row.get("member_id") and row["member_id"] in self.members:
                member = self.members[row["member_id"]]
                item["member"] = {"id": member.id, "name": member.name, "is_admin": member.is_admin}
            embedded.append(item)
        record["event_participants"] = embedded
        return record


class FakeEventRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def insert(self, record: Dict[str, Any]) -> Event:
        self.store.check("events.insert")
        event_id = new_id()
        now = datetime.now(timezone.utc).isoformat()
        self.store.events[event_id] = {
            **record,
            "id": event_id,
            "created_at": now,
            "updated_at": now,
            "archived_at": None,
        }
        return Event.from_record(self.store.event_record(event_id))

    async def fetch(self, event_id: str, *, include_archived: bool = False) -> Optional[Event]:
        self.store.check("events.fetch")
        row = self.store.events.get(event_id)
        if row is None or (row["archived_at"] and not include_archived):
            return None
        return Event.from_record(self.store.event_record(event_id))

    async def fetch_ownership(self, event_id: str) -> Optional[EventOwnership]:
        self.store.check("events.fetch_ownership")
        row = self.store.events.get(event_id)
        return EventOwnership.from_record(row) if row else None

    async def fetch_time_range(self, event_id: str):
        self.store.check("events.fetch_time_range")
        row = self.store.events.get(event_id)
        if row is None or row["archived_at"]:
            return None
        return (
            datetime.fromisoformat(row["start_time"]),
            datetime.fromisoformat(row["end_time"]),
        )

    def _owned(self, event_id: str, created_by: str) -> Optional[Dict[str, Any]]:
        row = self.store.events.get(event_id)
        if row is None or row["archived_at"] or row["created_by"] != created_by:
            return None
        return row

    async def update_owned(self, event_id: str, created_by: str, changes: Dict[str, Any]) -> bool:
        self.store.check("events.update_owned")
        row = self._owned(event_id, created_by)
        if row is None:
            return False
        row.update(changes)
        return True

    async def archive_owned(self, event_id: str, created_by: str, archived_at: datetime) -> bool:
        self.store.check("events.archive_owned")
        row = self._owned(event_id, created_by)
        if row is None:
            return False
        row["archived_at"] = archived_at.isoformat()
        return True

    async def delete(self, event_id: str) -> bool:
        self.store.check("events.delete")
        if self.store.events.pop(event_id, None) is None:
            return False
        # Foreign keys cascade in the real schema.
        for key in [key for key, row in self.store.participants.items() if row["event_id"] == event_id]:
            del self.store.participants[key]
        for key in [key for key, row in self.store.tasks.items() if row.get("event_id") == event_id]:
            del self.store.tasks[key]
        return True


class FakeParticipantRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def insert_many(self, event_id: str, participants: Sequence[ResolvedParticipant]) -> List[EventParticipant]:
        self.store.check("participants.insert_many")
        created = []
        for participant in participants:
            row = {"id": new_id(), "event_id": event_id, "profile_id": None, "member_id": None}
            if participant.kind is ParticipantKind.ACCOUNT:
                row["profile_id"] = participant.id
            else:
                row["member_id"] = participant.id
            self.store.participants[row["id"]] = row
            created.append(EventParticipant.from_record(row))
        return created

    async def delete_for_event(self, event_id: str) -> int:
        self.store.check("participants.delete_for_event")
        doomed = [key for key, row in self.store.participants.items() if row["event_id"] == event_id]
        for key in doomed:
            del self.store.participants[key]
        return len(doomed)


class FakeTaskRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def insert(self, record: Dict[str, Any]) -> Task:
        self.store.check("tasks.insert")
        task_id = new_id()
        self.store.tasks[task_id] = {**record, "id": task_id}
        return Task.from_record(self.store.tasks[task_id])

    async def detach_event(self, event_id: str) -> int:
        self.store.check("tasks.detach_event")
        count = 0
        for row in self.store.tasks.values():
            if row.get("event_id") == event_id:
                row["event_id"] = None
                count += 1
        return count


class FakeProfileRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def fetch(self, user_id: str) -> Optional[Profile]:
        self.store.check("profiles.fetch")
        return self.store.profiles.get(user_id)

    async def fetch_in_family(self, profile_ids: Sequence[str], family_id: str) -> List[Profile]:
        self.store.check("profiles.fetch_in_family")
        return [
            self.store.profiles[identifier]
            for identifier in profile_ids
            if identifier in self.store.profiles and self.store.profiles[identifier].family_id == family_id
        ]


class FakeFamilyMemberRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def fetch_in_family(self, member_ids: Sequence[str], family_id: str) -> List[FamilyMember]:
        self.store.check("members.fetch_in_family")
        return [
            self.store.members[identifier]
            for identifier in member_ids
            if identifier in self.store.members and self.store.members[identifier].family_id == family_id
        ]

    async def list_children(self, family_id: str) -> List[FamilyMember]:
        self.store.check("members.list_children")
        children = [
            member for member in self.store.members.values() if member.family_id == family_id and not member.is_admin
        ]
        return sorted(children, key=lambda member: member.name)


class Family:
    """A seeded family: one admin parent, one member parent, one child."""

    def __init__(self, store: FakeStore):
        self.id = new_id()
        self.admin = store.add_profile(self.id, UserRole.ADMIN, "Mama")
        self.member = store.add_profile(self.id, UserRole.MEMBER, "Tata")
        self.child = store.add_member(self.id, "Ania")

    @property
    def admin_user(self) -> UserContext:
        return UserContext(user_id=self.admin.id, family_id=self.id, role=UserRole.ADMIN)

    @property
    def member_user(self) -> UserContext:
        return UserContext(user_id=self.member.id, family_id=self.id, role=UserRole.MEMBER)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def family(store):
    return Family(store)


@pytest.fixture
def other_family(store):
    return Family(store)


@pytest.fixture
def repositories(store):
    return {
        "events": FakeEventRepository(store),
        "participants": FakeParticipantRepository(store),
        "tasks": FakeTaskRepository(store),
        "profiles": FakeProfileRepository(store),
        "members": FakeFamilyMemberRepository(store),
    }


@pytest.fixture
def resolver(repositories):
    return ParticipantResolver(profiles=repositories["profiles"], members=repositories["members"])


@pytest.fixture
def inline_engine(resolver):
    return InlineSuggestionEngine(resolver=resolver, matcher=SuggestionMatcher())


@pytest.fixture
def orchestrator(repositories, resolver, inline_engine):
    return EventCreationOrchestrator(
        events=repositories["events"],
        participants=repositories["participants"],
        tasks=repositories["tasks"],
        resolver=resolver,
        engine=inline_engine,
        suggestion_timeout=0.5,
    )


@pytest.fixture
def guard(repositories, resolver):
    return EventMutationGuard(
        events=repositories["events"],
        participants=repositories["participants"],
        resolver=resolver,
    )


@pytest.fixture
def events_service(repositories, guard):
    return EventsService(events=repositories["events"], tasks=repositories["tasks"], guard=guard)


@pytest.fixture
def task_service(repositories):
    return TaskService(events=repositories["events"], tasks=repositories["tasks"], profiles=repositories["profiles"])
