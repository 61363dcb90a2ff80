from __future__ import annotations

from dataclasses import dataclass, field

from ..config import AppSettings, get_settings
from ..data import SupabaseGateway
from ..data.repositories import (
    EventRepository,
    FamilyMemberRepository,
    ParticipantRepository,
    ProfileRepository,
    TaskRepository,
)
from ..suggestions import InlineSuggestionEngine, RemoteSuggestionEngine, SuggestionEngine, SuggestionMatcher
from .creation import EventCreationOrchestrator
from .events import EventsService
from .guard import EventMutationGuard
from .participants import ParticipantResolver
from .tasks import TaskService


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root wiring settings, gateway, repositories and services."""

    settings: AppSettings = field(default_factory=get_settings)
    service_role: bool = False
    gateway: SupabaseGateway = field(init=False)
    events: EventRepository = field(init=False)
    participants: ParticipantRepository = field(init=False)
    tasks: TaskRepository = field(init=False)
    profiles: ProfileRepository = field(init=False)
    members: FamilyMemberRepository = field(init=False)
    resolver: ParticipantResolver = field(init=False)
    matcher: SuggestionMatcher = field(init=False)
    inline_engine: InlineSuggestionEngine = field(init=False)
    engine: SuggestionEngine = field(init=False)
    creation: EventCreationOrchestrator = field(init=False)
    guard: EventMutationGuard = field(init=False)
    events_service: EventsService = field(init=False)
    task_service: TaskService = field(init=False)

    def __post_init__(self) -> None:
        storage = self.settings.storage
        self.gateway = SupabaseGateway(self.settings.supabase, service_role=self.service_role)
        self.events = EventRepository(
            gateway=self.gateway,
            table_name=storage.events_table,
            participants_table=storage.participants_table,
            profiles_table=storage.profiles_table,
            family_members_table=storage.family_members_table,
        )
        self.participants = ParticipantRepository(gateway=self.gateway, table_name=storage.participants_table)
        self.tasks = TaskRepository(gateway=self.gateway, table_name=storage.tasks_table)
        self.profiles = ProfileRepository(gateway=self.gateway, table_name=storage.profiles_table)
        self.members = FamilyMemberRepository(gateway=self.gateway, table_name=storage.family_members_table)

        self.resolver = ParticipantResolver(profiles=self.profiles, members=self.members)
        self.matcher = SuggestionMatcher()
        self.inline_engine = InlineSuggestionEngine(resolver=self.resolver, matcher=self.matcher)
        if self.settings.suggestions.is_remote:
            self.engine = RemoteSuggestionEngine(
                gateway=self.gateway,
                function_name=self.settings.suggestions.function_name,
            )
        else:
            self.engine = self.inline_engine

        self.creation = EventCreationOrchestrator(
            events=self.events,
            participants=self.participants,
            tasks=self.tasks,
            resolver=self.resolver,
            engine=self.engine,
            suggestion_timeout=self.settings.suggestions.timeout_seconds,
        )
        self.guard = EventMutationGuard(events=self.events, participants=self.participants, resolver=self.resolver)
        self.events_service = EventsService(events=self.events, tasks=self.tasks, guard=self.guard)
        self.task_service = TaskService(events=self.events, tasks=self.tasks, profiles=self.profiles)
