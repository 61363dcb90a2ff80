from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from ...domain import Event, EventOwnership
from ...domain.errors import RepositoryError
from ...domain.models import parse_datetime
from ..supabase import SupabaseGateway, response_data


@dataclass(slots=True)
class EventRepository:
    gateway: SupabaseGateway
    table_name: str
    participants_table: str
    profiles_table: str
    family_members_table: str

    def _select_clause(self) -> str:
        return (
            f"*, event_participants:{self.participants_table}("
            "id, event_id, profile_id, member_id, created_at, "
            f"profile:{self.profiles_table}(id, display_name, role), "
            f"member:{self.family_members_table}(id, name, is_admin))"
        )

    async def insert(self, record: Dict[str, Any]) -> Event:
        table = await self.gateway.table(self.table_name)
        response = await self.gateway.execute(table.insert(record))
        rows = response_data(response) or []
        if not rows:
            raise RepositoryError("Event insert returned no row.")
        return Event.from_record(rows[0])

    async def fetch(self, event_id: str, *, include_archived: bool = False) -> Optional[Event]:
        table = await self.gateway.table(self.table_name)
        query = table.select(self._select_clause()).eq("id", event_id)
        if not include_archived:
            query = query.is_("archived_at", "null")
        response = await self.gateway.execute(query.maybe_single())
        data = response_data(response)
        if not data:
            return None
        return Event.from_record(data)

    async def fetch_ownership(self, event_id: str) -> Optional[EventOwnership]:
        table = await self.gateway.table(self.table_name)
        query = table.select("id, created_by, archived_at").eq("id", event_id).maybe_single()
        data = response_data(await self.gateway.execute(query))
        if not data:
            return None
        return EventOwnership.from_record(data)

    async def fetch_time_range(self, event_id: str) -> Optional[Tuple[datetime, datetime]]:
        table = await self.gateway.table(self.table_name)
        query = (
            table.select("start_time, end_time")
            .eq("id", event_id)
            .is_("archived_at", "null")
            .maybe_single()
        )
        data = response_data(await self.gateway.execute(query))
        if not data:
            return None
        return parse_datetime(data["start_time"]), parse_datetime(data["end_time"])

    async def update_owned(self, event_id: str, created_by: str, changes: Dict[str, Any]) -> bool:
        """Update an active event created by ``created_by``; ``False`` when no row matched."""

        table = await self.gateway.table(self.table_name)
        query = (
            table.update(changes)
            .eq("id", event_id)
            .eq("created_by", created_by)
            .is_("archived_at", "null")
        )
        rows = response_data(await self.gateway.execute(query)) or []
        return bool(rows)

    async def archive_owned(self, event_id: str, created_by: str, archived_at: datetime) -> bool:
        return await self.update_owned(event_id, created_by, {"archived_at": archived_at.isoformat()})

    async def delete(self, event_id: str) -> bool:
        table = await self.gateway.table(self.table_name)
        response = await self.gateway.execute(table.delete().eq("id", event_id))
        deleted = response_data(response) or []
        return bool(deleted)
