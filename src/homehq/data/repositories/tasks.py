from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from ...domain import Task
from ...domain.errors import RepositoryError
from ..supabase import SupabaseGateway, response_data


@dataclass(slots=True)
class TaskRepository:
    gateway: SupabaseGateway
    table_name: str

    async def insert(self, record: Dict[str, Any]) -> Task:
        table = await self.gateway.table(self.table_name)
        response = await self.gateway.execute(table.insert(record))
        rows = response_data(response) or []
        if not rows:
            raise RepositoryError("Task insert returned no row.")
        return Task.from_record(rows[0])

    async def detach_event(self, event_id: str) -> int:
        """Clear ``event_id`` on every task linked to the event; returns the number of tasks touched."""

        table = await self.gateway.table(self.table_name)
        response = await self.gateway.execute(table.update({"event_id": None}).eq("event_id", event_id))
        return len(response_data(response) or [])
