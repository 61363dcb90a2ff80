from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ...domain import EventParticipant, ParticipantKind, ResolvedParticipant
from ..supabase import SupabaseGateway, response_data


def participant_record(event_id: str, participant: ResolvedParticipant) -> Dict[str, Any]:
    if participant.kind is ParticipantKind.ACCOUNT:
        return {"event_id": event_id, "profile_id": participant.id}
    return {"event_id": event_id, "member_id": participant.id}


@dataclass(slots=True)
class ParticipantRepository:
    gateway: SupabaseGateway
    table_name: str

    async def insert_many(self, event_id: str, participants: Sequence[ResolvedParticipant]) -> List[EventParticipant]:
        if not participants:
            return []
        table = await self.gateway.table(self.table_name)
        rows = [participant_record(event_id, participant) for participant in participants]
        response = await self.gateway.execute(table.insert(rows))
        return [EventParticipant.from_record(record) for record in response_data(response) or []]

    async def delete_for_event(self, event_id: str) -> int:
        table = await self.gateway.table(self.table_name)
        response = await self.gateway.execute(table.delete().eq("event_id", event_id))
        return len(response_data(response) or [])
