from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ...domain import Profile
from ..supabase import SupabaseGateway, response_data


@dataclass(slots=True)
class ProfileRepository:
    gateway: SupabaseGateway
    table_name: str

    async def fetch(self, user_id: str) -> Optional[Profile]:
        table = await self.gateway.table(self.table_name)
        query = table.select("id, family_id, role, display_name").eq("id", user_id).maybe_single()
        data = response_data(await self.gateway.execute(query))
        if not data:
            return None
        return Profile.from_record(data)

    async def fetch_in_family(self, profile_ids: Sequence[str], family_id: str) -> List[Profile]:
        if not profile_ids:
            return []
        table = await self.gateway.table(self.table_name)
        query = (
            table.select("id, family_id, role, display_name")
            .eq("family_id", family_id)
            .in_("id", list(profile_ids))
        )
        records = response_data(await self.gateway.execute(query)) or []
        return [Profile.from_record(record) for record in records]
