from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ...domain import FamilyMember
from ..supabase import SupabaseGateway, response_data


@dataclass(slots=True)
class FamilyMemberRepository:
    gateway: SupabaseGateway
    table_name: str

    async def fetch_in_family(self, member_ids: Sequence[str], family_id: str) -> List[FamilyMember]:
        if not member_ids:
            return []
        table = await self.gateway.table(self.table_name)
        query = (
            table.select("id, family_id, name, is_admin")
            .eq("family_id", family_id)
            .in_("id", list(member_ids))
        )
        records = response_data(await self.gateway.execute(query)) or []
        return [FamilyMember.from_record(record) for record in records]

    async def list_children(self, family_id: str) -> List[FamilyMember]:
        table = await self.gateway.table(self.table_name)
        query = (
            table.select("id, family_id, name, is_admin")
            .eq("family_id", family_id)
            .eq("is_admin", False)
            .order("name")
        )
        records = response_data(await self.gateway.execute(query)) or []
        return [FamilyMember.from_record(record) for record in records]
