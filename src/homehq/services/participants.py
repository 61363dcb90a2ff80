from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from ..data.repositories import FamilyMemberRepository, ProfileRepository
from ..domain import (
    AccountParticipant,
    ErrorCode,
    MemberParticipant,
    RepositoryError,
    ResolvedParticipant,
    ServiceError,
)

logger = logging.getLogger(__name__)


def _unique(ids: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(identifier for identifier in ids if identifier))


@dataclass(slots=True)
class ParticipantResolver:
    """Turns raw participant ids into typed participants scoped to a family.

    The same ids are resolved at two strictness levels: suggestion previews
    drop anything that does not resolve, while persistence (``strict=True``)
    refuses the whole list with ``FORBIDDEN``.
    """

    profiles: ProfileRepository
    members: FamilyMemberRepository

    async def resolve(
        self,
        account_ids: Sequence[str],
        member_ids: Sequence[str],
        family_id: str,
        *,
        strict: bool = False,
    ) -> List[ResolvedParticipant]:
        wanted_accounts = _unique(account_ids)
        wanted_members = _unique(member_ids)
        try:
            profiles = {profile.id: profile for profile in await self.profiles.fetch_in_family(wanted_accounts, family_id)}
            members = {member.id: member for member in await self.members.fetch_in_family(wanted_members, family_id)}
        except RepositoryError as exc:
            raise ServiceError(
                ErrorCode.DATABASE_ERROR,
                "Failed to validate participants",
                {"technical": exc.message},
            ) from exc

        invalid_accounts = [identifier for identifier in wanted_accounts if identifier not in profiles]
        invalid_members = [identifier for identifier in wanted_members if identifier not in members]
        if strict and (invalid_accounts or invalid_members):
            logger.warning(
                "Rejected participants outside family %s: accounts=%s members=%s",
                family_id,
                invalid_accounts,
                invalid_members,
            )
            details = {}
            if invalid_accounts:
                details["invalid_participant_ids"] = invalid_accounts
            if invalid_members:
                details["invalid_member_ids"] = invalid_members
            raise ServiceError(ErrorCode.FORBIDDEN, "Cannot add participants from other families", details)

        resolved: list[ResolvedParticipant] = [
            AccountParticipant(id=identifier, role=profiles[identifier].role)
            for identifier in wanted_accounts
            if identifier in profiles
        ]
        resolved.extend(
            MemberParticipant(id=identifier, is_adult=members[identifier].is_admin)
            for identifier in wanted_members
            if identifier in members
        )
        return resolved

    async def family_child_ids(self, family_id: str) -> List[str]:
        children = await self.members.list_children(family_id)
        return [child.id for child in children]
