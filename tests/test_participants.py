"""Tests for homehq.services.participants: family-scoped resolution."""

import pytest

from homehq.domain import AccountParticipant, ErrorCode, MemberParticipant, ServiceError, UserRole

from conftest import new_id


class TestResolve:
    @pytest.mark.asyncio
    async def test_resolves_accounts_then_members(self, resolver, family):
        resolved = await resolver.resolve([family.admin.id], [family.child.id], family.id)
        assert resolved == [
            AccountParticipant(id=family.admin.id, role=UserRole.ADMIN),
            MemberParticipant(id=family.child.id, is_adult=False),
        ]

    @pytest.mark.asyncio
    async def test_admin_member_is_adult(self, resolver, store, family):
        grandpa = store.add_member(family.id, "Dziadek", is_admin=True)
        resolved = await resolver.resolve([], [grandpa.id], family.id)
        assert resolved[0].is_adult is True

    @pytest.mark.asyncio
    async def test_duplicates_collapsed(self, resolver, family):
        resolved = await resolver.resolve([family.member.id, family.member.id], [], family.id)
        assert len(resolved) == 1

    @pytest.mark.asyncio
    async def test_lenient_mode_drops_foreign_ids(self, resolver, family, other_family):
        resolved = await resolver.resolve(
            [family.admin.id, other_family.admin.id, new_id()],
            [other_family.child.id],
            family.id,
        )
        assert [participant.id for participant in resolved] == [family.admin.id]

    @pytest.mark.asyncio
    async def test_strict_mode_rejects_foreign_ids(self, resolver, family, other_family):
        with pytest.raises(ServiceError) as excinfo:
            await resolver.resolve([family.admin.id, other_family.admin.id], [other_family.child.id], family.id, strict=True)
        assert excinfo.value.code is ErrorCode.FORBIDDEN
        assert excinfo.value.details == {
            "invalid_participant_ids": [other_family.admin.id],
            "invalid_member_ids": [other_family.child.id],
        }

    @pytest.mark.asyncio
    async def test_repository_failure_becomes_database_error(self, resolver, store, family):
        store.fail_on("profiles.fetch_in_family")
        with pytest.raises(ServiceError) as excinfo:
            await resolver.resolve([family.admin.id], [], family.id)
        assert excinfo.value.code is ErrorCode.DATABASE_ERROR


class TestFamilyChildren:
    @pytest.mark.asyncio
    async def test_lists_only_children_of_family(self, resolver, store, family, other_family):
        store.add_member(family.id, "Dziadek", is_admin=True)
        assert await resolver.family_child_ids(family.id) == [family.child.id]
