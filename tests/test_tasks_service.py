"""Tests for homehq.services.tasks: tasks created from suggestions later on."""

import pytest

from homehq.domain import ErrorCode, ServiceError, TaskFromSuggestionDraft

from conftest import new_id, utc


def _draft(event_id, **overrides):
    values = dict(event_id=event_id, suggestion_id="birthday_cake", title="Zamówić tort", due_date=utc(2026, 5, 13))
    values.update(overrides)
    return TaskFromSuggestionDraft(**values)


class TestCreateFromSuggestion:
    @pytest.mark.asyncio
    async def test_creates_linked_task(self, task_service, store, family):
        event_id = store.add_event(family.id, family.admin.id)
        task = await task_service.create_from_suggestion(_draft(event_id, assigned_to=family.member.id), family.admin_user)
        assert task.event_id == event_id
        assert task.assigned_to == family.member.id
        assert task.created_from_suggestion is True
        assert task.due_date == utc(2026, 5, 13)
        assert store.tasks[task.id]["created_by"] == family.admin.id

    @pytest.mark.asyncio
    async def test_missing_event(self, task_service, family):
        with pytest.raises(ServiceError) as excinfo:
            await task_service.create_from_suggestion(_draft(new_id()), family.admin_user)
        assert excinfo.value.code is ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_archived_event(self, task_service, store, family):
        event_id = store.add_event(family.id, family.admin.id, archived=True)
        with pytest.raises(ServiceError) as excinfo:
            await task_service.create_from_suggestion(_draft(event_id), family.admin_user)
        assert excinfo.value.code is ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_event_of_other_family(self, task_service, store, family, other_family):
        event_id = store.add_event(other_family.id, other_family.admin.id)
        with pytest.raises(ServiceError) as excinfo:
            await task_service.create_from_suggestion(_draft(event_id), family.admin_user)
        assert excinfo.value.code is ErrorCode.FORBIDDEN

    @pytest.mark.asyncio
    async def test_private_event_of_other_user(self, task_service, store, family):
        event_id = store.add_event(family.id, family.admin.id, is_private=True)
        with pytest.raises(ServiceError) as excinfo:
            await task_service.create_from_suggestion(_draft(event_id), family.member_user)
        assert excinfo.value.code is ErrorCode.FORBIDDEN

    @pytest.mark.asyncio
    async def test_unknown_assignee(self, task_service, store, family):
        event_id = store.add_event(family.id, family.admin.id)
        with pytest.raises(ServiceError) as excinfo:
            await task_service.create_from_suggestion(_draft(event_id, assigned_to=new_id()), family.admin_user)
        assert excinfo.value.code is ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_assignee_outside_family(self, task_service, store, family, other_family):
        event_id = store.add_event(family.id, family.admin.id)
        draft = _draft(event_id, assigned_to=other_family.member.id)
        with pytest.raises(ServiceError) as excinfo:
            await task_service.create_from_suggestion(draft, family.admin_user)
        assert excinfo.value.code is ErrorCode.FORBIDDEN

    @pytest.mark.asyncio
    async def test_insert_failure(self, task_service, store, family):
        event_id = store.add_event(family.id, family.admin.id)
        store.fail_on("tasks.insert", "violates check constraint")
        with pytest.raises(ServiceError) as excinfo:
            await task_service.create_from_suggestion(_draft(event_id), family.admin_user)
        assert excinfo.value.code is ErrorCode.TASK_CREATION_FAILED
        assert excinfo.value.details == {"error": "violates check constraint"}
