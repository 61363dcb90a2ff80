"""Tests for homehq.api.models and the domain record mappers."""

import pytest
from pydantic import ValidationError

from homehq.api.models import (
    AnalyzeEventRequest,
    CreateEventRequest,
    CreateTaskFromSuggestionRequest,
    SuggestionPayload,
    UpdateEventRequest,
)
from homehq.domain import ErrorCode, Event, ServiceError, TaskSuggestion, UserRole

from conftest import new_id, utc

START = "2026-05-20T15:00:00Z"
END = "2026-05-20T18:00:00Z"


def _create(**overrides):
    values = {"title": "Urodziny Ani", "start_time": START, "end_time": END}
    values.update(overrides)
    return CreateEventRequest.model_validate(values)


class TestCreateEventRequest:
    def test_minimal(self):
        draft = _create().to_draft()
        assert draft.title == "Urodziny Ani"
        assert draft.start_time == utc(2026, 5, 20, 15)
        assert draft.participant_account_ids == ()

    def test_title_is_trimmed(self):
        assert _create(title="  Basen  ").title == "Basen"

    @pytest.mark.parametrize("title", ["", "   ", "x" * 201])
    def test_bad_titles(self, title):
        with pytest.raises(ValidationError):
            _create(title=title)

    def test_end_must_follow_start(self):
        with pytest.raises(ValidationError):
            _create(end_time=START)

    def test_bad_timestamp(self):
        with pytest.raises(ValidationError):
            _create(start_time="next tuesday")

    def test_naive_timestamp_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            _create(start_time="2026-05-20T15:00:00")
        assert excinfo.value.errors()[0]["type"] == "timezone_aware"

    def test_offset_timestamp_accepted(self):
        draft = _create(start_time="2026-05-20T17:00:00+02:00").to_draft()
        assert draft.start_time == utc(2026, 5, 20, 15)

    def test_participant_ids_must_be_uuids(self):
        with pytest.raises(ValidationError):
            _create(participant_ids=["not-a-uuid"])

    def test_unknown_suggestion_id(self):
        with pytest.raises(ValidationError):
            _create(accept_suggestions=["buy_unicorn"])

    def test_legacy_suggestion_id_accepted(self):
        assert _create(accept_suggestions=["birthday"]).accept_suggestions == ["birthday"]

    def test_private_with_two_participants(self):
        with pytest.raises(ValidationError):
            _create(is_private=True, participant_ids=[new_id(), new_id()])

    def test_private_with_member(self):
        with pytest.raises(ValidationError):
            _create(is_private=True, member_ids=[new_id()])

    def test_private_with_single_participant(self):
        participant = new_id()
        draft = _create(is_private=True, participant_ids=[participant]).to_draft()
        assert draft.participant_account_ids == (participant,)

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            _create(family_id=new_id())


class TestUpdateEventRequest:
    def test_empty_update(self):
        update = UpdateEventRequest.model_validate({}).to_update()
        assert update.to_changes() == {}
        assert not update.replaces_participants

    def test_private_with_participants(self):
        with pytest.raises(ValidationError):
            UpdateEventRequest.model_validate({"is_private": True, "member_ids": [new_id()]})

    def test_empty_participant_list_replaces(self):
        update = UpdateEventRequest.model_validate({"participant_ids": []}).to_update()
        assert update.replaces_participants
        assert not update.has_participants

    def test_both_bounds_validated(self):
        with pytest.raises(ValidationError):
            UpdateEventRequest.model_validate({"start_time": END, "end_time": START})

    def test_naive_bound_rejected(self):
        with pytest.raises(ValidationError):
            UpdateEventRequest.model_validate({"end_time": "2026-05-20T18:00:00"})

    def test_single_bound_passes(self):
        update = UpdateEventRequest.model_validate({"end_time": START}).to_update()
        assert update.touches_one_time_bound


class TestOtherRequests:
    def test_analyze_requires_title_and_start(self):
        with pytest.raises(ValidationError):
            AnalyzeEventRequest.model_validate({"title": "Kino"})

    def test_analyze_role(self):
        request = AnalyzeEventRequest.model_validate({"title": "Kino", "start_time": START, "user_role": "admin"})
        assert request.user_role is UserRole.ADMIN

    def test_task_from_suggestion(self):
        event_id = new_id()
        draft = CreateTaskFromSuggestionRequest.model_validate(
            {"event_id": event_id, "suggestion_id": "birthday_cake", "title": "Tort"}
        ).to_draft()
        assert draft.event_id == event_id
        assert draft.assigned_to is None

    def test_naive_due_date_rejected(self):
        with pytest.raises(ValidationError):
            CreateTaskFromSuggestionRequest.model_validate(
                {"event_id": new_id(), "suggestion_id": "birthday_cake", "title": "Tort", "due_date": "2026-05-13T09:00:00"}
            )


class TestRecords:
    def test_event_from_record_with_embedded_participants(self):
        profile_id = new_id()
        event = Event.from_record(
            {
                "id": new_id(),
                "family_id": new_id(),
                "created_by": profile_id,
                "title": "Basen",
                "start_time": START,
                "end_time": END,
                "is_private": False,
                "event_participants": [
                    {
                        "id": new_id(),
                        "event_id": new_id(),
                        "profile_id": profile_id,
                        "member_id": None,
                        "profile": [{"id": profile_id, "display_name": "Mama", "role": "admin"}],
                    }
                ],
            }
        )
        assert event.start_time == utc(2026, 5, 20, 15)
        assert event.participants[0].display_name == "Mama"
        assert event.participants[0].is_admin is True

    def test_suggestion_payload(self):
        suggestion = TaskSuggestion("birthday_cake", "Tort", utc(2026, 5, 13), accepted=True)
        payload = SuggestionPayload.from_domain(suggestion).model_dump()
        assert payload["due_date"] == "2026-05-13T00:00:00+00:00"
        assert payload["accepted"] is True


class TestServiceError:
    def test_status_and_dict(self):
        error = ServiceError(ErrorCode.FORBIDDEN, "No", {"reason": "x"})
        assert error.status == 403
        assert error.to_dict() == {"code": "FORBIDDEN", "message": "No", "details": {"reason": "x"}}

    def test_details_omitted_when_empty(self):
        error = ServiceError(ErrorCode.EVENT_CREATION_FAILED, "Failed")
        assert error.status == 500
        assert error.to_dict() == {"code": "EVENT_CREATION_FAILED", "message": "Failed"}
