from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Protocol, Tuple

import orjson

from ..domain import TaskSuggestion, UserRole
from .matcher import SuggestionMatcher

if TYPE_CHECKING:
    from ..data import SupabaseGateway
    from ..services.participants import ParticipantResolver

logger = logging.getLogger(__name__)


class SuggestionEngineError(RuntimeError):
    """Raised when the suggestion engine cannot produce a usable answer."""


@dataclass(frozen=True, slots=True)
class SuggestionRequest:
    title: str
    start_time: datetime
    family_id: str
    requester_role: UserRole = UserRole.MEMBER
    participant_account_ids: Tuple[str, ...] = ()
    participant_member_ids: Tuple[str, ...] = ()

    def to_payload(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "start_time": self.start_time.isoformat(),
            "participant_ids": list(self.participant_account_ids),
            "member_ids": list(self.participant_member_ids),
            "user_role": UserRole(self.requester_role).value,
        }


class SuggestionEngine(Protocol):
    async def suggest(self, request: SuggestionRequest) -> List[TaskSuggestion]:
        ...


@dataclass(slots=True)
class InlineSuggestionEngine:
    """Runs the keyword matcher in-process.

    Participants are resolved leniently: ids that do not belong to the family
    are ignored for preview purposes.
    """

    resolver: "ParticipantResolver"
    matcher: SuggestionMatcher = field(default_factory=SuggestionMatcher)

    async def suggest(self, request: SuggestionRequest) -> List[TaskSuggestion]:
        participants = await self.resolver.resolve(
            request.participant_account_ids,
            request.participant_member_ids,
            request.family_id,
        )
        child_ids = await self.resolver.family_child_ids(request.family_id)
        return self.matcher.match(
            request.title,
            request.start_time,
            participants,
            request.requester_role,
            family_child_ids=child_ids,
        )


def parse_suggestions(payload: Any) -> List[TaskSuggestion]:
    if isinstance(payload, (bytes, bytearray, str)):
        payload = orjson.loads(payload) if payload else {}
    if not isinstance(payload, dict):
        raise SuggestionEngineError(f"Unexpected suggestion payload: {type(payload).__name__}")
    if payload.get("error"):
        error = payload["error"]
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise SuggestionEngineError(message or "Suggestion engine reported an error.")
    try:
        return [TaskSuggestion.from_record(item) for item in payload.get("suggestions") or []]
    except (KeyError, TypeError, ValueError) as exc:
        raise SuggestionEngineError(f"Malformed suggestion: {exc}") from exc


@dataclass(slots=True)
class RemoteSuggestionEngine:
    """Invokes the ``analyze-event-for-suggestions`` edge function."""

    gateway: "SupabaseGateway"
    function_name: str = "analyze-event-for-suggestions"

    async def suggest(self, request: SuggestionRequest) -> List[TaskSuggestion]:
        client = await self.gateway.ensure_client()
        logger.debug("Invoking suggestion function %s", self.function_name)
        try:
            payload = await client.functions.invoke(
                self.function_name,
                invoke_options={"body": request.to_payload(), "responseType": "json"},
            )
        except Exception as exc:  # noqa: BLE001
            raise SuggestionEngineError(f"Suggestion function {self.function_name} failed: {exc}") from exc
        return parse_suggestions(payload)


__all__ = [
    "InlineSuggestionEngine",
    "RemoteSuggestionEngine",
    "SuggestionEngine",
    "SuggestionEngineError",
    "SuggestionRequest",
    "parse_suggestions",
]
