from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Sequence

from ..domain import MemberParticipant, ResolvedParticipant, SpecialRule, TaskSuggestion, UserRole
from .catalog import DEFAULT_CATALOG, SuggestionCatalog, SuggestionTemplate


def normalize_text(text: str) -> str:
    """Lowercase, trim and collapse runs of whitespace to a single space."""

    return " ".join(text.lower().split())


def matches_keywords(normalized_title: str, keywords: Iterable[str]) -> bool:
    # Plain substring test without word boundaries, so "bal" also hits "balet".
    return any(keyword in normalized_title for keyword in keywords)


def due_date_for(start_time: datetime, days_before: int) -> datetime:
    return start_time - timedelta(days=days_before)


def _suggestion(template: SuggestionTemplate, start_time: datetime) -> TaskSuggestion:
    return TaskSuggestion(
        suggestion_id=template.id,
        title=template.title,
        due_date=due_date_for(start_time, template.days_before_event),
        description=template.description,
    )


@dataclass(frozen=True)
class SuggestionMatcher:
    """Pure keyword matcher over an injected template catalog."""

    catalog: SuggestionCatalog = DEFAULT_CATALOG

    def match(
        self,
        title: str,
        start_time: datetime,
        participants: Sequence[ResolvedParticipant],
        requester_role: UserRole | str,
        *,
        family_child_ids: Iterable[str] = (),
    ) -> List[TaskSuggestion]:
        normalized = normalize_text(title)
        is_admin = requester_role == UserRole.ADMIN
        suggestions: list[TaskSuggestion] = []
        for template in self.catalog:
            if not matches_keywords(normalized, template.keywords):
                continue
            if template.special_rule is SpecialRule.NEEDS_BABYSITTER:
                if self._needs_babysitter(participants, family_child_ids):
                    suggestions.append(_suggestion(template, start_time))
                continue
            if template.admin_only and not is_admin:
                continue
            suggestions.append(_suggestion(template, start_time))
        return suggestions

    @staticmethod
    def _needs_babysitter(participants: Sequence[ResolvedParticipant], family_child_ids: Iterable[str]) -> bool:
        children = set(family_child_ids)
        if not children:
            return False
        attending_children = {
            participant.id
            for participant in participants
            if isinstance(participant, MemberParticipant) and not participant.is_adult
        }
        left_at_home = children - attending_children
        adult_attending = any(participant.is_adult for participant in participants)
        return bool(left_at_home) and adult_attending


_default_matcher = SuggestionMatcher()


def match_suggestions(
    title: str,
    start_time: datetime,
    participants: Sequence[ResolvedParticipant] = (),
    requester_role: UserRole | str = UserRole.MEMBER,
    *,
    family_child_ids: Iterable[str] = (),
) -> List[TaskSuggestion]:
    return _default_matcher.match(
        title,
        start_time,
        participants,
        requester_role,
        family_child_ids=family_child_ids,
    )


__all__ = ["SuggestionMatcher", "due_date_for", "match_suggestions", "matches_keywords", "normalize_text"]
