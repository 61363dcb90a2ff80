"""Rule-based task suggestions for newly created events."""

from __future__ import annotations

from .catalog import DEFAULT_CATALOG, SUGGESTION_IDS, SuggestionCatalog, SuggestionTemplate
from .engine import (
    InlineSuggestionEngine,
    RemoteSuggestionEngine,
    SuggestionEngine,
    SuggestionEngineError,
    SuggestionRequest,
)
from .matcher import SuggestionMatcher, match_suggestions, normalize_text

__all__ = [
    "DEFAULT_CATALOG",
    "InlineSuggestionEngine",
    "RemoteSuggestionEngine",
    "SUGGESTION_IDS",
    "SuggestionCatalog",
    "SuggestionEngine",
    "SuggestionEngineError",
    "SuggestionMatcher",
    "SuggestionRequest",
    "SuggestionTemplate",
    "match_suggestions",
    "normalize_text",
]
