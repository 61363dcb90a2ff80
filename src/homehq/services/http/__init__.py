"""HTTP services for HomeHQ."""

from .server import analyze_event_for_suggestions, app, get_context, run_local_server

__all__ = [
    "analyze_event_for_suggestions",
    "app",
    "get_context",
    "run_local_server",
]
