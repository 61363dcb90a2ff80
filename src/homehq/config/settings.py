from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_log_dir

load_dotenv()

APP_NAME = "HomeHQ"
APP_AUTHOR = "HomeHQ"

SUGGESTION_MODES = ("inline", "remote")


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    anon_key: Optional[str]
    service_role_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.anon_key:
            missing.append("SUPABASE_ANON_KEY")
        return missing

    def key(self, *, service_role: bool = False) -> Optional[str]:
        if service_role:
            return self.service_role_key
        return self.anon_key


@dataclass(frozen=True)
class StorageSettings:
    events_table: str
    participants_table: str
    tasks_table: str
    profiles_table: str
    family_members_table: str


@dataclass(frozen=True)
class SuggestionSettings:
    mode: str
    function_name: str
    timeout_seconds: float

    @property
    def is_remote(self) -> bool:
        return self.mode == "remote"


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    directory: Path


@dataclass(frozen=True)
class AppSettings:
    supabase: SupabaseSettings
    storage: StorageSettings
    suggestions: SuggestionSettings
    server: ServerSettings
    logging: LoggingSettings


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _mode_from_env(name: str, default: str) -> str:
    raw = (os.getenv(name) or default).strip().lower()
    return raw if raw in SUGGESTION_MODES else default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
        service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY"),
    )

    storage = StorageSettings(
        events_table=os.getenv("HOMEHQ_EVENTS_TABLE", "events"),
        participants_table=os.getenv("HOMEHQ_PARTICIPANTS_TABLE", "event_participants"),
        tasks_table=os.getenv("HOMEHQ_TASKS_TABLE", "tasks"),
        profiles_table=os.getenv("HOMEHQ_PROFILES_TABLE", "profiles"),
        family_members_table=os.getenv("HOMEHQ_FAMILY_MEMBERS_TABLE", "family_members"),
    )

    suggestions = SuggestionSettings(
        mode=_mode_from_env("HOMEHQ_SUGGESTION_MODE", "inline"),
        function_name=os.getenv("HOMEHQ_SUGGESTION_FUNCTION", "analyze-event-for-suggestions"),
        timeout_seconds=_float_from_env("HOMEHQ_SUGGESTION_TIMEOUT_SECONDS", 5.0),
    )

    server = ServerSettings(
        host=os.getenv("HOMEHQ_SERVER_HOST", "127.0.0.1"),
        port=int(os.getenv("HOMEHQ_SERVER_PORT", "8000")),
    )

    logging_settings = LoggingSettings(
        level=os.getenv("HOMEHQ_LOG_LEVEL", "INFO").upper(),
        directory=Path(os.getenv("HOMEHQ_LOG_DIR") or user_log_dir(APP_NAME, APP_AUTHOR)),
    )

    return AppSettings(
        supabase=supabase,
        storage=storage,
        suggestions=suggestions,
        server=server,
        logging=logging_settings,
    )
