from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from ..config.settings import SupabaseSettings
from ..domain.errors import RepositoryError

logger = logging.getLogger(__name__)


class SupabaseNotInitializedError(RuntimeError):
    """Raised when accessing the Supabase client before initialization."""


@dataclass
class SupabaseGateway:
    """Thin wrapper around the async Supabase client.

    The client is created lazily on first use. ``service_role`` selects the
    service key for server-side callers that have already authenticated the
    user themselves.
    """

    settings: SupabaseSettings
    service_role: bool = False
    _client: Optional[AsyncClient] = None

    async def ensure_client(self) -> AsyncClient:
        if self._client is not None:
            return self._client
        key = self.settings.key(service_role=self.service_role)
        if not self.settings.url or not key:
            raise SupabaseNotInitializedError("Supabase settings are missing URL or API key.")
        self._client = await acreate_client(self.settings.url, key)
        return self._client

    async def table(self, name: str):
        return (await self.ensure_client()).table(name)

    async def execute(self, query: Any) -> Any:
        """Run a PostgREST query, translating API failures to ``RepositoryError``.

        ``maybe_single()`` queries may come back as ``None`` when nothing
        matched; callers treat that the same as an empty ``data``.
        """

        try:
            return await query.execute()
        except APIError as exc:
            logger.debug("Supabase query failed: code=%s message=%s", exc.code, exc.message)
            raise RepositoryError(exc.message or str(exc), code=exc.code, details=exc.details) from exc

    async def user_id_for_token(self, token: str) -> Optional[str]:
        client = await self.ensure_client()
        try:
            response = await client.auth.get_user(token)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Token verification failed: %s", exc)
            return None
        user = getattr(response, "user", None)
        identifier = getattr(user, "id", None)
        return str(identifier) if identifier else None


def response_data(response: Any) -> Any:
    return getattr(response, "data", None) if response is not None else None
