from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError

from ...api.models import AnalyzeEventRequest
from ...api.serializers import serialize_suggestions
from ...domain import ErrorCode, ServiceError
from ...logging import configure_logging
from ...suggestions import SuggestionRequest
from ..context import ServiceContext

logger = logging.getLogger(__name__)

app = FastAPI(title="HomeHQ Suggestion Function", version="0.3.0", default_response_class=ORJSONResponse)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@lru_cache(maxsize=1)
def get_context() -> ServiceContext:
    # Token is verified per request; row reads need the service key.
    return ServiceContext(service_role=True)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> ORJSONResponse:
    return ORJSONResponse({"error": exc.to_dict()}, status_code=exc.status)


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        logger.warning("Missing Authorization header")
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Missing authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Invalid authorization header")
    return token.strip()


@app.post("/analyze-event-for-suggestions")
async def analyze_event_for_suggestions(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    context: ServiceContext = Depends(get_context),
) -> ORJSONResponse:
    token = _bearer_token(authorization)
    user_id = await context.gateway.user_id_for_token(token)
    if not user_id:
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Invalid or expired token")

    try:
        body = await request.json()
    except ValueError as exc:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "Request body must be JSON") from exc
    try:
        payload = AnalyzeEventRequest.model_validate(body)
    except ValidationError as exc:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "title and start_time are required") from exc

    profile = await context.profiles.fetch(user_id)
    if profile is None:
        raise ServiceError(ErrorCode.FORBIDDEN, "User profile not found")

    suggestion_request = SuggestionRequest(
        title=payload.title,
        start_time=payload.start_time,
        family_id=profile.family_id,
        requester_role=payload.user_role or profile.role,
        participant_account_ids=tuple(str(item) for item in payload.participant_ids),
        participant_member_ids=tuple(str(item) for item in payload.member_ids),
    )
    try:
        suggestions = await context.inline_engine.suggest(suggestion_request)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Suggestion analysis failed")
        raise ServiceError(
            ErrorCode.AI_ENGINE_ERROR,
            "Failed to analyze event for suggestions",
            {"error": str(exc)},
        ) from exc
    logger.debug("Generated %d suggestions for user %s", len(suggestions), user_id)
    return ORJSONResponse({"suggestions": serialize_suggestions(suggestions)})


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    import asyncio
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    configure_logging()
    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving suggestion function on %s:%s", host, port)
    asyncio.run(serve(app, config))
