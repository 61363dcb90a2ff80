"""Structured error taxonomy shared by services and the action layer.

Callers branch on ``ServiceError.code``; the HTTP-like ``status`` is only a
hint for transports that need one.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PRIVATE_EVENT = "INVALID_PRIVATE_EVENT"
    INVALID_TIME_RANGE = "INVALID_TIME_RANGE"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    EVENT_CREATION_FAILED = "EVENT_CREATION_FAILED"
    PARTICIPANT_INSERT_FAILED = "PARTICIPANT_INSERT_FAILED"
    PARTICIPANT_UPDATE_FAILED = "PARTICIPANT_UPDATE_FAILED"
    TASK_CREATION_FAILED = "TASK_CREATION_FAILED"
    EVENT_FETCH_FAILED = "EVENT_FETCH_FAILED"
    AI_ENGINE_ERROR = "AI_ENGINE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_PRIVATE_EVENT: 400,
    ErrorCode.INVALID_TIME_RANGE: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
}


class ServiceError(Exception):
    """Raised by services with a machine-readable code and optional details."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = ErrorCode(code)
        self.message = message
        self.details = details

    @property
    def status(self) -> int:
        return _STATUS_BY_CODE.get(self.code, 500)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return f"ServiceError({self.code.value!r}, {self.message!r})"


class RepositoryError(RuntimeError):
    """Raised when the persistence collaborator rejects or fails a query."""

    def __init__(self, message: str, *, code: Optional[str] = None, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


__all__ = ["ErrorCode", "RepositoryError", "ServiceError"]
