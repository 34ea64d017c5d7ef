from __future__ import annotations

from typing import Any, Dict


class StreamingAppError(Exception):
    """Base error for everything the API surfaces as a structured failure.

    `code` is the stable machine-readable identifier returned to clients;
    `retryable` tells the mini-app whether to show a retry affordance.
    """

    code: str = "error"
    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str = "", **details: Any) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details: Dict[str, Any] = {k: v for k, v in details.items() if v is not None}

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.details:
            payload["details"] = dict(self.details)
        return payload


class AuthenticationRequiredError(StreamingAppError):
    code = "not_authenticated"
    status_code = 401


class InvalidInputError(StreamingAppError):
    code = "invalid_input"
    status_code = 400


class NotFoundError(StreamingAppError):
    code = "not_found"
    status_code = 404


class UpstreamUnavailableError(StreamingAppError):
    """Catalog or embed provider failed/timed out. Safe to retry."""

    code = "upstream_unavailable"
    status_code = 503
    retryable = True


class PersistenceError(StreamingAppError):
    code = "persistence_error"
    status_code = 500
