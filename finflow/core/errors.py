"""Error taxonomy shared by stores and controllers.

Every error carries the HTTP status it maps to; the app-level handlers in
``finflow.create_app`` turn them into the ``{"error": ...}`` envelope.
"""

from __future__ import annotations

from typing import Any, Optional


class FinFlowError(Exception):
    status_code = 500
    default_message = "unexpected_error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(FinFlowError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "validation_error"


class NotFoundError(FinFlowError):
    """Row absent or not owned by the caller; the two are never distinguished."""

    status_code = 404
    default_message = "Not Found"


class UserNotFound(NotFoundError):
    default_message = "User Not Found"


class UpstreamError(FinFlowError):
    """The relational store could not be reached."""

    status_code = 503
    default_message = "Service Unavailable"


__all__ = [
    "FinFlowError",
    "ValidationError",
    "NotFoundError",
    "UserNotFound",
    "UpstreamError",
]
