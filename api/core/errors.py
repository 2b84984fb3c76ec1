"""
API error types.

Handlers in `api/main.py` render these as `{"message": ..., ...}` JSON with
the matching status code.
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        error: str | None = None,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error = error
        self.suggestion = suggestion
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        if self.suggestion is not None:
            body["suggestion"] = self.suggestion
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class ServerError(ApiError):
    status_code = 500


def storage_error_details(exc: BaseException) -> dict[str, Any]:
    """
    Diagnostic fields for a storage fault. Driver-specific attributes are
    copied only when present.
    """
    details: dict[str, Any] = {"name": type(exc).__name__, "message": str(exc)}
    for attr, key in (("sqlstate", "state"), ("errno", "errno"), ("detail", "detail"), ("hint", "hint")):
        value = getattr(exc, attr, None)
        if value is not None:
            details[key] = value
    return details
