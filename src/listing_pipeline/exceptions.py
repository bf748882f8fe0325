"""PipelineException hierarchy raised once a stage failure is reported."""

from __future__ import annotations

from typing import Any


class PipelineException(Exception):
    """Base for all pipeline exceptions."""


class PipelineAbort(PipelineException):
    """Controlled abort with HTTP status code, detail and field errors."""

    def __init__(
        self,
        detail: str,
        *,
        status_code: int = 400,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.errors = errors or []

    def to_response(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "message": self.detail}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class ValidationError(PipelineAbort):
    """Missing or malformed client input (400)."""

    def __init__(
        self,
        detail: str = "Validation failed",
        *,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(detail, status_code=400, errors=errors)


class AuthenticationFailed(PipelineAbort):
    """Authentication check failed (401)."""

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(detail, status_code=401)


class NotFoundError(PipelineAbort):
    """Lookup yielded no usable result (404)."""

    def __init__(self, detail: str = "No results found!.") -> None:
        super().__init__(detail, status_code=404)


class UpstreamError(PipelineAbort):
    """External dependency failed or replied with an unexpected shape (502)."""

    def __init__(self, detail: str = "Upstream service error") -> None:
        super().__init__(detail, status_code=502)


class PipelineInternalError(PipelineException):
    """Engine-level error wrapping unexpected exceptions."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause
