"""Centralized failure reporting and FastAPI error handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from listing_pipeline.exceptions import (
    AuthenticationFailed,
    NotFoundError,
    PipelineAbort,
    UpstreamError,
    ValidationError,
)
from listing_pipeline.outcome import ErrorKind, Fail

logger = logging.getLogger(__name__)

_EXCEPTIONS: dict[ErrorKind, type[PipelineAbort]] = {
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.UNAUTHENTICATED: AuthenticationFailed,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.UPSTREAM: UpstreamError,
}


def report_failure(fail: Fail, *, stage: str | None = None) -> PipelineAbort:
    """Log a stage failure and convert it to the matching PipelineAbort."""
    level = logging.ERROR if fail.kind is ErrorKind.UPSTREAM else logging.WARNING
    logger.log(
        level,
        "Stage %s failed (%s): %s",
        stage or "<unknown>",
        fail.kind.value,
        fail.detail,
    )

    exc_cls = _EXCEPTIONS[fail.kind]
    if exc_cls is ValidationError:
        return ValidationError(fail.detail, errors=[dict(e) for e in fail.errors])
    return exc_cls(fail.detail)


def register_error_handlers(app: FastAPI) -> None:
    """Render PipelineAbort raised anywhere in a handler as JSON."""

    @app.exception_handler(PipelineAbort)
    async def pipeline_abort_handler(
        request: Request, exc: PipelineAbort
    ) -> JSONResponse:
        logger.warning(
            "PipelineAbort on %s: %s (%d)",
            request.url.path,
            exc.detail,
            exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())
