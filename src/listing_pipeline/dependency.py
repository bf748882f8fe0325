"""pipeline_dependency() — factory producing FastAPI-compatible dependency callables."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import HTTPException
from starlette.requests import Request

from listing_pipeline.context import RequestContext
from listing_pipeline.errors import report_failure
from listing_pipeline.exceptions import PipelineInternalError, ValidationError
from listing_pipeline.outcome import Continue, Fail, Outcome, Redirect
from listing_pipeline.pipeline import Pipeline, ResolvedPipeline
from listing_pipeline.stage import PipelineStage
from listing_pipeline.trace import PipelineTrace, TraceEntry

logger = logging.getLogger(__name__)

_BODYLESS_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "DELETE"})


def pipeline_dependency(
    pipeline: Pipeline,
) -> Callable[..., Awaitable[RequestContext]]:
    """Return a FastAPI-compatible dependency that executes the pipeline.

    Failures are raised as ``PipelineAbort``; the app must install
    ``register_error_handlers`` to render them.
    """
    resolved = pipeline.resolve()
    dep = _make_dependency(resolved)
    dep._pipeline_resolved = resolved  # type: ignore[attr-defined]
    return dep


def _make_dependency(
    resolved: ResolvedPipeline,
) -> Callable[..., Awaitable[RequestContext]]:
    async def dependency(request: Request) -> RequestContext:
        body = await read_json_body(request)
        ctx = RequestContext(request=request, body=body)
        trace = PipelineTrace() if resolved.debug else None
        started = time.perf_counter()

        for hook in resolved.hooks:
            await hook.on_pipeline_start(ctx)

        try:
            stage, outcome = await _run_stages(resolved, ctx, trace)
        except Exception as exc:
            logger.exception("Unexpected error in pipeline for %s", request.url.path)
            wrapped = PipelineInternalError("Internal pipeline error", cause=exc)
            if trace is not None:
                trace.outcome = "ERROR"
                trace.error = wrapped
            await _finish(resolved, ctx, trace, started)
            raise HTTPException(status_code=500, detail=wrapped.detail) from wrapped

        if trace is not None:
            trace.final = outcome
        await _finish(resolved, ctx, trace, started)

        if isinstance(outcome, Fail):
            abort = report_failure(outcome, stage=stage.name if stage else None)
            if trace is not None:
                trace.error = abort
            raise abort
        if isinstance(outcome, Redirect):
            logger.info("Redirecting %s to %s", request.url.path, outcome.location)
            raise HTTPException(
                status_code=outcome.status_code,
                headers={"Location": outcome.location},
            )
        return ctx

    return dependency


async def _run_stages(
    resolved: ResolvedPipeline,
    ctx: RequestContext,
    trace: PipelineTrace | None,
) -> tuple[PipelineStage | None, Outcome]:
    for stage in resolved.stages:
        stage_start = time.perf_counter()
        try:
            outcome = await stage.run(ctx)
        except Exception as exc:
            if trace is not None:
                trace.entries.append(
                    TraceEntry(
                        stage_name=stage.name,
                        category=stage.category,
                        duration_ms=_elapsed_ms(stage_start),
                        outcome="FAILED",
                        reason=str(exc),
                    )
                )
            raise

        if trace is not None:
            trace.entries.append(_trace_entry(stage, outcome, stage_start))
        for hook in resolved.hooks:
            await hook.on_stage(ctx, stage, outcome)

        if not isinstance(outcome, Continue):
            if trace is not None:
                trace.outcome = "REDIRECTED" if isinstance(outcome, Redirect) else "FAILED"
            return stage, outcome

    return None, Continue(ctx)


async def _finish(
    resolved: ResolvedPipeline,
    ctx: RequestContext,
    trace: PipelineTrace | None,
    started: float,
) -> None:
    if trace is not None:
        trace.total_duration_ms = _elapsed_ms(started)
        ctx.state["trace"] = trace
    for hook in resolved.hooks:
        await hook.on_pipeline_end(ctx)


def _trace_entry(stage: PipelineStage, outcome: Outcome, started: float) -> TraceEntry:
    if isinstance(outcome, Fail):
        label, reason = "FAILED", outcome.detail
    elif isinstance(outcome, Redirect):
        label, reason = "REDIRECT", outcome.location
    else:
        label, reason = "CONTINUE", None
    return TraceEntry(
        stage_name=stage.name,
        category=stage.category,
        duration_ms=_elapsed_ms(started),
        outcome=label,  # type: ignore[arg-type]
        reason=reason,
    )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


async def read_json_body(request: Request) -> dict[str, Any]:
    """Parse a JSON object body; bodyless or non-JSON requests yield ``{}``."""
    if request.method in _BODYLESS_METHODS:
        return {}
    content_type = request.headers.get("content-type", "")
    if "json" not in content_type:
        return {}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = await request.json()
    except ValueError:
        raise ValidationError("Request body is not valid JSON") from None
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
