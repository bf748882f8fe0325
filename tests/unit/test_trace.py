"""Tests for PipelineTrace, TraceEntry, and debug integration."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import HTTPException

from listing_pipeline.context import RequestContext
from listing_pipeline.dependency import pipeline_dependency
from listing_pipeline.exceptions import NotFoundError
from listing_pipeline.hooks import AfterPipeline
from listing_pipeline.outcome import Continue, ErrorKind, Fail, Outcome
from listing_pipeline.pipeline import Pipeline
from listing_pipeline.stage import PipelineStage, StageCategory
from listing_pipeline.trace import PipelineTrace, TraceEntry


class _AuthStub(PipelineStage):
    category = StageCategory.AUTHENTICATION

    async def run(self, ctx: RequestContext) -> Outcome:
        ctx.user = {"_id": "user-1"}
        return Continue(ctx)


class _EnrichStub(PipelineStage):
    category = StageCategory.ENRICHMENT

    async def run(self, ctx: RequestContext) -> Outcome:
        return Continue(ctx)


class _NotFoundStub(PipelineStage):
    category = StageCategory.ENRICHMENT

    async def run(self, ctx: RequestContext) -> Outcome:
        return Fail(ErrorKind.NOT_FOUND, "No results found!.")


class _Broken(PipelineStage):
    category = StageCategory.CUSTOM

    async def run(self, ctx: RequestContext) -> Outcome:
        raise RuntimeError("boom")


class TestTraceEntry:
    def test_construction(self) -> None:
        entry = TraceEntry(
            stage_name="GeocodeAddress",
            category=StageCategory.ENRICHMENT,
            duration_ms=1.5,
            outcome="CONTINUE",
        )
        assert entry.reason is None
        assert entry.category == StageCategory.ENRICHMENT

    def test_frozen(self) -> None:
        entry = TraceEntry("X", StageCategory.CUSTOM, 0.0, "CONTINUE")
        with pytest.raises(AttributeError):
            entry.stage_name = "other"  # type: ignore[misc]


class TestPipelineTrace:
    def test_defaults(self) -> None:
        trace = PipelineTrace()
        assert trace.entries == []
        assert trace.outcome == "OK"
        assert trace.final is None
        assert trace.error is None


class TestDebugIntegration:
    async def test_debug_produces_trace(self, make_request: Any) -> None:
        dep = pipeline_dependency(Pipeline(_EnrichStub(), _AuthStub(), debug=True))
        ctx = await dep(make_request())
        trace = ctx.state["trace"]
        assert isinstance(trace, PipelineTrace)
        assert [e.stage_name for e in trace.entries] == ["_AuthStub", "_EnrichStub"]
        assert all(e.outcome == "CONTINUE" for e in trace.entries)
        assert trace.outcome == "OK"
        assert trace.total_duration_ms >= 0

    async def test_no_trace_without_debug(self, make_request: Any) -> None:
        ctx = await pipeline_dependency(Pipeline(_AuthStub()))(make_request())
        assert "trace" not in ctx.state

    async def test_failure_recorded_before_abort(self, make_request: Any) -> None:
        captured: list[RequestContext] = []

        async def keep(ctx: RequestContext) -> None:
            captured.append(ctx)

        pipeline = Pipeline(_AuthStub(), _NotFoundStub(), debug=True).add_hook(
            AfterPipeline(keep)
        )
        with pytest.raises(NotFoundError) as exc_info:
            await pipeline_dependency(pipeline)(make_request())
        assert exc_info.value.status_code == 404

        trace = captured[0].state["trace"]
        assert trace.outcome == "FAILED"
        assert trace.entries[-1].outcome == "FAILED"
        assert trace.entries[-1].reason == "No results found!."
        assert isinstance(trace.final, Fail)

    async def test_unexpected_error_recorded(self, make_request: Any) -> None:
        captured: list[RequestContext] = []

        async def keep(ctx: RequestContext) -> None:
            captured.append(ctx)

        pipeline = Pipeline(_Broken(), debug=True).add_hook(AfterPipeline(keep))
        with pytest.raises(HTTPException) as exc_info:
            await pipeline_dependency(pipeline)(make_request())
        assert exc_info.value.status_code == 500

        trace = captured[0].state["trace"]
        assert trace.outcome == "ERROR"
        assert trace.entries[0].reason == "boom"
        assert trace.error is not None
