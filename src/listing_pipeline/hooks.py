"""PipelineHook base, convenience hooks, and the logging hook."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from listing_pipeline.context import RequestContext
from listing_pipeline.outcome import Continue, Fail, Outcome, Redirect
from listing_pipeline.stage import PipelineStage

logger = logging.getLogger(__name__)


class PipelineHook:
    """Base abstraction for lifecycle hooks. All methods are no-op by default."""

    async def on_pipeline_start(self, ctx: RequestContext) -> None:
        pass

    async def on_pipeline_end(self, ctx: RequestContext) -> None:
        pass

    async def on_stage(
        self, ctx: RequestContext, stage: PipelineStage, outcome: Outcome
    ) -> None:
        pass


class BeforePipeline(PipelineHook):
    """Convenience hook that only fires on pipeline start."""

    def __init__(self, callback: Callable[[RequestContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_pipeline_start(self, ctx: RequestContext) -> None:
        await self._callback(ctx)


class AfterPipeline(PipelineHook):
    """Convenience hook that only fires on pipeline end, whatever the outcome."""

    def __init__(self, callback: Callable[[RequestContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_pipeline_end(self, ctx: RequestContext) -> None:
        await self._callback(ctx)


class AfterStage(PipelineHook):
    """Convenience hook that fires after each stage with its outcome."""

    def __init__(
        self,
        callback: Callable[
            [RequestContext, PipelineStage, Outcome], Awaitable[None]
        ],
    ) -> None:
        self._callback = callback

    async def on_stage(
        self, ctx: RequestContext, stage: PipelineStage, outcome: Outcome
    ) -> None:
        await self._callback(ctx, stage, outcome)


class LoggingHook(PipelineHook):
    """Logs every stage outcome against the request path."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    async def on_stage(
        self, ctx: RequestContext, stage: PipelineStage, outcome: Outcome
    ) -> None:
        path = ctx.request.url.path
        if isinstance(outcome, Continue):
            self._log.debug("%s %s: continue", path, stage.name)
        elif isinstance(outcome, Redirect):
            self._log.info("%s %s: redirect to %s", path, stage.name, outcome.location)
        elif isinstance(outcome, Fail):
            self._log.warning(
                "%s %s: %s (%s)", path, stage.name, outcome.kind.value, outcome.detail
            )
