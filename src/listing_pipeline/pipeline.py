"""Pipeline class — ordered container and execution plan for PipelineStages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from listing_pipeline.composition import (
    DisableStage,
    OverrideStage,
    StagePlan,
    apply_layer,
    ordered_stages,
)
from listing_pipeline.stage import PipelineStage

if TYPE_CHECKING:
    from listing_pipeline.hooks import PipelineHook

PipelineItem = Union[PipelineStage, "Pipeline", OverrideStage, DisableStage]


@dataclass(frozen=True)
class ResolvedPipeline:
    """What a dependency executes: stages in run order plus hooks."""

    stages: tuple[PipelineStage, ...]
    hooks: tuple[PipelineHook, ...] = ()
    debug: bool = False


class Pipeline:
    """Stages for one route, run authentication first and custom stages last.

    Items may be stages, nested pipelines or composition directives. The
    run order is computed once by ``resolve()`` and recomputed only after
    ``add`` or ``add_hook``.
    """

    def __init__(self, *items: PipelineItem, debug: bool = False) -> None:
        self._items: list[PipelineItem] = list(items)
        self._hooks: list[PipelineHook] = []
        self._debug = debug
        self._resolved: ResolvedPipeline | None = None

    @property
    def items(self) -> tuple[PipelineItem, ...]:
        return tuple(self._items)

    @property
    def hooks(self) -> tuple[PipelineHook, ...]:
        return tuple(self._hooks)

    @property
    def debug(self) -> bool:
        return self._debug

    def add(self, *items: PipelineItem) -> Pipeline:
        self._items.extend(items)
        self._resolved = None
        return self

    def add_hook(self, hook: PipelineHook) -> Pipeline:
        self._hooks.append(hook)
        self._resolved = None
        return self

    def resolve(self) -> ResolvedPipeline:
        if self._resolved is None:
            plan: StagePlan = {}
            apply_layer(plan, self._items)
            self._resolved = ResolvedPipeline(
                stages=ordered_stages(plan),
                hooks=tuple(self._hooks),
                debug=self._debug,
            )
        return self._resolved

