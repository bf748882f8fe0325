"""Pipeline composition — merge_pipelines(), OverrideStage, DisableStage."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Union

from listing_pipeline.stage import PipelineStage, StageCategory

if TYPE_CHECKING:
    from listing_pipeline.pipeline import Pipeline

StagePlan = dict[StageCategory, list[PipelineStage]]


class OverrideStage:
    """Directive: the wrapped stage becomes the only stage of its category."""

    def __init__(self, stage: PipelineStage) -> None:
        self.stage = stage
        self.category = stage.category


class DisableStage:
    """Directive: drop every stage of ``category`` contributed so far."""

    def __init__(self, category: StageCategory) -> None:
        self.category = category


Directive = Union[OverrideStage, DisableStage]


def apply_layer(plan: StagePlan, items: Iterable[object]) -> None:
    """Fold one pipeline's items into ``plan``.

    Each category the layer contributes stages for replaces that category in
    the plan as a whole. Directives run after the layer's stages, so an
    override or disable always has the final word within its layer. A nested
    pipeline is resolved first, which keeps its own directives local to it.
    """
    from listing_pipeline.pipeline import Pipeline

    contributed: StagePlan = {}
    directives: list[Directive] = []

    for item in items:
        if isinstance(item, (OverrideStage, DisableStage)):
            directives.append(item)
        elif isinstance(item, Pipeline):
            for stage in item.resolve().stages:
                contributed.setdefault(stage.category, []).append(stage)
        elif isinstance(item, PipelineStage):
            contributed.setdefault(item.category, []).append(item)
        else:
            raise TypeError(f"Cannot add {type(item).__name__} to a pipeline")

    plan.update(contributed)

    for directive in directives:
        if isinstance(directive, OverrideStage):
            plan[directive.category] = [directive.stage]
        else:
            plan.pop(directive.category, None)


def ordered_stages(plan: StagePlan) -> tuple[PipelineStage, ...]:
    """Flatten a plan into execution order: by category, then registration."""
    return tuple(
        stage
        for category in sorted(plan, key=lambda c: c.order)
        for stage in plan[category]
    )


def merge_pipelines(*pipelines: Pipeline) -> Pipeline:
    """Layer pipelines left to right, last writer winning per category.

    Used to put an app-wide authentication pipeline underneath route-level
    validation and enrichment. Hooks of every input run, in input order, and
    ``debug`` is on if any input has it on.
    """
    from listing_pipeline.pipeline import Pipeline

    plan: StagePlan = {}
    merged = Pipeline(debug=any(p.debug for p in pipelines))
    for pipeline in pipelines:
        apply_layer(plan, pipeline.items)
        for hook in pipeline.hooks:
            merged.add_hook(hook)
    return merged.add(*ordered_stages(plan))
