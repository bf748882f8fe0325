"""Tests for OverrideStage, DisableStage, and merge_pipelines."""

from __future__ import annotations

from listing_pipeline.composition import (
    DisableStage,
    OverrideStage,
    apply_layer,
    merge_pipelines,
    ordered_stages,
)
from listing_pipeline.context import RequestContext
from listing_pipeline.hooks import LoggingHook
from listing_pipeline.outcome import Continue, Outcome
from listing_pipeline.pipeline import Pipeline
from listing_pipeline.stage import PipelineStage, StageCategory


class _AuthStub(PipelineStage):
    category = StageCategory.AUTHENTICATION

    async def run(self, ctx: RequestContext) -> Outcome:
        return Continue(ctx)


class _ValidationStub(PipelineStage):
    category = StageCategory.VALIDATION

    async def run(self, ctx: RequestContext) -> Outcome:
        return Continue(ctx)


class _EnrichStub(PipelineStage):
    category = StageCategory.ENRICHMENT

    async def run(self, ctx: RequestContext) -> Outcome:
        return Continue(ctx)


class TestDirectives:
    def test_override_derives_category(self) -> None:
        stage = _AuthStub()
        override = OverrideStage(stage)
        assert override.stage is stage
        assert override.category == StageCategory.AUTHENTICATION

    def test_disable_stores_category(self) -> None:
        assert DisableStage(StageCategory.ENRICHMENT).category == StageCategory.ENRICHMENT


class TestMergePipelines:
    def test_app_and_route_stages_combined(self) -> None:
        auth = _AuthStub()
        validate = _ValidationStub()
        merged = merge_pipelines(Pipeline(auth), Pipeline(validate))
        assert merged.resolve().stages == (auth, validate)

    def test_last_writer_wins_per_category(self) -> None:
        first = _AuthStub()
        second = _AuthStub()
        merged = merge_pipelines(Pipeline(first), Pipeline(second))
        assert merged.resolve().stages == (second,)

    def test_group_replaced_as_a_whole(self) -> None:
        v1, v2, v3 = _ValidationStub(), _ValidationStub(), _ValidationStub()
        merged = merge_pipelines(Pipeline(v1, v2), Pipeline(v3))
        assert merged.resolve().stages == (v3,)

    def test_override_replaces_category(self) -> None:
        replacement = _AuthStub()
        merged = merge_pipelines(
            Pipeline(_AuthStub(), _EnrichStub()), Pipeline(OverrideStage(replacement))
        )
        stages = merged.resolve().stages
        assert stages[0] is replacement
        assert len(stages) == 2

    def test_disable_removes_category(self) -> None:
        merged = merge_pipelines(
            Pipeline(_AuthStub(), _EnrichStub()),
            Pipeline(DisableStage(StageCategory.ENRICHMENT)),
        )
        categories = [s.category for s in merged.resolve().stages]
        assert categories == [StageCategory.AUTHENTICATION]

    def test_disable_then_override_re_adds(self) -> None:
        auth = _AuthStub()
        merged = merge_pipelines(
            Pipeline(_AuthStub()),
            Pipeline(DisableStage(StageCategory.AUTHENTICATION)),
            Pipeline(OverrideStage(auth)),
        )
        assert merged.resolve().stages == (auth,)

    def test_merging_zero_pipelines_returns_empty(self) -> None:
        assert merge_pipelines().resolve().stages == ()

    def test_hooks_and_debug_carried_over(self) -> None:
        hook = LoggingHook()
        merged = merge_pipelines(
            Pipeline(_AuthStub()).add_hook(hook), Pipeline(_EnrichStub(), debug=True)
        )
        resolved = merged.resolve()
        assert resolved.hooks == (hook,)
        assert resolved.debug is True

    def test_hooks_from_every_input_kept_in_order(self) -> None:
        first, second = LoggingHook(), LoggingHook()
        merged = merge_pipelines(
            Pipeline(_AuthStub()).add_hook(first), Pipeline(_EnrichStub()).add_hook(second)
        )
        assert merged.resolve().hooks == (first, second)

    def test_nested_pipeline_contributes_its_resolved_stages(self) -> None:
        validate = _ValidationStub()
        inner = Pipeline(validate, _EnrichStub(), DisableStage(StageCategory.ENRICHMENT))
        merged = merge_pipelines(Pipeline(_AuthStub()), Pipeline(inner))
        assert [s.category for s in merged.resolve().stages] == [
            StageCategory.AUTHENTICATION,
            StageCategory.VALIDATION,
        ]
        assert merged.resolve().stages[1] is validate


class TestPlanHelpers:
    def test_apply_layer_replaces_contributed_categories_only(self) -> None:
        auth, old, new = _AuthStub(), _ValidationStub(), _ValidationStub()
        plan = {StageCategory.AUTHENTICATION: [auth], StageCategory.VALIDATION: [old]}
        apply_layer(plan, [new])
        assert plan == {
            StageCategory.AUTHENTICATION: [auth],
            StageCategory.VALIDATION: [new],
        }

    def test_ordered_stages_follows_category_order(self) -> None:
        auth, enrich = _AuthStub(), _EnrichStub()
        plan = {StageCategory.ENRICHMENT: [enrich], StageCategory.AUTHENTICATION: [auth]}
        assert ordered_stages(plan) == (auth, enrich)
