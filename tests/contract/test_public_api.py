"""Contract tests — verify all public symbols are importable from top-level."""

from __future__ import annotations

import pytest

import listing_pipeline

PUBLIC_SYMBOLS = [
    # Core
    "Pipeline",
    "PipelineStage",
    "StageCategory",
    "RequestContext",
    "pipeline_dependency",
    "merge_pipelines",
    "OverrideStage",
    "DisableStage",
    # Outcomes
    "Continue",
    "Redirect",
    "Fail",
    "ErrorKind",
    # Exceptions and reporting
    "PipelineException",
    "PipelineAbort",
    "ValidationError",
    "AuthenticationFailed",
    "NotFoundError",
    "UpstreamError",
    "PipelineInternalError",
    "report_failure",
    "register_error_handlers",
    # Hooks and trace
    "PipelineHook",
    "BeforePipeline",
    "AfterPipeline",
    "AfterStage",
    "LoggingHook",
    "PipelineTrace",
    "TraceEntry",
    # Stages
    "BearerAuthentication",
    "AllowAnonymous",
    "GeocodeAddress",
    "GoogleGeocoder",
    "GeocodingProvider",
    "ValidateBody",
    "FieldRule",
    "validate_fields",
    # Guard and config
    "RouteGuard",
    "RouteGuardMiddleware",
    "SECURITY_HEADERS",
    "PROTECTED_PREFIXES",
    "Settings",
]


class TestPublicAPIContract:
    def test_all_symbols_exported(self) -> None:
        for symbol in PUBLIC_SYMBOLS:
            assert hasattr(listing_pipeline, symbol), symbol
            assert symbol in listing_pipeline.__all__, symbol

    def test_stage_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            listing_pipeline.PipelineStage()  # type: ignore[abstract]

    def test_request_context_fields(self) -> None:
        from dataclasses import fields

        names = [f.name for f in fields(listing_pipeline.RequestContext)]
        assert names == ["request", "body", "user", "state"]

    def test_pipeline_dependency_returns_callable(self) -> None:
        dep = listing_pipeline.pipeline_dependency(listing_pipeline.Pipeline())
        assert callable(dep)

    def test_exception_hierarchy(self) -> None:
        from listing_pipeline import (
            AuthenticationFailed,
            NotFoundError,
            PipelineAbort,
            PipelineException,
            PipelineInternalError,
            UpstreamError,
            ValidationError,
        )

        for cls in (ValidationError, AuthenticationFailed, NotFoundError, UpstreamError):
            assert issubclass(cls, PipelineAbort)
        assert issubclass(PipelineAbort, PipelineException)
        assert not issubclass(PipelineInternalError, PipelineAbort)

    def test_stage_categories(self) -> None:
        assert [c.value for c in listing_pipeline.StageCategory] == [
            "authentication",
            "validation",
            "enrichment",
            "custom",
        ]
