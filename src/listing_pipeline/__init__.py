"""Listing Pipeline - request enrichment pipelines and edge guard for a listing API."""

from listing_pipeline.composition import DisableStage, OverrideStage, merge_pipelines
from listing_pipeline.config import Settings, get_settings
from listing_pipeline.context import RequestContext
from listing_pipeline.dependency import pipeline_dependency
from listing_pipeline.errors import register_error_handlers, report_failure
from listing_pipeline.exceptions import (
    AuthenticationFailed,
    NotFoundError,
    PipelineAbort,
    PipelineException,
    PipelineInternalError,
    UpstreamError,
    ValidationError,
)
from listing_pipeline.guard import (
    DEFAULT_MATCHER,
    PROTECTED_PREFIXES,
    SECURITY_HEADERS,
    RouteGuard,
    RouteGuardMiddleware,
)
from listing_pipeline.hooks import (
    AfterPipeline,
    AfterStage,
    BeforePipeline,
    LoggingHook,
    PipelineHook,
)
from listing_pipeline.outcome import Continue, ErrorKind, Fail, Outcome, Redirect
from listing_pipeline.pipeline import Pipeline
from listing_pipeline.stage import PipelineStage, StageCategory
from listing_pipeline.stages.authentication import AllowAnonymous, BearerAuthentication
from listing_pipeline.stages.geocoding import (
    GeocodeAddress,
    GeocodingError,
    GeocodingProvider,
    GoogleGeocoder,
)
from listing_pipeline.stages.validation import FieldRule, ValidateBody, validate_fields
from listing_pipeline.trace import PipelineTrace, TraceEntry

__all__ = [
    "DEFAULT_MATCHER",
    "PROTECTED_PREFIXES",
    "SECURITY_HEADERS",
    "AfterPipeline",
    "AfterStage",
    "AllowAnonymous",
    "AuthenticationFailed",
    "BearerAuthentication",
    "BeforePipeline",
    "Continue",
    "DisableStage",
    "ErrorKind",
    "Fail",
    "FieldRule",
    "GeocodeAddress",
    "GeocodingError",
    "GeocodingProvider",
    "GoogleGeocoder",
    "LoggingHook",
    "NotFoundError",
    "Outcome",
    "OverrideStage",
    "Pipeline",
    "PipelineAbort",
    "PipelineException",
    "PipelineHook",
    "PipelineInternalError",
    "PipelineStage",
    "PipelineTrace",
    "Redirect",
    "RequestContext",
    "RouteGuard",
    "RouteGuardMiddleware",
    "Settings",
    "StageCategory",
    "TraceEntry",
    "UpstreamError",
    "ValidateBody",
    "ValidationError",
    "get_settings",
    "merge_pipelines",
    "pipeline_dependency",
    "register_error_handlers",
    "report_failure",
    "validate_fields",
]
