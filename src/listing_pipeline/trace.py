"""PipelineTrace and TraceEntry — debug execution recording."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from listing_pipeline.exceptions import PipelineException
from listing_pipeline.outcome import Outcome
from listing_pipeline.stage import StageCategory


@dataclass(frozen=True)
class TraceEntry:
    """Single stage execution record."""

    stage_name: str
    category: StageCategory
    duration_ms: float
    outcome: Literal["CONTINUE", "REDIRECT", "FAILED"]
    reason: str | None = None


@dataclass
class PipelineTrace:
    """Structured record of a single pipeline execution."""

    entries: list[TraceEntry] = field(default_factory=list)
    total_duration_ms: float = 0.0
    outcome: Literal["OK", "REDIRECTED", "FAILED", "ERROR"] = "OK"
    final: Outcome | None = None
    error: PipelineException | None = None
