"""PipelineStage abstract base class and StageCategory enum."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar

from listing_pipeline.context import RequestContext
from listing_pipeline.outcome import Outcome


class StageCategory(Enum):
    """Stage categories, defining strict execution order."""

    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    ENRICHMENT = "enrichment"
    CUSTOM = "custom"

    @property
    def order(self) -> int:
        _ORDER = {
            "authentication": 1,
            "validation": 2,
            "enrichment": 3,
            "custom": 4,
        }
        return _ORDER[self.value]


class PipelineStage(ABC):
    """Base abstraction for all processing units in a pipeline.

    ``run`` either returns ``Continue`` (after mutating the context in place)
    or a terminal ``Fail`` / ``Redirect``. Stages hold no per-request state.
    """

    category: ClassVar[StageCategory]

    @abstractmethod
    async def run(self, ctx: RequestContext) -> Outcome: ...

    @property
    def name(self) -> str:
        return type(self).__name__
