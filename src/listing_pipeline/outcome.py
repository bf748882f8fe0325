"""Stage outcomes — Continue, Redirect, Fail — and the ErrorKind taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from listing_pipeline.context import RequestContext


class ErrorKind(Enum):
    """Failure classes a stage may report, each bound to an HTTP status."""

    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM: 502,
}


@dataclass(frozen=True)
class Continue:
    """Forward the (possibly mutated) context to the next stage."""

    context: RequestContext | None = None


@dataclass(frozen=True)
class Redirect:
    """Terminate the pipeline and send the client elsewhere."""

    location: str
    status_code: int = 307


@dataclass(frozen=True)
class Fail:
    """Terminate the pipeline with a classified error."""

    kind: ErrorKind
    detail: str
    errors: tuple[dict[str, Any], ...] = ()

    @property
    def status_code(self) -> int:
        return self.kind.status_code


Outcome = Union[Continue, Redirect, Fail]
