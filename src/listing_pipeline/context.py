"""RequestContext — per-request state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from starlette.requests import Request


@dataclass
class RequestContext:
    """Per-request data bag threaded through pipeline stages.

    ``body`` holds the parsed request fields; enrichment stages add derived
    fields to it (e.g. ``coordinates``). ``state`` carries anything else a
    stage wants to hand downstream.
    """

    request: Request
    body: dict[str, Any] = field(default_factory=dict)
    user: Any | None = None
    state: dict[str, Any] = field(default_factory=dict)
