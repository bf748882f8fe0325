"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

# Verifies a bearer token and returns the user it belongs to
DecodeCallback = Callable[[str], Awaitable[Any]]
