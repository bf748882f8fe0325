"""Shared pytest fixtures for listing-pipeline tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request

from listing_pipeline.config import Settings


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
            "scheme": "http",
            "server": ("test", 80),
        }
        return Request(scope)

    return _make


@pytest.fixture
def springfield_address() -> dict[str, Any]:
    return {"state": "CA", "city": "Springfield", "streetAddress": "123 Main St"}


@pytest.fixture
def geocode_reply() -> dict[str, Any]:
    """Provider reply with a single result."""
    return {
        "status": "OK",
        "results": [{"geometry": {"location": {"lat": 37.1, "lng": -121.9}}}],
    }


@pytest.fixture
def fake_geocoder(geocode_reply: dict[str, Any]) -> AsyncMock:
    """Async geocoding provider returning ``geocode_reply``."""
    return AsyncMock(return_value=geocode_reply)


@pytest.fixture
def mock_decode() -> AsyncMock:
    """Mock async token decode callback that returns a sample user dict."""
    mock = AsyncMock()
    mock.return_value = {"_id": "user-123", "email": "agent@example.com"}
    return mock


@pytest.fixture
def settings() -> Settings:
    return Settings(google_api_key="test-key", log_level="DEBUG")
