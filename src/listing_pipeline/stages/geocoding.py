"""Geocoding enrichment — resolves a street address to coordinates."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from listing_pipeline.context import RequestContext
from listing_pipeline.outcome import Continue, ErrorKind, Fail, Outcome
from listing_pipeline.stage import PipelineStage, StageCategory

logger = logging.getLogger(__name__)

DEFAULT_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

# Order matters: the provider reads the query as street, city, region.
ADDRESS_FIELDS = ("streetAddress", "city", "state")

MISSING_ADDRESS_DETAIL = "state, city, and street address are required."
NO_RESULTS_DETAIL = "No results found!."

# Provider statuses meaning "nothing matched" rather than "provider broke".
_EMPTY_STATUSES = frozenset({"OK", "ZERO_RESULTS"})


class GeocodingError(Exception):
    """Raised by a provider when the lookup itself could not be performed."""


@runtime_checkable
class GeocodingProvider(Protocol):
    """Anything that turns a free-text address into a provider JSON reply."""

    async def __call__(self, address: str) -> dict[str, Any]: ...


class Location(BaseModel):
    lat: float
    lng: float


class Geometry(BaseModel):
    location: Location


class GeocodeResult(BaseModel):
    geometry: Geometry


class GeocodeReply(BaseModel):
    """The subset of a Google Geocoding reply the stage depends on."""

    status: str
    results: list[GeocodeResult] = Field(default_factory=list)


class GoogleGeocoder:
    """Google Geocoding API client built on httpx.

    Pass ``client`` to share a connection pool (or a mock transport);
    otherwise a short-lived client is opened per lookup.
    """

    def __init__(
        self,
        api_key: str,
        *,
        url: str = DEFAULT_GEOCODE_URL,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._timeout = timeout
        self._client = client

    async def __call__(self, address: str) -> dict[str, Any]:
        params = {"address": address, "key": self._api_key}
        if self._client is not None:
            response = await self._client.get(self._url, params=params)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self._url, params=params)

        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise GeocodingError("Geocoding reply is not a JSON object")
        return data


def compose_address(body: dict[str, Any]) -> str | None:
    """Join street, city and state into one query.

    Returns None when any part is absent, blank, or not a string.
    """
    parts = []
    for field in ADDRESS_FIELDS:
        value = body.get(field)
        if not isinstance(value, str) or not value.strip():
            return None
        parts.append(value.strip())
    return ", ".join(parts)


class GeocodeAddress(PipelineStage):
    """Attaches ``coordinates`` to the body from the first geocoding result."""

    category = StageCategory.ENRICHMENT

    def __init__(
        self, provider: GeocodingProvider, *, target: str = "coordinates"
    ) -> None:
        self._provider = provider
        self._target = target

    async def run(self, ctx: RequestContext) -> Outcome:
        address = compose_address(ctx.body)
        if address is None:
            return Fail(ErrorKind.VALIDATION, MISSING_ADDRESS_DETAIL)

        try:
            raw = await self._provider(address)
        except Exception as exc:
            logger.error(
                "Geocoding request failed for %r: %s: %s",
                address,
                type(exc).__name__,
                exc,
            )
            return Fail(ErrorKind.UPSTREAM, "Geocoding service unavailable")

        try:
            reply = GeocodeReply.model_validate(raw)
        except SchemaError as exc:
            logger.error("Unexpected geocoding reply shape: %s", exc)
            return Fail(ErrorKind.UPSTREAM, "Unexpected geocoding response")

        if reply.status == "OK" and reply.results:
            location = reply.results[0].geometry.location
            ctx.body[self._target] = {"lat": location.lat, "lng": location.lng}
            return Continue(ctx)

        if reply.status in _EMPTY_STATUSES:
            return Fail(ErrorKind.NOT_FOUND, NO_RESULTS_DETAIL)

        logger.error("Geocoding provider returned status %s", reply.status)
        return Fail(ErrorKind.UPSTREAM, f"Geocoding failed with status {reply.status}")
