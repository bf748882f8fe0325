"""FastAPI application wiring the guard, pipelines and listing routes."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, FastAPI

from listing_pipeline._types import DecodeCallback
from listing_pipeline.composition import merge_pipelines
from listing_pipeline.config import Settings, get_settings
from listing_pipeline.context import RequestContext
from listing_pipeline.dependency import pipeline_dependency
from listing_pipeline.errors import register_error_handlers
from listing_pipeline.exceptions import AuthenticationFailed
from listing_pipeline.guard import RouteGuardMiddleware
from listing_pipeline.hooks import LoggingHook
from listing_pipeline.pipeline import Pipeline
from listing_pipeline.rules import (
    ADD_PROPERTY_RULES,
    USER_PREFERENCES_RULES,
    WISHLIST_RULES,
)
from listing_pipeline.stages.authentication import BearerAuthentication
from listing_pipeline.stages.geocoding import (
    GeocodeAddress,
    GeocodingProvider,
    GoogleGeocoder,
)
from listing_pipeline.stages.validation import ValidateBody

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=_LOG_FORMAT)
    logging.getLogger("listing_pipeline").setLevel(level)


async def _reject_token(token: str) -> Any:
    raise AuthenticationFailed("No token decoder configured")


def create_app(
    settings: Settings | None = None,
    *,
    geocoder: GeocodingProvider | None = None,
    decode_token: DecodeCallback | None = None,
) -> FastAPI:
    """Build the listing API.

    ``decode_token`` verifies bearer tokens and returns the user; without it
    every authenticated route answers 401. ``geocoder`` defaults to the
    Google Geocoding API keyed from settings.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    provider = geocoder or GoogleGeocoder(
        settings.google_api_key,
        url=settings.geocode_url,
        timeout=settings.geocode_timeout,
    )

    app = FastAPI(title="Listing API", debug=settings.debug)
    app.add_middleware(RouteGuardMiddleware, guard=settings.route_guard())
    register_error_handlers(app)

    authenticated = Pipeline(
        BearerAuthentication(decode_token or _reject_token),
        debug=settings.debug,
    ).add_hook(LoggingHook())

    geocode_flow = Pipeline(GeocodeAddress(provider)).add_hook(LoggingHook())
    add_property_flow = merge_pipelines(
        authenticated, Pipeline(ValidateBody(ADD_PROPERTY_RULES))
    )
    preferences_flow = merge_pipelines(
        authenticated, Pipeline(ValidateBody(USER_PREFERENCES_RULES))
    )
    wishlist_flow = merge_pipelines(
        authenticated, Pipeline(ValidateBody(WISHLIST_RULES))
    )

    properties = APIRouter(prefix="/api/properties", tags=["properties"])
    users = APIRouter(prefix="/api/users", tags=["users"])

    @properties.post("/geocode")
    async def geocode(
        ctx: RequestContext = Depends(pipeline_dependency(geocode_flow)),  # noqa: B008
    ) -> dict[str, Any]:
        return {"success": True, "data": {"coordinates": ctx.body["coordinates"]}}

    @properties.post("/add-property", status_code=201)
    async def add_property(
        ctx: RequestContext = Depends(pipeline_dependency(add_property_flow)),  # noqa: B008
    ) -> dict[str, Any]:
        return {"success": True, "data": ctx.body}

    @users.put("/preferences")
    async def update_preferences(
        ctx: RequestContext = Depends(pipeline_dependency(preferences_flow)),  # noqa: B008
    ) -> dict[str, Any]:
        return {
            "success": True,
            "message": "Preferences updated successfully",
            "data": ctx.body,
        }

    @users.post("/wishlist", status_code=201)
    async def add_wishlist(
        ctx: RequestContext = Depends(pipeline_dependency(wishlist_flow)),  # noqa: B008
    ) -> dict[str, Any]:
        return {"success": True, "data": ctx.body}

    app.include_router(properties)
    app.include_router(users)

    logger.info("Listing API configured (debug=%s)", settings.debug)
    return app
