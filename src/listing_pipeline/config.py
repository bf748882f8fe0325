"""Application settings loaded from the environment with pydantic-settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from listing_pipeline.guard import (
    AUTH_COOKIE_NAME,
    FALLBACK_PATH,
    PROTECTED_PREFIXES,
    RouteGuard,
)
from listing_pipeline.stages.geocoding import DEFAULT_GEOCODE_URL

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class Settings(BaseSettings):
    """Settings read from ``LISTING_*`` variables or a ``.env`` file.

    List values (``LISTING_PROTECTED_PREFIXES``, ``LISTING_GUARD_MATCHER``)
    are given as JSON arrays.
    """

    model_config = SettingsConfigDict(
        env_prefix="LISTING_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    google_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("LISTING_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
    )
    geocode_url: str = DEFAULT_GEOCODE_URL
    geocode_timeout: float | None = Field(default=None, gt=0)

    auth_cookie_name: str = AUTH_COOKIE_NAME
    protected_prefixes: list[str] = Field(
        default_factory=lambda: list(PROTECTED_PREFIXES)
    )
    guard_matcher: list[str] | None = None
    fallback_path: str = FALLBACK_PATH

    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("fallback_path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("fallback_path must start with '/'")
        return value

    def route_guard(self) -> RouteGuard:
        return RouteGuard(
            protected_prefixes=tuple(self.protected_prefixes),
            fallback_path=self.fallback_path,
            cookie_name=self.auth_cookie_name,
            matcher=tuple(self.guard_matcher) if self.guard_matcher is not None else None,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
