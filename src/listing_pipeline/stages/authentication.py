"""Authentication stages — BearerAuthentication, AllowAnonymous."""

from __future__ import annotations

import logging

from listing_pipeline._types import DecodeCallback
from listing_pipeline.context import RequestContext
from listing_pipeline.outcome import Continue, ErrorKind, Fail, Outcome
from listing_pipeline.stage import PipelineStage, StageCategory

logger = logging.getLogger(__name__)

_UNAUTHORIZED = Fail(ErrorKind.UNAUTHENTICATED, "Unauthorized")


class BearerAuthentication(PipelineStage):
    """Extracts a Bearer token from the Authorization header and decodes it.

    ``decode`` receives the raw token and returns the user; any exception it
    raises (bad signature, expired session, unknown or inactive account)
    rejects the request.
    """

    category = StageCategory.AUTHENTICATION

    def __init__(
        self,
        decode: DecodeCallback,
        *,
        scheme: str = "Bearer",
        header: str = "Authorization",
    ) -> None:
        self._decode = decode
        self._scheme = scheme
        self._header = header

    async def run(self, ctx: RequestContext) -> Outcome:
        auth_value = ctx.request.headers.get(self._header)
        if not auth_value:
            return _UNAUTHORIZED

        parts = auth_value.split(" ", 1)
        if len(parts) != 2 or parts[0] != self._scheme or not parts[1].strip():
            return _UNAUTHORIZED

        try:
            user = await self._decode(parts[1].strip())
        except Exception as exc:
            logger.info("Token rejected: %s", exc)
            return _UNAUTHORIZED
        if user is None:
            return _UNAUTHORIZED

        ctx.user = user
        return Continue(ctx)


class AllowAnonymous(PipelineStage):
    """No-op authentication; use with OverrideStage to open a route."""

    category = StageCategory.AUTHENTICATION

    async def run(self, ctx: RequestContext) -> Outcome:
        return Continue(ctx)
