"""Flag lookup request handling, independent of the HTTP framework."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

import structlog
from pydantic import ValidationError

from .exceptions import ErrorCodes, FlagStoreError, MarketFlagsError
from .loader import FlagStoreLoader
from .metrics import (
    flag_request_duration_seconds,
    flag_request_errors_total,
    flag_requests_total,
)
from .models import RequestBody
from .resolver import resolve

logger = structlog.stdlib.get_logger(__name__)

ALLOW_METHODS = "POST, GET, OPTIONS"
ALLOW_HEADERS = "Content-Type"

BAD_REQUEST_BODY = b"Bad request"
INTERNAL_ERROR_BODY = b"Internal server error"


def cors_headers(allow_origin: str) -> dict[str, str]:
    """Headers attached to every response."""
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
    }


@dataclass
class FlagResponse:
    """Outcome of a lookup, ready to be written by the HTTP layer."""

    status_code: int
    body: bytes
    media_type: str
    headers: dict[str, str] = field(default_factory=dict)


class FlagRequestHandler:
    """Validates a lookup request, loads the dataset and resolves the market."""

    def __init__(self, loader: FlagStoreLoader, allow_origin: str) -> None:
        self._loader = loader
        self._allow_origin = allow_origin

    def _respond(self, status_code: int, body: bytes, media_type: str) -> FlagResponse:
        flag_requests_total.add(1, {"status_code": status_code})
        return FlagResponse(
            status_code=status_code,
            body=body,
            media_type=media_type,
            headers=cors_headers(self._allow_origin),
        )

    def _fail(self, status_code: int, code: str, body: bytes) -> FlagResponse:
        flag_request_errors_total.add(1, {"code": code})
        return self._respond(status_code, body, "text/plain")

    async def handle(self, raw_body: bytes) -> FlagResponse:
        started = time.perf_counter()
        try:
            return await self._handle(raw_body)
        finally:
            flag_request_duration_seconds.record(time.perf_counter() - started)

    async def _handle(self, raw_body: bytes) -> FlagResponse:
        try:
            request = RequestBody.model_validate_json(raw_body)
        except ValidationError as e:
            logger.info("malformed request body", errors=e.error_count())
            return self._fail(400, ErrorCodes.INVALID_REQUEST, BAD_REQUEST_BODY)

        if not request.market:
            logger.info("empty market in request")
            return self._fail(400, ErrorCodes.INVALID_REQUEST, BAD_REQUEST_BODY)

        try:
            flag_set = await self._loader.load()
        except FlagStoreError as e:
            logger.error(
                "flag dataset unavailable",
                code=e.code,
                error=str(e),
                location=self._loader.location,
            )
            return self._fail(500, e.code, INTERNAL_ERROR_BODY)

        try:
            flag = resolve(flag_set, request.market)
        except MarketFlagsError as e:
            logger.info("market not found", market=request.market)
            return self._fail(400, e.code, BAD_REQUEST_BODY)

        logger.info("market resolved", market=request.market)
        return self._respond(200, flag.to_json(), "application/json")
