"""FastAPI application exposing the flag lookup endpoint."""

from __future__ import annotations

import sys
import uuid

import structlog
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from . import __version__
from .config import LogSection, ServiceConfig, load_config
from .exceptions import ConfigError
from .gcs import GcsBlobStore
from .handler import INTERNAL_ERROR_BODY, FlagRequestHandler, cors_headers
from .health import HealthStatus, liveness, readiness
from .http_store import HttpBlobStore
from .loader import FlagStoreLoader
from .logger import configure_logging
from .storage import BlobStore

logger = structlog.stdlib.get_logger(__name__)

X_REQUEST_ID = "X-Request-ID"

# Anything but OPTIONS goes to the lookup handler; POST is expected, not enforced.
LOOKUP_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


def build_store(config: ServiceConfig) -> BlobStore:
    """Pick the blob store for the configured storage section."""
    if config.storage.base_url:
        return HttpBlobStore(
            config.storage.base_url,
            timeout_seconds=config.storage.timeout_seconds,
        )
    return GcsBlobStore(timeout_seconds=config.storage.timeout_seconds)


def create_app(config: ServiceConfig, store: BlobStore | None = None) -> FastAPI:
    """Wire loader, handler and routes for ``config``.

    ``store`` overrides the blob store chosen by ``build_store``.
    """
    loader = FlagStoreLoader(
        store if store is not None else build_store(config),
        config.storage.bucket_name,
        config.storage.data_filename,
        timeout_seconds=config.storage.timeout_seconds,
    )
    handler = FlagRequestHandler(loader, config.access_control_allow_origin)
    cors = cors_headers(config.access_control_allow_origin)

    app = FastAPI(title="market-flags", version=__version__)
    app.state.loader = loader
    app.state.handler = handler

    @app.middleware("http")
    async def request_context(request: Request, call_next):  # type: ignore[no-untyped-def]
        request_id = request.headers.get(X_REQUEST_ID) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("unhandled error while serving request")
            response = Response(
                content=INTERNAL_ERROR_BODY,
                status_code=500,
                media_type="text/plain",
                headers=cors,
            )
        response.headers[X_REQUEST_ID] = request_id
        return response

    @app.api_route("/", methods=LOOKUP_METHODS)
    async def get_flags(request: Request) -> Response:
        outcome = await handler.handle(await request.body())
        return Response(
            content=outcome.body,
            status_code=outcome.status_code,
            media_type=outcome.media_type,
            headers=outcome.headers,
        )

    @app.options("/")
    async def preflight() -> Response:
        return Response(status_code=204, headers=cors)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return liveness()

    @app.get("/readyz")
    async def readyz() -> JSONResponse:
        report = await readiness(loader)
        status_code = 200 if report.status == HealthStatus.HEALTHY else 503
        return JSONResponse(report.to_dict(), status_code=status_code, headers=cors)

    return app


def main() -> None:
    """Console entry point: load configuration and serve with uvicorn."""
    try:
        config = load_config()
    except ConfigError as e:
        configure_logging(LogSection()).error("invalid configuration", code=e.code, error=str(e))
        sys.exit(1)

    configure_logging(config.log).info(
        "starting market-flags",
        host=config.server.host,
        port=config.server.port,
        bucket=config.storage.bucket_name,
        object=config.storage.data_filename,
    )
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )
