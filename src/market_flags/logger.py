"""Logging setup: structlog events and stdlib records (uvicorn) share one renderer."""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from . import __version__
from .config import LogSection

SERVICE_NAME = "market-flags"
HANDLER_NAME = "market_flags"

# uvicorn installs its own handlers unless log_config=None; these propagate to root instead
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def add_service_info(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Stamp every event with the service name and version."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", __version__)
    return event_dict


def _renderer(format: str) -> Processor:
    if format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(log: LogSection) -> structlog.stdlib.BoundLogger:
    """Configure structlog and the root logger from the ``log`` section.

    Replaces a handler installed by an earlier call, so reconfiguring is safe.
    """
    level = logging.getLevelNamesMapping().get(log.level, logging.INFO)

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    structlog.configure(
        processors=[
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    final: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if log.format == "json":
        final.append(structlog.processors.format_exc_info)
    final.append(_renderer(log.format))

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=shared, processors=final)
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    return structlog.stdlib.get_logger("market_flags")
