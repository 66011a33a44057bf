"""OpenTelemetry instruments for flag lookups."""

from __future__ import annotations

from opentelemetry import metrics

from . import __version__

_meter = metrics.get_meter("market_flags", version=__version__)

flag_requests_total = _meter.create_counter(
    name="flag_requests_total",
    description="Total number of flag lookup requests",
    unit="1",
)

flag_request_errors_total = _meter.create_counter(
    name="flag_request_errors_total",
    description="Total number of failed flag lookup requests",
    unit="1",
)

flag_request_duration_seconds = _meter.create_histogram(
    name="flag_request_duration_seconds",
    description="Flag lookup request duration in seconds",
    unit="s",
)

flag_store_load_duration_seconds = _meter.create_histogram(
    name="flag_store_load_duration_seconds",
    description="Time spent fetching and decoding the flag dataset",
    unit="s",
)
