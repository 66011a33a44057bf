"""Liveness and readiness checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .exceptions import FlagStoreError
from .loader import FlagStoreLoader


class HealthStatus(str, Enum):
    """Health status enum."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """Result of a single check."""

    status: HealthStatus
    message: str | None = None


@dataclass
class ReadinessReport:
    """Aggregated readiness result."""

    status: HealthStatus
    checks: dict[str, CheckResult] = field(default_factory=dict)
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "checks": {
                name: {"status": r.status.value, "message": r.message}
                for name, r in self.checks.items()
            },
            "timestamp": self.timestamp.isoformat(),
        }


def liveness() -> dict[str, str]:
    """Return a simple liveness response."""
    return {"status": "ok"}


async def readiness(loader: FlagStoreLoader) -> ReadinessReport:
    """Check that the flag dataset can be fetched and decoded."""
    try:
        flag_set = await loader.load()
    except FlagStoreError as e:
        return ReadinessReport(
            status=HealthStatus.UNHEALTHY,
            checks={"flag_store": CheckResult(HealthStatus.UNHEALTHY, str(e))},
        )
    return ReadinessReport(
        status=HealthStatus.HEALTHY,
        checks={
            "flag_store": CheckResult(
                HealthStatus.HEALTHY,
                f"{len(flag_set.feature_flags)} flags at {loader.location}",
            )
        },
    )
