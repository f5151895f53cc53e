"""Health check outcome types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CheckOutcome(str, Enum):
    """Classification of a single health check."""

    SUCCESS = "success"
    HTTP_FAILURE = "http_failure"  # non-2xx, or 2xx too slow
    TRANSPORT_ERROR = "transport_error"  # DNS, refused, TLS, timeout
    CONSTRUCTION_SKIPPED = "construction_skipped"  # never sent, not counted


@dataclass(frozen=True)
class CheckResult:
    """Result of one probe against one endpoint."""

    endpoint_name: str
    url: str
    domain: str
    outcome: CheckOutcome
    status_code: int | None = None
    latency_ms: float | None = None
    error: str | None = None

    @property
    def is_success(self) -> bool:
        return self.outcome is CheckOutcome.SUCCESS

    @property
    def counted(self) -> bool:
        """Whether this check was recorded against the domain's totals."""
        return self.outcome is not CheckOutcome.CONSTRUCTION_SKIPPED
