"""Public models for the availability monitor."""

from availability_monitor.models.endpoint import Endpoint
from availability_monitor.models.outcome import CheckOutcome, CheckResult
from availability_monitor.models.responses import ApiResponse, DomainAvailability

__all__ = [
    "ApiResponse",
    "CheckOutcome",
    "CheckResult",
    "DomainAvailability",
    "Endpoint",
]
