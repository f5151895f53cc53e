"""Availability statistics for the monitor."""

from availability_monitor.stats.aggregator import (
    AvailabilityAggregator,
    DomainStats,
    compute_availability,
)

__all__ = [
    "AvailabilityAggregator",
    "DomainStats",
    "compute_availability",
]
