"""Per-domain availability aggregator.

Keeps cumulative success/total counters for every observed domain and
computes the reported availability percentage. Counters are never reset or
removed while the process runs, so the percentage is a running average since
start rather than an instantaneous reading.

All access goes through a single lock so that concurrent checks sharing a
domain never lose an increment, and readers always see a consistent pair.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass

from availability_monitor.middleware.error_handler import DomainNotFoundError


def compute_availability(success: int, total: int) -> int:
    """Integer availability percentage, truncated toward zero.

    ``total == 0`` reports 0 rather than dividing by zero. 2 out of 3
    reports 66, never 67.
    """
    if total <= 0:
        return 0
    return (100 * success) // total


@dataclass
class DomainStats:
    """Cumulative counters for one domain. Invariant: 0 <= success <= total."""

    success: int = 0
    total: int = 0

    @property
    def availability(self) -> int:
        return compute_availability(self.success, self.total)


class AvailabilityAggregator:
    """Owns the DomainKey → DomainStats mapping for one monitoring run.

    A fresh aggregator starts with every counter at zero; nothing is persisted
    across runs.
    """

    def __init__(self) -> None:
        self._stats: dict[str, DomainStats] = {}
        self._lock = threading.Lock()

    def _get_or_create(self, domain: str) -> DomainStats:
        """Get existing stats for a domain or create a zeroed entry. Caller holds the lock."""
        stats = self._stats.get(domain)
        if stats is None:
            stats = self._stats[domain] = DomainStats()
        return stats

    def ensure_domain(self, domain: str) -> None:
        """Register *domain* with zero counters if it is not yet known."""
        with self._lock:
            self._get_or_create(domain)

    def ensure_domains(self, domains: Iterable[str]) -> None:
        with self._lock:
            for domain in domains:
                self._get_or_create(domain)

    def record(self, domain: str, *, success: bool) -> None:
        """Record one attempted check against *domain*.

        ``total`` always increments; ``success`` only when the check passed.
        Unknown domains are created on the fly.
        """
        with self._lock:
            stats = self._get_or_create(domain)
            stats.total += 1
            if success:
                stats.success += 1

    def get_stats(self, domain: str) -> DomainStats:
        """Return a copy of the counters for *domain*.

        Raises:
            DomainNotFoundError: If the domain has never been registered.
        """
        with self._lock:
            stats = self._stats.get(domain)
            if stats is None:
                raise DomainNotFoundError(f"No availability data for domain '{domain}'", domain=domain)
            return DomainStats(success=stats.success, total=stats.total)

    def availability(self, domain: str) -> int:
        return self.get_stats(domain).availability

    def snapshot(self) -> dict[str, DomainStats]:
        """Copy of every domain's counters, in first-seen order."""
        with self._lock:
            return {
                domain: DomainStats(success=stats.success, total=stats.total)
                for domain, stats in self._stats.items()
            }

    def domains(self) -> list[str]:
        with self._lock:
            return list(self._stats)

    def __contains__(self, domain: object) -> bool:
        with self._lock:
            return domain in self._stats

    def __len__(self) -> int:
        with self._lock:
            return len(self._stats)
