"""Status endpoints — a read-only view of the running monitor.

- GET /health — scheduler state and counts
- GET /availability — availability of every known domain
- GET /availability/{domain} — availability of one domain (404 if unknown)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from availability_monitor.models.responses import ApiResponse, DomainAvailability

if TYPE_CHECKING:
    from availability_monitor.services.scheduler import PollingScheduler
    from availability_monitor.stats.aggregator import AvailabilityAggregator


def create_status_router(
    *,
    aggregator: AvailabilityAggregator,
    scheduler: PollingScheduler | None = None,
) -> APIRouter:
    """Factory that creates the status router with injected dependencies."""

    status_router = APIRouter(tags=["status"])

    @status_router.get("/health")
    async def health() -> dict:
        """Service health with scheduler statistics."""
        scheduler_stats = scheduler.get_stats() if scheduler else {}
        return ApiResponse(
            success=True,
            data={
                "status": "healthy",
                "domains": len(aggregator),
                "scheduler": scheduler_stats,
            },
        ).model_dump()

    @status_router.get("/availability")
    async def availability() -> dict:
        domains = [
            DomainAvailability(
                domain=domain,
                success=stats.success,
                total=stats.total,
                availability=stats.availability,
            ).model_dump()
            for domain, stats in aggregator.snapshot().items()
        ]
        return ApiResponse(success=True, data={"domains": domains}).model_dump()

    @status_router.get("/availability/{domain}")
    async def domain_availability(domain: str) -> dict:
        # Raises DomainNotFoundError → 404 envelope
        stats = aggregator.get_stats(domain)
        return ApiResponse(
            success=True,
            data=DomainAvailability(
                domain=domain,
                success=stats.success,
                total=stats.total,
                availability=stats.availability,
            ).model_dump(),
        ).model_dump()

    return status_router
