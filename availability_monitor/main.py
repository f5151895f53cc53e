"""FastAPI application entry point with lifespan management.

Startup: read settings, load the endpoint list (fatal on any configuration
error), wire aggregator → executor → reporter → scheduler, mount the status
router, and start the polling loop as a background task.
Shutdown: signal the scheduler to stop and wait for the current step to end.

Serve with any ASGI server, e.g. ``uvicorn availability_monitor.main:app``.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from availability_monitor.config.endpoints import load_endpoints
from availability_monitor.config.settings import MonitorSettings
from availability_monitor.logging_config import configure_logging
from availability_monitor.middleware.error_handler import (
    ConfigurationError,
    register_error_handlers,
)
from availability_monitor.routers.status import create_status_router
from availability_monitor.services.scheduler import build_scheduler
from availability_monitor.stats.aggregator import AvailabilityAggregator

logger = logging.getLogger(__name__)

_SHUTDOWN_TIMEOUT_SECONDS = 5.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    settings: MonitorSettings = app.state.settings

    configure_logging(settings.log_level, settings.log_json)

    if not settings.config_path:
        raise ConfigurationError("No endpoint configuration given (set MONITOR_CONFIG_PATH)")
    endpoints = load_endpoints(settings.config_path)

    aggregator = AvailabilityAggregator()
    scheduler = build_scheduler(settings, endpoints, aggregator)

    app.include_router(create_status_router(aggregator=aggregator, scheduler=scheduler))
    app.state.aggregator = aggregator
    app.state.scheduler = scheduler

    poll_task = asyncio.create_task(
        scheduler.run(settings.max_cycles), name="polling-scheduler"
    )
    logger.info("Availability monitor started with %d endpoints", len(endpoints))

    yield

    # --- Shutdown ---
    logger.info("Shutting down availability monitor…")
    scheduler.stop()
    done, _pending = await asyncio.wait({poll_task}, timeout=_SHUTDOWN_TIMEOUT_SECONDS)
    if not done:
        poll_task.cancel()
        try:
            await poll_task
        except asyncio.CancelledError:
            pass

    logger.info("Availability monitor shut down")


def create_app(settings: MonitorSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Settings are read eagerly so that malformed ``MONITOR_`` environment
    variables fail at import time; the endpoint file itself is loaded during
    startup.
    """
    settings = settings or MonitorSettings()

    app = FastAPI(
        title="Endpoint Availability Monitor",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_error_handlers(app)

    return app


app = create_app()
