"""Monitoring services — polling scheduler and reporter."""

from availability_monitor.services.reporter import Reporter, format_report_line
from availability_monitor.services.scheduler import (
    PollingScheduler,
    SchedulerState,
    build_scheduler,
)

__all__ = [
    "PollingScheduler",
    "Reporter",
    "SchedulerState",
    "build_scheduler",
    "format_report_line",
]
