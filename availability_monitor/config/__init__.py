"""Configuration module — settings and the endpoint list loader."""

from availability_monitor.config.endpoints import load_endpoints
from availability_monitor.config.settings import MonitorSettings

__all__ = [
    "MonitorSettings",
    "load_endpoints",
]
