"""Middleware package — error hierarchy and exception handlers."""

from availability_monitor.middleware.error_handler import (
    ConfigurationError,
    DomainNotFoundError,
    MonitorError,
    RequestConstructionError,
    register_error_handlers,
)

__all__ = [
    "ConfigurationError",
    "DomainNotFoundError",
    "MonitorError",
    "RequestConstructionError",
    "register_error_handlers",
]
