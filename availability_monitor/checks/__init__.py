"""Endpoint health checks — domain keys and the check executor."""

from availability_monitor.checks.domain import extract_domain
from availability_monitor.checks.executor import (
    CheckExecutor,
    is_healthy,
    request_body,
    resolve_method,
)

__all__ = [
    "CheckExecutor",
    "extract_domain",
    "is_healthy",
    "request_body",
    "resolve_method",
]
