"""HTTP routers for the status API."""

from availability_monitor.routers.status import create_status_router

__all__ = ["create_status_router"]
