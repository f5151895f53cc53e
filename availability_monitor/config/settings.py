"""Pydantic Settings for the availability monitor.

All environment variables use the MONITOR_ prefix.
Example: MONITOR_CONFIG_PATH=endpoints.yaml, MONITOR_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class MonitorSettings(BaseSettings):
    """Monitor configuration validated from environment variables."""

    # Endpoint list (YAML); the CLI positional argument takes precedence
    config_path: str | None = None

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Health check classification
    request_timeout_ms: int = Field(default=500, ge=1)
    latency_threshold_ms: int = Field(default=500, ge=1)

    # Polling cadence
    cycle_interval_seconds: float = Field(default=15.0, ge=0)
    max_concurrency: int = Field(default=1, ge=1, le=64)
    max_cycles: int | None = Field(default=None, ge=1)  # None = run forever

    model_config = {"env_prefix": "MONITOR_"}
