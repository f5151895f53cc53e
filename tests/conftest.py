"""Shared test fixtures for the monitor test suite."""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Callable, Iterable, Iterator

import httpx
import pytest

from availability_monitor.config.settings import MonitorSettings
from availability_monitor.services.reporter import Reporter
from availability_monitor.stats.aggregator import AvailabilityAggregator


# ---------------------------------------------------------------------------
# Keep the developer's MONITOR_ environment out of the tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_monitor_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("MONITOR_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """configure_logging replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> MonitorSettings:
    """Test settings: no sleeping between cycles."""
    return MonitorSettings(cycle_interval_seconds=0)


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def aggregator() -> AvailabilityAggregator:
    return AvailabilityAggregator()


@pytest.fixture
def report_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(report_stream: io.StringIO) -> Reporter:
    return Reporter(stream=report_stream)


class FakeClock:
    """Monotonic clock that returns preset readings, then keeps the last one."""

    def __init__(self, readings: Iterable[float]) -> None:
        self._readings = list(readings)
        self._last = self._readings[0] if self._readings else 0.0

    def __call__(self) -> float:
        if self._readings:
            self._last = self._readings.pop(0)
        return self._last


@pytest.fixture
def fake_clock() -> Callable[..., FakeClock]:
    """Build a clock whose consecutive calls span *latency_ms*."""

    def _make(latency_ms: float) -> FakeClock:
        return FakeClock([100.0, 100.0 + latency_ms / 1000])

    return _make


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered in-process by a handler."""

    def _make(handler: Callable[[httpx.Request], object]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def patch_async_client(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Route every ``httpx.AsyncClient`` the code opens itself through a handler."""
    real_client = httpx.AsyncClient

    def _patch(handler: Callable[[httpx.Request], object]) -> None:
        def factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(handler)
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", factory)

    return _patch
