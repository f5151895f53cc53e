"""Polling scheduler — drives the RUN_PASS → REPORT → SLEEP cycle.

Each cycle checks every configured endpoint once (in configured order), asks
the reporter to emit the aggregator's current state, then sleeps for the
cycle interval measured from the end of the report. Slow endpoints therefore
stretch the effective period of the whole batch.

The loop runs until ``stop()`` is called or an optional cycle budget is
exhausted. A stop request also interrupts the sleep.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Iterable
from enum import Enum

from availability_monitor.checks.domain import extract_domain
from availability_monitor.checks.executor import CheckExecutor
from availability_monitor.config.settings import MonitorSettings
from availability_monitor.models.endpoint import Endpoint
from availability_monitor.models.outcome import CheckResult
from availability_monitor.services.reporter import Reporter
from availability_monitor.stats.aggregator import AvailabilityAggregator

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 15.0


class SchedulerState(str, Enum):
    """Where the scheduler currently is in its cycle."""

    IDLE = "idle"
    RUN_PASS = "run_pass"
    REPORT = "report"
    SLEEP = "sleep"
    STOPPED = "stopped"


class PollingScheduler:
    """Owns the polling cadence for a fixed list of endpoints.

    Parameters
    ----------
    endpoints:
        Endpoints to check, in order. Treated as immutable.
    executor:
        Performs and records individual checks.
    aggregator:
        Shared availability state, read by the reporter after each pass.
        Every configured endpoint's domain is registered eagerly.
    reporter:
        Emits one line per domain after each pass.
    interval_seconds:
        Sleep between the end of a report and the start of the next pass.
    max_concurrency:
        Checks allowed in flight at once within a pass. ``1`` (the default)
        checks strictly sequentially.
    """

    def __init__(
        self,
        endpoints: Iterable[Endpoint],
        *,
        executor: CheckExecutor,
        aggregator: AvailabilityAggregator,
        reporter: Reporter,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        max_concurrency: int = 1,
    ) -> None:
        self._endpoints = tuple(endpoints)
        self._executor = executor
        self._aggregator = aggregator
        self._reporter = reporter
        self._interval_seconds = interval_seconds
        self._max_concurrency = max(1, max_concurrency)

        self._stop_event = asyncio.Event()
        self._state = SchedulerState.IDLE
        self._cycles_completed = 0
        self._last_results: list[CheckResult] = []

        self._aggregator.ensure_domains(extract_domain(ep.url) for ep in self._endpoints)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def cycles_completed(self) -> int:
        return self._cycles_completed

    @property
    def endpoints(self) -> tuple[Endpoint, ...]:
        return self._endpoints

    @property
    def last_results(self) -> list[CheckResult]:
        return list(self._last_results)

    async def run(self, max_cycles: int | None = None) -> None:
        """Run cycles until stopped, or until *max_cycles* cycles have completed.

        No sleep follows the final cycle of a bounded run.
        """
        logger.info(
            "Starting polling loop: %d endpoints, %d domains, interval=%.1fs, concurrency=%d",
            len(self._endpoints),
            len(self._aggregator),
            self._interval_seconds,
            self._max_concurrency,
        )
        cycles = 0
        try:
            while not self._stop_event.is_set():
                await self.run_cycle()
                cycles += 1
                if max_cycles is not None and cycles >= max_cycles:
                    break
                self._state = SchedulerState.SLEEP
                await self._sleep()
        finally:
            self._state = SchedulerState.STOPPED
            logger.info("Polling loop stopped after %d cycles", self._cycles_completed)

    def stop(self) -> None:
        """Ask the loop to exit after the current step; interrupts any sleep."""
        self._stop_event.set()

    async def run_cycle(self) -> list[str]:
        """One pass over all endpoints followed by a report."""
        results = await self.run_pass()
        lines = self.report()
        self._cycles_completed += 1

        outcomes = Counter(result.outcome.value for result in results)
        logger.info(
            "Cycle %d complete: %d checks (%s)",
            self._cycles_completed,
            len(results),
            ", ".join(f"{name}={count}" for name, count in sorted(outcomes.items())) or "none",
            extra={"cycle": self._cycles_completed},
        )
        return lines

    async def run_pass(self) -> list[CheckResult]:
        """Check every endpoint once. Returns results in configured order.

        Endpoints whose check raised unexpectedly are logged and left out.
        """
        self._state = SchedulerState.RUN_PASS

        if self._max_concurrency == 1:
            gathered = [await self._run_check(endpoint) for endpoint in self._endpoints]
        else:
            semaphore = asyncio.Semaphore(self._max_concurrency)

            async def _bounded(endpoint: Endpoint) -> CheckResult | None:
                async with semaphore:
                    return await self._run_check(endpoint)

            gathered = await asyncio.gather(*(_bounded(ep) for ep in self._endpoints))

        self._last_results = [result for result in gathered if result is not None]
        return list(self._last_results)

    def report(self) -> list[str]:
        self._state = SchedulerState.REPORT
        return self._reporter.report(self._aggregator)

    def get_stats(self) -> dict:
        """Return current scheduler statistics.

        Returns
        -------
        dict with keys:
            state, cycles_completed, endpoints, domains, last_pass
        """
        return {
            "state": self._state.value,
            "cycles_completed": self._cycles_completed,
            "endpoints": len(self._endpoints),
            "domains": len(self._aggregator),
            "last_pass": dict(Counter(r.outcome.value for r in self._last_results)),
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run_check(self, endpoint: Endpoint) -> CheckResult | None:
        try:
            return await self._executor.check(endpoint)
        except Exception:
            logger.exception(
                "Unexpected error checking %s — skipping this cycle",
                endpoint.url,
                extra={"endpoint_name": endpoint.name, "target_url": endpoint.url},
            )
            return None

    async def _sleep(self) -> None:
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval_seconds)
        except asyncio.TimeoutError:
            pass


def build_scheduler(
    settings: MonitorSettings,
    endpoints: list[Endpoint],
    aggregator: AvailabilityAggregator,
    *,
    reporter: Reporter | None = None,
) -> PollingScheduler:
    """Wire the check pipeline for *endpoints* around a shared aggregator."""
    executor = CheckExecutor(
        aggregator,
        timeout_ms=settings.request_timeout_ms,
        latency_threshold_ms=settings.latency_threshold_ms,
    )
    return PollingScheduler(
        endpoints,
        executor=executor,
        aggregator=aggregator,
        reporter=reporter or Reporter(),
        interval_seconds=settings.cycle_interval_seconds,
        max_concurrency=settings.max_concurrency,
    )
