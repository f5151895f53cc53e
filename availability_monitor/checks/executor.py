"""Check executor — performs one health probe against one endpoint.

Pipeline for a single check: resolve method → attach body (POST/PUT/PATCH
only) → build request with configured headers → send with a hard timeout →
classify → record the attempt on the availability aggregator.

A check never raises. Transport failures and timeouts are counted as failed
attempts; a request that cannot even be built is logged and skipped without
touching any counter.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from collections.abc import Callable

import httpx

from availability_monitor.checks.domain import extract_domain
from availability_monitor.middleware.error_handler import RequestConstructionError
from availability_monitor.models.endpoint import Endpoint
from availability_monitor.models.outcome import CheckOutcome, CheckResult
from availability_monitor.stats.aggregator import AvailabilityAggregator

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 500
DEFAULT_LATENCY_THRESHOLD_MS = 500

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

# RFC 9110 token characters
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def resolve_method(raw: str) -> str:
    """Trim and uppercase a configured method; blank means GET."""
    return raw.strip().upper() or "GET"


def request_body(method: str, body: str) -> str | None:
    """Payload to send, or None. GET and friends silently drop the body."""
    if body and method in _BODY_METHODS:
        return body
    return None


def is_healthy(status_code: int, latency_ms: float, threshold_ms: float) -> bool:
    """A check passes only with a 2xx status AND latency strictly below the threshold."""
    return 200 <= status_code <= 299 and latency_ms < threshold_ms


class CheckExecutor:
    """Runs single endpoint checks and records them on the aggregator.

    Parameters
    ----------
    aggregator:
        Receives one ``record()`` call per sent request.
    client:
        Optional shared ``httpx.AsyncClient``. Without one, each check opens
        and closes its own client, so measured latency includes connection
        setup.
    timeout_ms:
        Hard limit for the whole exchange, redirects included.
    latency_threshold_ms:
        Responses at or above this latency fail even with a 2xx status.
        Defaults to the same value as the timeout.
    clock:
        Monotonic clock in seconds used to measure latency.
    """

    def __init__(
        self,
        aggregator: AvailabilityAggregator,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        latency_threshold_ms: int = DEFAULT_LATENCY_THRESHOLD_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._aggregator = aggregator
        self._client = client
        self._timeout_seconds = timeout_ms / 1000
        self._latency_threshold_ms = latency_threshold_ms
        self._clock = clock

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def check(self, endpoint: Endpoint) -> CheckResult:
        """Probe *endpoint* once and return its classification."""
        domain = extract_domain(endpoint.url)

        if self._client is not None:
            return await self._check_with(self._client, endpoint, domain)

        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            return await self._check_with(client, endpoint, domain)

    def build_request(self, client: httpx.AsyncClient, endpoint: Endpoint) -> httpx.Request:
        """Build the outgoing request for *endpoint*.

        Raises
        ------
        RequestConstructionError
            If the method is not a valid HTTP token, or the URL or a header is
            rejected by the HTTP layer.
        """
        method = resolve_method(endpoint.method)
        if not _METHOD_TOKEN.fullmatch(method):
            raise RequestConstructionError(f"invalid method {method!r}", method=method)

        try:
            # Names are case-insensitive: a later "x-token" replaces "X-Token"
            headers = httpx.Headers()
            for name, value in endpoint.headers.items():
                headers[name] = value
            return client.build_request(
                method,
                endpoint.url,
                headers=headers,
                content=request_body(method, endpoint.body),
                timeout=self._timeout_seconds,
            )
        except (httpx.InvalidURL, ValueError, TypeError) as exc:
            raise RequestConstructionError(str(exc), url=endpoint.url) from exc

    # ------------------------------------------------------------------
    # Internal pipeline
    # ------------------------------------------------------------------

    async def _check_with(
        self, client: httpx.AsyncClient, endpoint: Endpoint, domain: str
    ) -> CheckResult:
        try:
            request = self.build_request(client, endpoint)
        except RequestConstructionError as exc:
            logger.warning(
                "Failed to create request for %s: %s",
                endpoint.name or endpoint.url,
                exc.message,
                extra={
                    "endpoint_name": endpoint.name,
                    "target_url": endpoint.url,
                    "outcome": CheckOutcome.CONSTRUCTION_SKIPPED.value,
                },
            )
            return CheckResult(
                endpoint_name=endpoint.name,
                url=endpoint.url,
                domain=domain,
                outcome=CheckOutcome.CONSTRUCTION_SKIPPED,
                error=exc.message,
            )

        started = self._clock()
        try:
            response = await asyncio.wait_for(
                client.send(request, follow_redirects=True),
                timeout=self._timeout_seconds,
            )
        except (httpx.HTTPError, asyncio.TimeoutError, OSError) as exc:
            latency_ms = (self._clock() - started) * 1000
            self._aggregator.record(domain, success=False)
            reason = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
            logger.debug(
                "Check failed for %s (domain=%s): %s",
                endpoint.url,
                domain,
                reason,
                extra={
                    "endpoint_name": endpoint.name,
                    "target_url": endpoint.url,
                    "target_domain": domain,
                    "latency_ms": round(latency_ms, 3),
                    "outcome": CheckOutcome.TRANSPORT_ERROR.value,
                    "error_reason": reason,
                },
            )
            return CheckResult(
                endpoint_name=endpoint.name,
                url=endpoint.url,
                domain=domain,
                outcome=CheckOutcome.TRANSPORT_ERROR,
                latency_ms=latency_ms,
                error=reason,
            )

        latency_ms = (self._clock() - started) * 1000
        healthy = is_healthy(response.status_code, latency_ms, self._latency_threshold_ms)
        self._aggregator.record(domain, success=healthy)
        outcome = CheckOutcome.SUCCESS if healthy else CheckOutcome.HTTP_FAILURE

        logger.debug(
            "Checked %s: status=%d latency=%.1fms outcome=%s",
            endpoint.url,
            response.status_code,
            latency_ms,
            outcome.value,
            extra={
                "endpoint_name": endpoint.name,
                "target_url": endpoint.url,
                "target_domain": domain,
                "status_code": response.status_code,
                "latency_ms": round(latency_ms, 3),
                "outcome": outcome.value,
            },
        )
        return CheckResult(
            endpoint_name=endpoint.name,
            url=endpoint.url,
            domain=domain,
            outcome=outcome,
            status_code=response.status_code,
            latency_ms=latency_ms,
        )
