"""Availability reporter — one line per known domain after every pass."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from availability_monitor.stats.aggregator import AvailabilityAggregator

logger = logging.getLogger(__name__)


def format_report_line(domain: str, availability: int) -> str:
    return f"{domain} has {availability}% availability"


class Reporter:
    """Writes the current availability of every domain to a text stream.

    The stream defaults to ``sys.stdout`` resolved at report time, so output
    capture in tests and redirection by callers both work.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def report(self, aggregator: AvailabilityAggregator) -> list[str]:
        """Emit and return the report lines for the aggregator's current state."""
        lines = [
            format_report_line(domain, stats.availability)
            for domain, stats in aggregator.snapshot().items()
        ]

        stream = self._stream if self._stream is not None else sys.stdout
        for line in lines:
            stream.write(line + "\n")
        stream.flush()

        logger.debug("Reported availability for %d domains", len(lines))
        return lines
