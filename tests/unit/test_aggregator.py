"""Unit tests for the per-domain availability aggregator."""

import threading

import pytest

from availability_monitor.middleware.error_handler import DomainNotFoundError
from availability_monitor.stats.aggregator import (
    AvailabilityAggregator,
    DomainStats,
    compute_availability,
)


class TestComputeAvailability:
    def test_zero_attempts_reports_zero(self):
        assert compute_availability(0, 0) == 0

    def test_truncates_instead_of_rounding(self):
        assert compute_availability(2, 3) == 66

    def test_one_third(self):
        assert compute_availability(1, 3) == 33

    def test_all_successful(self):
        assert compute_availability(7, 7) == 100

    def test_half(self):
        assert compute_availability(1, 2) == 50

    def test_domain_stats_property(self):
        assert DomainStats(success=99, total=100).availability == 99


class TestAggregatorDefaults:
    def test_empty_initially(self):
        agg = AvailabilityAggregator()
        assert agg.snapshot() == {}
        assert len(agg) == 0

    def test_ensure_domain_creates_zeroed_entry(self):
        agg = AvailabilityAggregator()
        agg.ensure_domain("a.test")
        assert agg.get_stats("a.test") == DomainStats(success=0, total=0)
        assert agg.availability("a.test") == 0

    def test_ensure_domain_keeps_existing_counters(self):
        agg = AvailabilityAggregator()
        agg.record("a.test", success=True)
        agg.ensure_domain("a.test")
        assert agg.get_stats("a.test").total == 1

    def test_unknown_domain_raises(self):
        agg = AvailabilityAggregator()
        with pytest.raises(DomainNotFoundError):
            agg.get_stats("missing.test")

    def test_fresh_aggregator_has_no_history(self):
        first = AvailabilityAggregator()
        first.record("a.test", success=True)
        second = AvailabilityAggregator()
        assert "a.test" not in second


class TestRecord:
    def test_success_increments_both(self):
        agg = AvailabilityAggregator()
        agg.record("a.test", success=True)
        assert agg.get_stats("a.test") == DomainStats(success=1, total=1)

    def test_failure_increments_total_only(self):
        agg = AvailabilityAggregator()
        agg.record("a.test", success=False)
        assert agg.get_stats("a.test") == DomainStats(success=0, total=1)

    def test_record_creates_unknown_domain(self):
        agg = AvailabilityAggregator()
        agg.record("late.test", success=False)
        assert "late.test" in agg

    def test_counters_are_cumulative(self):
        agg = AvailabilityAggregator()
        for ok in (True, True, False):
            agg.record("a.test", success=ok)
        assert agg.availability("a.test") == 66

    def test_domains_are_independent(self):
        agg = AvailabilityAggregator()
        agg.record("a.test", success=True)
        agg.record("b.test", success=False)
        assert agg.availability("a.test") == 100
        assert agg.availability("b.test") == 0


class TestSnapshot:
    def test_snapshot_is_a_copy(self):
        agg = AvailabilityAggregator()
        agg.record("a.test", success=True)
        snap = agg.snapshot()
        snap["a.test"].total = 999
        assert agg.get_stats("a.test").total == 1

    def test_snapshot_preserves_first_seen_order(self):
        agg = AvailabilityAggregator()
        agg.ensure_domains(["c.test", "a.test", "b.test", "a.test"])
        assert list(agg.snapshot()) == ["c.test", "a.test", "b.test"]
        assert agg.domains() == ["c.test", "a.test", "b.test"]


class TestConcurrency:
    def test_parallel_records_do_not_lose_increments(self):
        agg = AvailabilityAggregator()
        per_thread = 500

        def worker(ok: bool) -> None:
            for _ in range(per_thread):
                agg.record("shared.test", success=ok)

        threads = [threading.Thread(target=worker, args=(i % 2 == 0,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stats = agg.get_stats("shared.test")
        assert stats.total == 8 * per_thread
        assert stats.success == 4 * per_thread
