"""
tests/test_geocode_worker_pool.py

Pytest unit tests for GeocodeWorkerPool using deterministic fake providers.

Coverage
--------
- Output order matches input order under uneven lookup latency
- Every index is processed exactly once
- Concurrency bound is never exceeded
- Failures degrade to sentinel coordinates without affecting other rows
- Non-finite or out-of-range coordinates count as failures
- Unconfigured / missing provider skips lookups entirely
- Absent (None) inputs stay absent
"""

from __future__ import annotations

import threading
import time

import pytest

from app.connectors.base import GeocodeLookupError, GeocodeResult
from app.domain.sales_record import SalesRecordDraft
from app.geocoding.worker_pool import GeocodeWorkerPool


# ---------------------------------------------------------------------------
# Fake providers
# ---------------------------------------------------------------------------


class FixedProvider:
    """Returns coordinates derived from the city name; records every call."""

    def __init__(self, *, configured: bool = True, delays: dict[str, float] | None = None) -> None:
        self._configured = configured
        self._delays = delays or {}
        self.calls: list[str] = []
        self._lock = threading.Lock()

    @property
    def is_configured(self) -> bool:
        return self._configured

    def lookup(self, locality: str, region: str) -> GeocodeResult:
        with self._lock:
            self.calls.append(locality)
        delay = self._delays.get(locality, 0.0)
        if delay:
            time.sleep(delay)
        number = int(locality.split("-")[1])
        return GeocodeResult(latitude=10.0 + number, longitude=70.0 + number)


class FailingProvider(FixedProvider):
    """Fails for the given localities, succeeds for the rest."""

    def __init__(self, failing: set[str], *, error: Exception | None = None) -> None:
        super().__init__()
        self._failing = failing
        self._error = error or GeocodeLookupError("no match")

    def lookup(self, locality: str, region: str) -> GeocodeResult:
        if locality in self._failing:
            raise self._error
        return super().lookup(locality, region)


class BadCoordinateProvider(FixedProvider):
    """Returns unusable coordinates for the given localities."""

    def __init__(self, bad: dict[str, tuple[float, float]]) -> None:
        super().__init__()
        self._bad = bad

    def lookup(self, locality: str, region: str) -> GeocodeResult:
        if locality in self._bad:
            latitude, longitude = self._bad[locality]
            return GeocodeResult(latitude=latitude, longitude=longitude)
        return super().lookup(locality, region)


class InFlightTrackingProvider(FixedProvider):
    """Tracks the maximum number of simultaneous lookups."""

    def __init__(self, delay: float) -> None:
        super().__init__()
        self._delay = delay
        self._in_flight = 0
        self.max_in_flight = 0
        self._track_lock = threading.Lock()

    def lookup(self, locality: str, region: str) -> GeocodeResult:
        with self._track_lock:
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            time.sleep(self._delay)
            return super().lookup(locality, region)
        finally:
            with self._track_lock:
                self._in_flight -= 1


def _drafts(count: int) -> list[SalesRecordDraft | None]:
    return [
        SalesRecordDraft(year=2024, state="State", city=f"city-{index}", sales_2024=index, total=index)
        for index in range(count)
    ]


# ---------------------------------------------------------------------------
# Ordering and distribution
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_output_order_matches_input_despite_uneven_latency(self) -> None:
        # Early rows are the slowest, so they finish last.
        delays = {f"city-{index}": 0.05 - index * 0.01 for index in range(5)}
        pool = GeocodeWorkerPool(provider=FixedProvider(delays=delays), concurrency=5)

        results = pool.enrich(_drafts(5))

        assert [result.city for result in results if result is not None] == [
            f"city-{index}" for index in range(5)
        ]
        assert [result.latitude for result in results if result is not None] == [
            10.0,
            11.0,
            12.0,
            13.0,
            14.0,
        ]

    def test_every_index_is_processed_exactly_once(self) -> None:
        provider = FixedProvider()
        pool = GeocodeWorkerPool(provider=provider, concurrency=7)

        results = pool.enrich(_drafts(53))

        assert len(results) == 53
        assert sorted(provider.calls) == sorted(f"city-{index}" for index in range(53))

    def test_empty_input_returns_empty_output(self) -> None:
        results, stats = GeocodeWorkerPool(provider=FixedProvider()).run([])
        assert results == []
        assert stats.workers == 0

    def test_absent_entries_stay_absent(self) -> None:
        drafts = _drafts(3)
        drafts[1] = None
        provider = FixedProvider()

        results, stats = GeocodeWorkerPool(provider=provider, concurrency=2).run(drafts)

        assert results[1] is None
        assert results[0] is not None and results[2] is not None
        assert len(provider.calls) == 2
        assert stats.skipped == 1


# ---------------------------------------------------------------------------
# Concurrency bound
# ---------------------------------------------------------------------------


class TestConcurrency:
    @pytest.mark.parametrize("concurrency", [1, 3, 10])
    def test_in_flight_lookups_never_exceed_limit(self, concurrency: int) -> None:
        provider = InFlightTrackingProvider(delay=0.01)
        pool = GeocodeWorkerPool(provider=provider, concurrency=concurrency)

        results = pool.enrich(_drafts(20))

        assert all(result is not None for result in results)
        assert 1 <= provider.max_in_flight <= concurrency

    def test_workers_are_capped_by_row_count(self) -> None:
        _, stats = GeocodeWorkerPool(provider=FixedProvider(), concurrency=10).run(_drafts(3))
        assert stats.workers == 3

    def test_concurrency_below_one_is_clamped(self) -> None:
        assert GeocodeWorkerPool(provider=None, concurrency=0).concurrency == 1


# ---------------------------------------------------------------------------
# Failure isolation
# ---------------------------------------------------------------------------


class TestFailureIsolation:
    def test_failed_row_gets_sentinel_and_others_are_untouched(self) -> None:
        provider = FailingProvider({"city-2"})
        pool = GeocodeWorkerPool(provider=provider, concurrency=3)

        results, stats = pool.run(_drafts(5))

        assert len([result for result in results if result is not None]) == 5
        failed = results[2]
        assert failed is not None
        assert (failed.latitude, failed.longitude) == (0.0, 0.0)
        for index in (0, 1, 3, 4):
            result = results[index]
            assert result is not None
            assert (result.latitude, result.longitude) == (10.0 + index, 70.0 + index)
        assert stats.failed == 1

    def test_unexpected_exception_is_treated_as_lookup_failure(self) -> None:
        provider = FailingProvider({"city-0"}, error=ValueError("boom"))

        results = GeocodeWorkerPool(provider=provider, concurrency=2).enrich(_drafts(2))

        assert results[0] is not None
        assert (results[0].latitude, results[0].longitude) == (0.0, 0.0)
        assert results[1] is not None
        assert results[1].latitude == 11.0

    def test_unusable_coordinates_degrade_to_sentinel(self) -> None:
        provider = BadCoordinateProvider(
            {
                "city-0": (float("nan"), 200.0),
                "city-1": (91.0, 10.0),
                "city-2": (10.0, float("inf")),
            }
        )

        results, stats = GeocodeWorkerPool(provider=provider, concurrency=2).run(_drafts(4))

        for index in (0, 1, 2):
            result = results[index]
            assert result is not None
            assert (result.latitude, result.longitude) == (0.0, 0.0)
        assert results[3] is not None
        assert (results[3].latitude, results[3].longitude) == (13.0, 73.0)
        assert stats.failed == 3

    def test_unconfigured_provider_is_never_called(self) -> None:
        provider = FixedProvider(configured=False)

        results, stats = GeocodeWorkerPool(provider=provider).run(_drafts(4))

        assert provider.calls == []
        assert all(
            result is not None and (result.latitude, result.longitude) == (0.0, 0.0)
            for result in results
        )
        assert stats.failed == 4

    def test_missing_provider_degrades_to_sentinel(self) -> None:
        results = GeocodeWorkerPool(provider=None).enrich(_drafts(2))
        assert all(result is not None and result.latitude == 0.0 for result in results)

    def test_measures_are_preserved_through_enrichment(self) -> None:
        results = GeocodeWorkerPool(provider=FixedProvider()).enrich(_drafts(3))
        assert [result.sales_2024 for result in results if result is not None] == [0, 1, 2]
