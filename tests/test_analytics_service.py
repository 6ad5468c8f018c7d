"""
tests/test_analytics_service.py

Pytest unit tests for AnalyticsService and calculate_growth_rate.

All tests are pure Python against an in-memory store.

Coverage
--------
- Growth rate zero-base handling and endpoint percentage change
- Empty store reports zeros
- Market classification thresholds
- Penetration ratio
- Summary recomputed after store changes
"""

from __future__ import annotations

import math

import pytest

from app.domain.sales_record import AnalyticsSummary, SalesRecord, SalesRecordDraft
from app.repositories.sales_record_store import SalesRecordStore
from app.services.analytics_service import AnalyticsService, calculate_growth_rate


def _draft(*, s2022: int = 0, s2024: int = 0, s2025: int = 0, total: int | None = None) -> SalesRecordDraft:
    return SalesRecordDraft(
        year=2024,
        state="Tamil Nadu",
        city="Chennai",
        sales_2022=s2022,
        sales_2024=s2024,
        sales_2025=s2025,
        total=s2022 + s2024 + s2025 if total is None else total,
    )


@pytest.fixture()
def store() -> SalesRecordStore:
    return SalesRecordStore()


@pytest.fixture()
def svc(store: SalesRecordStore) -> AnalyticsService:
    return AnalyticsService(store)


# ---------------------------------------------------------------------------
# Growth rate
# ---------------------------------------------------------------------------


class TestGrowthRate:
    @pytest.mark.parametrize(
        "s2022, s2025, expected",
        [
            (0, 500, 100.0),
            (200, 300, 50.0),
            (200, 150, -25.0),
            (0, 0, 0.0),
            (100, 100, 0.0),
            (100, 0, -100.0),
        ],
    )
    def test_growth_rate(self, s2022: int, s2025: int, expected: float) -> None:
        assert calculate_growth_rate(s2022, s2025) == pytest.approx(expected)

    def test_is_simple_percentage_not_compounded(self) -> None:
        # 100 -> 200 over three years is 100%, not the ~26% CAGR.
        assert calculate_growth_rate(100, 200) == pytest.approx(100.0)


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


class TestAnalyticsSummary:
    def test_empty_store_reports_zeros(self, svc: AnalyticsService) -> None:
        summary = svc.get_summary()

        assert summary == AnalyticsSummary()
        assert summary.avg_growth_rate == 0.0
        assert summary.market_penetration == 0.0

    def test_totals_and_average(self, store: SalesRecordStore, svc: AnalyticsService) -> None:
        store.insert_many(
            [
                _draft(s2022=0, s2025=500),    # 100
                _draft(s2022=200, s2025=300),  # 50
                _draft(s2022=200, s2025=150),  # -25
                _draft(s2024=40),              # 0
            ]
        )

        summary = svc.get_summary()

        assert summary.total_markets == 4
        assert summary.total_sales_2024 == 40
        assert summary.avg_growth_rate == pytest.approx((100 + 50 - 25 + 0) / 4)

    def test_market_classification(self, store: SalesRecordStore, svc: AnalyticsService) -> None:
        store.insert_many(
            [
                _draft(s2022=0, s2025=10),     # 100 -> growth + emerging
                _draft(s2022=100, s2025=151),  # 51 -> growth + emerging
                _draft(s2022=100, s2025=150),  # 50 -> growth only
                _draft(s2022=100, s2025=110),  # 10 -> neither
                _draft(s2022=100, s2025=111),  # 11 -> growth only
                _draft(),                      # 0, inactive
            ]
        )

        summary = svc.get_summary()

        assert summary.growth_markets == 4
        assert summary.emerging_markets == 2
        assert summary.active_markets == 5
        assert summary.market_penetration == pytest.approx(5 / 6 * 100)

    def test_active_markets_use_total(self, store: SalesRecordStore, svc: AnalyticsService) -> None:
        store.insert_many([_draft(s2024=10, total=0), _draft(s2024=0, total=3)])

        summary = svc.get_summary()

        assert summary.active_markets == 1
        assert summary.market_penetration == pytest.approx(50.0)

    def test_summary_tracks_store_changes(self, store: SalesRecordStore, svc: AnalyticsService) -> None:
        store.insert_one(_draft(s2024=5))
        assert svc.get_summary().total_markets == 1

        store.clear()
        assert svc.get_summary().total_markets == 0

    def test_non_finite_rates_are_excluded_from_average(self) -> None:
        records = [
            SalesRecord.from_draft(1, _draft(s2022=100, s2025=150)),
            SalesRecord.from_draft(2, _draft(s2022=100, s2025=200)),
        ]
        object.__setattr__(records[1], "sales_2025", math.inf)

        summary = AnalyticsService.summarize(records)

        assert summary.avg_growth_rate == pytest.approx(50.0)
        assert summary.total_markets == 2
