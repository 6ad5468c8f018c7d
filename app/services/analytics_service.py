"""
app/services/analytics_service.py

Deterministic market analytics over the stored sales records.

Formulas
--------
Growth Rate         = (sales_2025 - sales_2022) / sales_2022 * 100
                      with sales_2022 == 0 giving 100 when sales_2025 > 0
                      and 0 otherwise
Avg Growth Rate     = mean of finite per-record growth rates
Market Penetration  = active_markets / total_markets * 100

Growth Rate is a point-to-point percentage change between the 2022 and 2025
totals. It is not a compounded annual rate, even where it is labelled that
way in the dashboard copy.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from app.domain.sales_record import AnalyticsSummary, SalesRecord
from app.repositories.sales_record_store import SalesRecordStore

logger = logging.getLogger(__name__)

GROWTH_MARKET_THRESHOLD = 10.0
EMERGING_MARKET_THRESHOLD = 50.0


def calculate_growth_rate(sales_2022: float, sales_2025: float) -> float:
    """
    Endpoint percentage change from 2022 to 2025 with zero-base handling.

    >>> calculate_growth_rate(200, 300)
    50.0
    >>> calculate_growth_rate(0, 500)
    100.0
    """

    if sales_2022 == 0:
        return 100.0 if sales_2025 > 0 else 0.0
    return (sales_2025 - sales_2022) / sales_2022 * 100.0


class AnalyticsService:
    """
    Computes ``AnalyticsSummary`` from the current store contents.

    Stateless apart from the store handle; every call reads the full set.
    """

    def __init__(self, store: SalesRecordStore) -> None:
        self._store = store

    def get_summary(self) -> AnalyticsSummary:
        return self.summarize(self._store.list_all())

    @staticmethod
    def summarize(records: Sequence[SalesRecord]) -> AnalyticsSummary:
        total_markets = len(records)
        if total_markets == 0:
            return AnalyticsSummary()

        growth_rates = [
            calculate_growth_rate(record.sales_2022, record.sales_2025)
            for record in records
        ]
        finite_rates = [rate for rate in growth_rates if math.isfinite(rate)]
        if len(finite_rates) != len(growth_rates):
            logger.warning(
                "Excluded %d non-finite growth rates from average",
                len(growth_rates) - len(finite_rates),
            )
        avg_growth_rate = sum(finite_rates) / len(finite_rates) if finite_rates else 0.0

        active_markets = sum(1 for record in records if record.total > 0)
        return AnalyticsSummary(
            total_markets=total_markets,
            total_sales_2024=sum(record.sales_2024 for record in records),
            avg_growth_rate=avg_growth_rate,
            market_penetration=active_markets / total_markets * 100.0,
            active_markets=active_markets,
            growth_markets=sum(1 for rate in growth_rates if rate > GROWTH_MARKET_THRESHOLD),
            emerging_markets=sum(1 for rate in growth_rates if rate > EMERGING_MARKET_THRESHOLD),
        )
