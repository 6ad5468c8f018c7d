"""
app/geocoding/worker_pool.py

Bounded-concurrency geocoding of normalized sales drafts.

Design
------
A fixed number of worker threads share one cursor over the input indices.
Each worker claims the next unclaimed index under a lock, resolves that row
to completion, and writes the result into the pre-sized output slot for the
index. Output order therefore matches input order regardless of which
worker finishes first. ``enrich`` returns only after every worker has been
joined.

Lookup failures of any kind (unconfigured provider, timeout, HTTP error, no
match, non-finite or out-of-range coordinates) keep the row and give it the
(0, 0) sentinel coordinates.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass, replace
from typing import Sequence

from app.connectors.base import ConnectorRequestError, GeocodeProvider
from app.domain.sales_record import SENTINEL_LATITUDE, SENTINEL_LONGITUDE, SalesRecordDraft
from app.logging_utils import log_event

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 10


@dataclass(frozen=True)
class GeocodeRunStats:
    """
    Counters for one enrichment run.
    """

    rows: int
    skipped: int
    looked_up: int
    failed: int
    workers: int
    elapsed_seconds: float


class _Cursor:
    """
    Monotonic claim-next counter shared by the workers.
    """

    def __init__(self, limit: int) -> None:
        self._next = 0
        self._limit = limit
        self._lock = threading.Lock()

    def claim(self) -> int | None:
        with self._lock:
            if self._next >= self._limit:
                return None
            index = self._next
            self._next += 1
            return index


class GeocodeWorkerPool:
    """
    Drives drafts through a ``GeocodeProvider`` with at most ``concurrency``
    lookups in flight.
    """

    def __init__(
        self,
        *,
        provider: GeocodeProvider | None,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        self._provider = provider
        self._concurrency = max(1, concurrency)

    @property
    def concurrency(self) -> int:
        return self._concurrency

    def enrich(
        self,
        drafts: Sequence[SalesRecordDraft | None],
    ) -> list[SalesRecordDraft | None]:
        """
        Return one entry per input position; ``None`` inputs stay ``None``.
        """

        results, _ = self.run(drafts)
        return results

    def run(
        self,
        drafts: Sequence[SalesRecordDraft | None],
    ) -> tuple[list[SalesRecordDraft | None], GeocodeRunStats]:
        """
        Enrich ``drafts`` and also return the run counters.
        """

        started = time.monotonic()
        total = len(drafts)
        results: list[SalesRecordDraft | None] = [None] * total
        failures = [False] * total
        cursor = _Cursor(total)

        worker_count = min(self._concurrency, total)
        threads = [
            threading.Thread(
                target=self._work,
                args=(cursor, drafts, results, failures),
                name=f"geocode-worker-{number}",
                daemon=True,
            )
            for number in range(worker_count)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        skipped = sum(1 for draft in drafts if draft is None)
        stats = GeocodeRunStats(
            rows=total,
            skipped=skipped,
            looked_up=total - skipped,
            failed=sum(failures),
            workers=worker_count,
            elapsed_seconds=round(time.monotonic() - started, 3),
        )
        log_event(
            logger,
            logging.INFO,
            "geocode_run_completed",
            rows=stats.rows,
            skipped=stats.skipped,
            looked_up=stats.looked_up,
            failed=stats.failed,
            workers=stats.workers,
            elapsed_seconds=stats.elapsed_seconds,
        )
        return results, stats

    def _work(
        self,
        cursor: _Cursor,
        drafts: Sequence[SalesRecordDraft | None],
        results: list[SalesRecordDraft | None],
        failures: list[bool],
    ) -> None:
        while True:
            index = cursor.claim()
            if index is None:
                return
            draft = drafts[index]
            if draft is None:
                continue
            enriched, failed = self._resolve(draft)
            results[index] = enriched
            failures[index] = failed

    def _resolve(self, draft: SalesRecordDraft) -> tuple[SalesRecordDraft, bool]:
        provider = self._provider
        if provider is None or not provider.is_configured:
            return self._with_sentinel(draft), True

        try:
            found = provider.lookup(draft.city, draft.state)
        except ConnectorRequestError as exc:
            logger.debug(
                "Geocode lookup failed city=%r state=%r error=%s",
                draft.city,
                draft.state,
                exc,
            )
            return self._with_sentinel(draft), True
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Unexpected geocode failure city=%r state=%r error=%s",
                draft.city,
                draft.state,
                exc,
            )
            return self._with_sentinel(draft), True

        valid = _is_valid_coordinate(found.latitude, 90.0) and _is_valid_coordinate(found.longitude, 180.0)
        if not valid:
            logger.warning(
                "Geocode returned unusable coordinates city=%r state=%r latitude=%r longitude=%r",
                draft.city,
                draft.state,
                found.latitude,
                found.longitude,
            )
            return self._with_sentinel(draft), True

        return replace(draft, latitude=found.latitude, longitude=found.longitude), False

    @staticmethod
    def _with_sentinel(draft: SalesRecordDraft) -> SalesRecordDraft:
        return replace(draft, latitude=SENTINEL_LATITUDE, longitude=SENTINEL_LONGITUDE)


def _is_valid_coordinate(value: object, bound: float) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and -bound <= value <= bound
