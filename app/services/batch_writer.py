"""
app/services/batch_writer.py

Chunked full-replace writes into the sales record store.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence

from app.domain.sales_record import SalesRecordDraft
from app.logging_utils import log_event
from app.repositories.sales_record_store import SalesRecordStore

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000


class SalesIngestionError(RuntimeError):
    """
    Base error for batch-level ingestion failures.
    """


class NoValidRowsError(SalesIngestionError):
    """
    Raised when nothing survives normalization and validation.
    """

    def __init__(self, message: str = "No valid rows to store.") -> None:
        super().__init__(message)


def _yield_to_scheduler() -> None:
    time.sleep(0)


class BatchWriter:
    """
    Replaces the store contents in fixed-size chunks.

    The store lock is released between chunks and ``yield_hook`` runs, so
    other request threads get a turn during a large ingestion. A writer lock
    is held from the clear through the last chunk, so concurrent replaces
    run one after the other and never merge.
    """

    def __init__(
        self,
        *,
        store: SalesRecordStore,
        batch_size: int = DEFAULT_BATCH_SIZE,
        yield_hook: Callable[[], None] = _yield_to_scheduler,
    ) -> None:
        self._store = store
        self._batch_size = max(1, batch_size)
        self._yield_hook = yield_hook
        self._write_lock = threading.Lock()

    def replace_all(self, drafts: Sequence[SalesRecordDraft]) -> int:
        """
        Clear the store and insert ``drafts``; return the inserted count.

        Raises NoValidRowsError without touching the store when ``drafts``
        is empty.
        """

        if not drafts:
            raise NoValidRowsError()

        inserted = 0
        batches = 0
        with self._write_lock:
            self._store.clear()
            for start in range(0, len(drafts), self._batch_size):
                batch = drafts[start : start + self._batch_size]
                inserted += len(self._store.insert_many(batch))
                batches += 1
                self._yield_hook()

        log_event(
            logger,
            logging.INFO,
            "sales_store_replaced",
            inserted=inserted,
            batches=batches,
            batch_size=self._batch_size,
        )
        return inserted
