"""
app/repositories/sales_record_store.py

In-memory persistence layer for sales records.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

from app.domain.sales_record import SalesRecord, SalesRecordDraft

INITIAL_RECORD_ID = 1


class SalesRecordStore:
    """
    Process-local id -> record map with a monotonic id counter.

    One instance is created per process and injected where needed. Records
    are immutable, so the lock only protects the map and the counter; readers
    racing a replace may see an empty or partially repopulated store.
    """

    def __init__(self) -> None:
        self._records: dict[int, SalesRecord] = {}
        self._next_id = INITIAL_RECORD_ID
        self._lock = threading.Lock()

    def insert_one(self, draft: SalesRecordDraft) -> SalesRecord:
        with self._lock:
            return self._insert_locked(draft)

    def insert_many(self, drafts: Sequence[SalesRecordDraft]) -> list[SalesRecord]:
        with self._lock:
            return [self._insert_locked(draft) for draft in drafts]

    def list_all(self) -> list[SalesRecord]:
        with self._lock:
            return list(self._records.values())

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._next_id = INITIAL_RECORD_ID

    def _insert_locked(self, draft: SalesRecordDraft) -> SalesRecord:
        record = SalesRecord.from_draft(self._next_id, draft)
        self._records[record.id] = record
        self._next_id += 1
        return record
