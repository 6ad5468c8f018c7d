from __future__ import annotations

import threading
import time

import pytest

from app.domain.sales_record import SalesRecordDraft
from app.repositories.sales_record_store import SalesRecordStore
from app.services.batch_writer import BatchWriter, NoValidRowsError


def _drafts(count: int, prefix: str = "city") -> list[SalesRecordDraft]:
    return [
        SalesRecordDraft(year=2025, state="Bihar", city=f"{prefix}-{index}", sales_2025=1, total=1)
        for index in range(count)
    ]


class TestBatchWriter:
    def test_replace_all_clears_then_inserts(self) -> None:
        store = SalesRecordStore()
        store.insert_many(_drafts(4))
        writer = BatchWriter(store=store, batch_size=10, yield_hook=lambda: None)

        inserted = writer.replace_all(_drafts(2))

        assert inserted == 2
        assert store.count() == 2
        assert sorted(record.id for record in store.list_all()) == [1, 2]

    def test_inserts_in_chunks_and_yields_between_them(self) -> None:
        store = SalesRecordStore()
        observed_counts: list[int] = []
        writer = BatchWriter(
            store=store,
            batch_size=3,
            yield_hook=lambda: observed_counts.append(store.count()),
        )

        inserted = writer.replace_all(_drafts(7))

        assert inserted == 7
        assert observed_counts == [3, 6, 7]

    def test_empty_set_raises_and_leaves_store_untouched(self) -> None:
        store = SalesRecordStore()
        store.insert_many(_drafts(2))
        writer = BatchWriter(store=store)

        with pytest.raises(NoValidRowsError):
            writer.replace_all([])

        assert store.count() == 2

    def test_batch_size_below_one_is_clamped(self) -> None:
        store = SalesRecordStore()
        writer = BatchWriter(store=store, batch_size=0, yield_hook=lambda: None)

        assert writer.replace_all(_drafts(2)) == 2

    def test_concurrent_replaces_do_not_merge_datasets(self) -> None:
        store = SalesRecordStore()
        writer = BatchWriter(store=store, batch_size=2, yield_hook=lambda: time.sleep(0.02))
        start = threading.Barrier(2)

        def replace(prefix: str) -> None:
            start.wait()
            writer.replace_all(_drafts(6, prefix=prefix))

        threads = [threading.Thread(target=replace, args=(prefix,)) for prefix in ("a", "b")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        records = store.list_all()
        assert len(records) == 6
        assert len({record.city.split("-")[0] for record in records}) == 1
        assert sorted(record.id for record in records) == [1, 2, 3, 4, 5, 6]

