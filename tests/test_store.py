import threading
from datetime import datetime, timezone

from careerfind.models import Result
from careerfind.store import ResultStore


def _result(index: int) -> Result:
    return Result(
        emails=(f"user{index}@example.com",),
        location="https://search.example/?q=jobs",
        timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc),
        source=f"https://example.com/{index}",
    )


def test_append_and_snapshot_preserve_order() -> None:
    store = ResultStore()
    store.append(_result(1))
    store.append(_result(2))
    assert [item.source for item in store.snapshot()] == [
        "https://example.com/1",
        "https://example.com/2",
    ]
    assert len(store) == 2


def test_snapshot_is_a_copy() -> None:
    store = ResultStore()
    store.append(_result(1))
    snapshot = store.snapshot()
    store.append(_result(2))
    assert len(snapshot) == 1
    assert len(store) == 2


def test_concurrent_appends_never_lose_entries() -> None:
    store = ResultStore()
    workers = 64
    per_worker = 50
    barrier = threading.Barrier(workers)

    def worker(offset: int) -> None:
        barrier.wait()
        for index in range(per_worker):
            store.append(_result(offset * per_worker + index))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = store.snapshot()
    assert len(snapshot) == workers * per_worker
    assert len({item.source for item in snapshot}) == workers * per_worker
