import logging
import threading
from datetime import datetime

from careerfind.errors import CareerFindError
from careerfind.scheduler import DailyScheduler, seconds_until_midnight


def test_seconds_until_midnight() -> None:
    assert seconds_until_midnight(datetime(2026, 1, 1, 23, 59, 30)) == 30.0
    assert seconds_until_midnight(datetime(2026, 1, 1, 0, 0, 0)) == 86400.0
    assert seconds_until_midnight(datetime(2026, 12, 31, 12, 0, 0)) == 43200.0


def test_scheduler_runs_job_and_survives_failures() -> None:
    calls: list[int] = []

    def job() -> None:
        calls.append(len(calls))
        if len(calls) == 1:
            raise CareerFindError("search failed")

    scheduler = DailyScheduler(
        job,
        cancel_event=threading.Event(),
        logger=logging.getLogger("test"),
        now_fn=lambda: datetime(2026, 1, 1, 23, 59, 59, 999000),
    )
    assert scheduler.run(max_runs=2) == 2
    assert calls == [0, 1]


def test_scheduler_stops_when_cancelled() -> None:
    event = threading.Event()
    event.set()
    calls: list[str] = []
    scheduler = DailyScheduler(
        lambda: calls.append("ran"), cancel_event=event, logger=logging.getLogger("test")
    )
    assert scheduler.run() == 0
    assert calls == []
