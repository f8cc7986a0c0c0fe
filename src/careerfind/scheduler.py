"""Daily automation loop."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta

from .errors import CareerFindError

Job = Callable[[], object]
NowFn = Callable[[], datetime]


def seconds_until_midnight(now: datetime) -> float:
    """Seconds from now until the next local midnight (never zero)."""
    tomorrow = (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    return (tomorrow - now).total_seconds()


class DailyScheduler:
    """Runs a job at every midnight until the cancel event is set."""

    def __init__(
        self,
        job: Job,
        *,
        cancel_event: threading.Event,
        logger: logging.Logger,
        now_fn: NowFn = datetime.now,
    ) -> None:
        self._job = job
        self._cancel_event = cancel_event
        self._logger = logger
        self._now_fn = now_fn

    def run(self, max_runs: int | None = None) -> int:
        """Block running the job daily; return how many runs happened."""
        runs = 0
        self._logger.info("Automation scheduled - will run daily at midnight")
        while max_runs is None or runs < max_runs:
            if self._cancel_event.wait(seconds_until_midnight(self._now_fn())):
                break
            runs += 1
            try:
                self._job()
            except CareerFindError as exc:
                self._logger.error("Automated search failed: %s", exc)
        return runs
