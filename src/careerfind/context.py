"""Explicit per-run state shared by the crawl components."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from .config import CrawlConfig
from .store import ResultStore


@dataclass
class RunContext:
    """Configuration, result store, logger and cancel signal for one run.

    Built once at startup and passed to every component; nothing in the
    package reads this state from module globals.
    """

    config: CrawlConfig
    logger: logging.Logger
    store: ResultStore = field(default_factory=ResultStore)
    cancel_event: threading.Event = field(default_factory=threading.Event)

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()
