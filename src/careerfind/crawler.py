"""Rate-limited concurrent crawl of target pages."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from queue import Empty, Queue

from tqdm import tqdm

from .context import RunContext
from .errors import CrawlCancelledError, CrawlError, FetchError, ProxySetupError
from .extraction import extract_page_emails
from .models import Fetcher, Result
from .retry import RetryPolicy

FetcherFactory = Callable[[bool], Fetcher]
Clock = Callable[[], float]


class Ticker:
    """Fixed-period tick source on a monotonic clock.

    The first tick fires one interval after construction. Ticks missed while
    the consumer was busy are dropped rather than delivered in a burst.
    """

    def __init__(self, interval: float, clock: Clock = time.monotonic) -> None:
        self._interval = interval
        self._clock = clock
        self._next = clock() + interval

    def wait(self, cancel_event: threading.Event) -> bool:
        """Block until the next tick. Return False if cancel_event is set first."""
        remaining = max(0.0, self._next - self._clock())
        if cancel_event.wait(remaining):
            return False
        now = self._clock()
        self._next += self._interval
        while self._next <= now:
            self._next += self._interval
        return True


class CrawlCoordinator:
    """Launches one worker per page, gated by a ticker, and aggregates failures."""

    def __init__(
        self,
        ctx: RunContext,
        *,
        fetcher_factory: FetcherFactory,
        retry_policy: RetryPolicy,
        show_progress: bool = False,
        clock: Clock = time.monotonic,
    ) -> None:
        self._ctx = ctx
        self._fetcher_factory = fetcher_factory
        self._retry_policy = retry_policy
        self._show_progress = show_progress
        self._clock = clock

    def crawl(
        self, pages: Sequence[str], *, proxy_enabled: bool = False, verbose: bool = False
    ) -> CrawlError | None:
        """Fetch every page and return the aggregate error, or None when all succeeded.

        Cancellation is observed only between launches. On cancel the error is
        returned at once and workers already running are left to finish alone.
        """
        logger = self._ctx.logger
        pages = list(pages)
        if not pages:
            return None

        errors: Queue[str] = Queue(maxsize=len(pages))
        ticker = Ticker(self._ctx.config.rate_limit_seconds, clock=self._clock)
        progress = tqdm(total=len(pages), desc="scanning pages", disable=not self._show_progress)
        executor = ThreadPoolExecutor(max_workers=len(pages), thread_name_prefix="crawl")
        futures: dict[Future[None], str] = {}

        for page in pages:
            if not ticker.wait(self._ctx.cancel_event):
                executor.shutdown(wait=False)
                progress.close()
                cancelled = CrawlCancelledError(launched=len(futures), total=len(pages))
                logger.warning("%s", cancelled)
                return cancelled
            future = executor.submit(self._process_page, page, errors, proxy_enabled, verbose)

            def on_done(done: Future[None], page: str = page) -> None:
                exc = done.exception()
                if exc is not None:
                    logger.error("Worker for %s crashed: %s", page, exc)
                    errors.put_nowait(f"page {page}: {exc}")
                progress.update(1)

            future.add_done_callback(on_done)
            futures[future] = page

        wait(futures)
        # done callbacks run on the worker threads; joining them flushes every report
        executor.shutdown(wait=True)
        progress.close()

        messages: list[str] = []
        while True:
            try:
                messages.append(errors.get_nowait())
            except Empty:
                break
        if messages:
            return CrawlError(messages)
        return None

    def _process_page(
        self, page: str, errors: Queue[str], proxy_enabled: bool, verbose: bool
    ) -> None:
        logger = self._ctx.logger
        log = logger.info if verbose else logger.debug
        max_retries = self._retry_policy.max_retries

        def on_retry(attempt: int, delay: float, exc: FetchError) -> None:
            log("Error on %s: %s", page, exc)
            log("Retrying %s in %.0fs (attempt %d/%d)", page, delay, attempt, max_retries)

        try:
            fetcher = self._fetcher_factory(proxy_enabled)
            log("Visiting %s", page)
            fetched = self._retry_policy.call(lambda: fetcher.fetch(page), on_retry=on_retry)
        except ProxySetupError as exc:
            self._report(errors, page, f"proxy setup failed: {exc}")
            return
        except FetchError as exc:
            self._report(errors, page, f"failed after {max_retries} retries: {exc}")
            return

        emails = extract_page_emails(fetched.html)
        if not emails:
            log("No emails found on %s", fetched.final_url)
            return

        self._ctx.store.append(
            Result(
                emails=tuple(sorted(emails)),
                location=page,
                timestamp=datetime.now(timezone.utc),
                source=fetched.final_url,
            )
        )
        log("Found %d unique email(s) on %s", len(emails), fetched.final_url)
        for email in sorted(emails):
            log("- %s", email)

    def _report(self, errors: Queue[str], page: str, reason: str) -> None:
        self._ctx.logger.warning("Giving up on %s: %s", page, reason)
        errors.put_nowait(f"page {page}: {reason}")
