"""Core orchestration pipeline: crawl, save, notify."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import replace

from requests import Session

from .config import RunOptions
from .context import RunContext
from .crawler import CrawlCoordinator, FetcherFactory
from .errors import CareerFindError, NotificationError, PersistenceError
from .fetchers import PageFetcher, Socks5Dialer, make_session
from .models import NotificationSink, Result
from .notify import TelegramNotifier, format_summary
from .persistence import save_results_to_db, write_results
from .retry import RetryPolicy, SleepFn
from .search import build_target_pages
from .validation import mx_check

MxCheckFn = Callable[[str], bool]


def build_fetcher_factory(session: Session, ctx: RunContext) -> FetcherFactory:
    """Return a factory building one fetcher per worker, with the proxy when asked."""
    config = ctx.config

    def build(proxy_enabled: bool) -> PageFetcher:
        dialer = None
        if proxy_enabled and config.proxy_address:
            dialer = Socks5Dialer(config.proxy_address)
            ctx.logger.debug("Using proxy: %s", dialer.address)
        return PageFetcher(
            session=session,
            timeout=config.request_timeout,
            logger=ctx.logger,
            dialer=dialer,
        )

    return build


def crawl_pages(
    ctx: RunContext,
    pages: Sequence[str],
    options: RunOptions,
    *,
    fetcher_factory: FetcherFactory,
    sleep_fn: SleepFn = time.sleep,
) -> list[Result]:
    """Crawl the pages and return the collected results; failures are only logged."""
    coordinator = CrawlCoordinator(
        ctx,
        fetcher_factory=fetcher_factory,
        retry_policy=RetryPolicy(max_retries=ctx.config.max_retries, sleep=sleep_fn),
        show_progress=options.show_progress,
    )
    if options.verbose:
        ctx.logger.info("Starting email extraction from %d pages...", len(pages))
    error = coordinator.crawl(pages, proxy_enabled=options.proxy_enabled, verbose=options.verbose)
    if error is not None:
        ctx.logger.warning("Some errors occurred during email extraction: %s", error)
    return ctx.store.snapshot()


def filter_reachable(results: Sequence[Result], mx_checker: MxCheckFn) -> list[Result]:
    """Drop emails whose domain cannot receive mail, and results left empty."""
    verdicts: dict[str, bool] = {}
    kept: list[Result] = []
    for result in results:
        emails = []
        for email in result.emails:
            if email not in verdicts:
                verdicts[email] = mx_checker(email)
            if verdicts[email]:
                emails.append(email)
        if emails:
            kept.append(replace(result, emails=tuple(emails)))
    return kept


def deliver(
    results: Sequence[Result],
    options: RunOptions,
    ctx: RunContext,
    *,
    notifier: NotificationSink | None,
) -> int:
    """Run every sink independently and return the process exit code."""
    logger = ctx.logger
    exit_code = 0
    try:
        path = write_results(results, options.output_format, directory=options.output_dir)
        logger.info("Saved %d results to %s", len(results), path)
    except PersistenceError as exc:
        logger.error("Failed to save results: %s", exc)
        exit_code = 1

    if options.db_path and results:
        try:
            rows = save_results_to_db(results, options.db_path)
            logger.info("Stored %d results in %s", rows, options.db_path)
        except PersistenceError as exc:
            logger.error("Failed to save results to database: %s", exc)

    if options.notify == "telegram" and notifier is not None:
        if not results:
            logger.info("No results found; skipping Telegram notification.")
        else:
            try:
                notifier.send(format_summary(results))
                logger.info("Sent Telegram notification.")
            except NotificationError as exc:
                logger.error("Failed to send Telegram notification: %s", exc)
    return exit_code


def run_pipeline(
    options: RunOptions,
    ctx: RunContext,
    *,
    session: Session | None = None,
    fetcher_factory: FetcherFactory | None = None,
    notifier: NotificationSink | None = None,
    mx_checker: MxCheckFn = mx_check,
    sleep_fn: SleepFn = time.sleep,
) -> int:
    """Build concrete dependencies, crawl, then save and notify.

    Raises ConfigError when no target pages can be built. Returns 1 when the
    results file could not be written, 0 otherwise.
    """
    pages = build_target_pages(options.location, options.engines, options.linkedin_mode)
    ctx.logger.info("Generated %d search URLs", len(pages))

    session = session or make_session(ctx.config.user_agent)
    if fetcher_factory is None:
        fetcher_factory = build_fetcher_factory(session, ctx)
    if notifier is None and options.notify == "telegram":
        notifier = TelegramNotifier(
            session=session,
            bot_token=ctx.config.telegram_bot_token,
            chat_id=ctx.config.telegram_chat_id,
            timeout=ctx.config.request_timeout,
            logger=ctx.logger,
        )

    results = crawl_pages(ctx, pages, options, fetcher_factory=fetcher_factory, sleep_fn=sleep_fn)
    ctx.logger.info("Pages with emails: %d", len(results))
    if options.verify_mx:
        results = filter_reachable(results, mx_checker)
        ctx.logger.info("Pages with mail-capable emails: %d", len(results))
    return deliver(results, options, ctx, notifier=notifier)


def automated_options(options: RunOptions) -> RunOptions:
    """Options for the scheduled daily search; output locations are kept."""
    return replace(
        options,
        location="worldwide",
        engines="google,bing",
        linkedin_mode=False,
        proxy_enabled=True,
        output_format="json",
        notify="telegram",
        verbose=True,
        automation=False,
        show_progress=False,
    )


def make_automated_job(options: RunOptions, ctx: RunContext) -> Callable[[], None]:
    """Return a job running the daily search with a fresh store on every call."""

    def job() -> None:
        run_ctx = RunContext(config=ctx.config, logger=ctx.logger, cancel_event=ctx.cancel_event)
        exit_code = run_pipeline(automated_options(options), run_ctx)
        if exit_code != 0:
            raise CareerFindError(f"automated run finished with exit code {exit_code}")

    return job
