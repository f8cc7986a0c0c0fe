"""CLI entrypoint for careerfind."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from .config import DEFAULT_CONFIG_PATH, VERSION, RunOptions, load_config
from .context import RunContext
from .errors import ConfigError
from .logging_utils import configure_logging, get_logger
from .persistence import OUTPUT_FORMATS
from .pipeline import make_automated_job, run_pipeline
from .scheduler import DailyScheduler


def _non_empty(value: str) -> str:
    if not value.strip():
        raise argparse.ArgumentTypeError("must not be empty")
    return value.strip()


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        prog="careerfind",
        description="CareerFind - collect career contact emails from search results.",
    )
    parser.add_argument(
        "-L", "--location", type=_non_empty, help="Filter by location (city/country)."
    )
    parser.add_argument(
        "-p",
        "--proxy",
        action="store_true",
        help="Route requests through the SOCKS5 proxy (requires PROXY_ADDRESS or proxy_address).",
    )
    parser.add_argument(
        "-b",
        "--engines",
        default="all",
        help="Search engines: google,bing,duckduckgo (comma-separated) or all.",
    )
    parser.add_argument(
        "-l", "--linkedin", action="store_true", help="Also search LinkedIn job posts."
    )
    parser.add_argument(
        "-o", "--output-format", choices=OUTPUT_FORMATS, default="json", help="Output format."
    )
    parser.add_argument(
        "-m",
        "--notify",
        choices=("telegram", "none"),
        default="telegram",
        help="Notification method.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    parser.add_argument(
        "-a", "--automation", action="store_true", help="Keep running and search again daily."
    )
    parser.add_argument("--version", action="store_true", help="Show version information.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to JSON config file.")
    parser.add_argument("--output-dir", default=".", help="Directory for result files.")
    parser.add_argument(
        "--db", default="careerfind.db", help="SQLite database path (empty string disables)."
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file.")
    parser.add_argument(
        "--verify-mx",
        action="store_true",
        help="Drop emails whose domain has no MX or A record.",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable tqdm progress bars.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse and pre-validate CLI input."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.version and not args.location:
        parser.error("-L/--location is required.")
    return args


def namespace_to_options(args: argparse.Namespace) -> RunOptions:
    """Convert CLI args to RunOptions."""
    return RunOptions(
        location=args.location,
        engines=args.engines,
        linkedin_mode=args.linkedin,
        proxy_enabled=args.proxy,
        output_format=args.output_format,
        notify=args.notify,
        verbose=args.verbose,
        automation=args.automation,
        output_dir=args.output_dir,
        db_path=args.db,
        verify_mx=args.verify_mx,
        show_progress=not args.no_progress,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    if args.version:
        print(f"CareerFind v{VERSION}")
        return 0

    configure_logging(args.verbose, args.log_file)
    logger = get_logger()
    options = namespace_to_options(args)
    try:
        config = load_config(path=args.config, logger=logger)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 1
    if options.proxy_enabled and not config.proxy_address:
        logger.warning("Proxy requested but no proxy address is configured; connecting directly.")

    ctx = RunContext(config=config, logger=logger)
    if options.verbose:
        logger.info("Starting CareerFind with location: %s", options.location)
    try:
        exit_code = run_pipeline(options, ctx)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    if options.automation:
        scheduler = DailyScheduler(
            make_automated_job(options, ctx), cancel_event=ctx.cancel_event, logger=logger
        )
        try:
            scheduler.run()
        except KeyboardInterrupt:
            ctx.cancel()
            logger.info("Automation stopped.")

    if options.verbose:
        logger.info("CareerFind execution completed")
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
