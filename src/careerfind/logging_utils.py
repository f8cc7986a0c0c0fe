"""Logging helpers."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
LOGGER_NAME = "careerfind"


def configure_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Configure application logging once for CLI usage, optionally mirroring to a file."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)


def get_logger() -> logging.Logger:
    """Return the logger used across the package."""
    return logging.getLogger(LOGGER_NAME)
