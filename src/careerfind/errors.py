"""Custom exceptions for the crawl domain."""

from __future__ import annotations


class CareerFindError(Exception):
    """Base exception for this project."""


class ConfigError(CareerFindError):
    """Raised when runtime configuration is invalid."""


class ProxySetupError(CareerFindError):
    """Raised when the proxy connection cannot be established. Never retried."""


class FetchError(CareerFindError):
    """Raised when fetching a page fails."""


class PersistenceError(CareerFindError):
    """Raised when results cannot be written to a sink."""


class NotificationError(CareerFindError):
    """Raised when a notification cannot be delivered."""


class CrawlError(CareerFindError):
    """Aggregate of every worker failure from one crawl run."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("multiple errors occurred: " + "; ".join(self.messages))


class CrawlCancelledError(CrawlError):
    """Returned when the crawl was cancelled before every page was launched."""

    def __init__(self, launched: int, total: int) -> None:
        self.launched = launched
        self.total = total
        CareerFindError.__init__(
            self, f"crawl cancelled after launching {launched} of {total} pages"
        )
        self.messages = [str(self)]
