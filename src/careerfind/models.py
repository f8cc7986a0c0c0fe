"""Protocols and lightweight model types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


@dataclass(frozen=True)
class Result:
    """All unique emails found on one fetched page."""

    emails: tuple[str, ...]
    location: str
    timestamp: datetime
    source: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "emails": list(self.emails),
            "location": self.location,
            "timestamp": format_timestamp(self.timestamp),
            "source": self.source,
        }


@dataclass(frozen=True)
class FetchedPage:
    """Raw content of one page; final_url differs from url after redirects."""

    url: str
    final_url: str
    html: str


class Fetcher(Protocol):
    """Contract for page fetchers."""

    def fetch(self, url: str) -> FetchedPage:
        """Return page content or raise FetchError/ProxySetupError."""


class NotificationSink(Protocol):
    """Contract for notification transports."""

    def send(self, message: str) -> None:
        """Deliver a formatted message or raise NotificationError."""


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as RFC 3339 with a Z suffix for UTC."""
    return value.isoformat(timespec="seconds").replace("+00:00", "Z")
