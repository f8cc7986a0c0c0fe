"""Telegram notification sink and summary formatting."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from requests import Session
from requests.exceptions import RequestException

from .errors import NotificationError
from .models import Result

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"
MAX_MESSAGE_LENGTH = 4096
SUMMARY_SEPARATOR = "-------------------"


def format_summary(results: Sequence[Result]) -> str:
    """Render the results as a human-readable notification body."""
    lines = ["📧 CareerFind Results", ""]
    for result in results:
        lines.append(f"📍 Location: {result.location}")
        lines.append(f"🕒 Time: {result.timestamp.strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append("📧 Emails:")
        lines.extend(f"- {email}" for email in result.emails)
        lines.append(f"🔗 Source: {result.source}")
        lines.append(SUMMARY_SEPARATOR)
    return "\n".join(lines) + "\n"


def split_message(message: str, limit: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Split on line boundaries so every chunk fits in one Telegram message."""
    chunks: list[str] = []
    current = ""
    for line in message.splitlines(keepends=True):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        if len(current) + len(line) > limit:
            chunks.append(current)
            current = ""
        current += line
    if current:
        chunks.append(current)
    return chunks


class TelegramNotifier:
    """Sends messages to one chat through the Telegram Bot API."""

    def __init__(
        self,
        *,
        session: Session,
        bot_token: str,
        chat_id: str,
        timeout: float,
        logger: logging.Logger,
    ) -> None:
        self._session = session
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._timeout = timeout
        self._logger = logger

    def _resolve_chat_id(self) -> int:
        if not self._bot_token or not self._chat_id:
            raise NotificationError("Telegram configuration is missing")
        try:
            return int(self._chat_id)
        except ValueError as exc:
            raise NotificationError(f"invalid Telegram chat ID: {self._chat_id!r}") from exc

    def send(self, message: str) -> None:
        chat_id = self._resolve_chat_id()
        url = TELEGRAM_API_URL.format(token=self._bot_token)
        for chunk in split_message(message):
            try:
                response = self._session.post(
                    url, json={"chat_id": chat_id, "text": chunk}, timeout=self._timeout
                )
                payload = response.json()
            except (RequestException, ValueError) as exc:
                reason = str(exc).replace(self._bot_token, "<token>")
                raise NotificationError(f"failed to send Telegram message: {reason}") from exc
            if not (isinstance(payload, dict) and payload.get("ok")):
                description = payload.get("description") if isinstance(payload, dict) else None
                reason = description or "unknown error"
                raise NotificationError(
                    f"Telegram rejected message (HTTP {response.status_code}): {reason}"
                )
        self._logger.debug("Sent Telegram notification to chat %s", chat_id)
