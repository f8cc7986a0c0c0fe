import logging
from datetime import datetime, timezone
from typing import Any

import pytest
import requests

from careerfind.errors import NotificationError
from careerfind.models import Result
from careerfind.notify import TelegramNotifier, format_summary, split_message


class FakeResponse:
    def __init__(self, *, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload if payload is not None else {"ok": True}

    def json(self) -> Any:
        return self._payload


class FakeSession:
    def __init__(
        self, response: FakeResponse | None = None, error: Exception | None = None
    ) -> None:
        self._response = response or FakeResponse()
        self._error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((url, kwargs))
        if self._error is not None:
            raise self._error
        return self._response


def _notifier(
    session: FakeSession, token: str = "123:abc", chat_id: str = "42"
) -> TelegramNotifier:
    return TelegramNotifier(
        session=session,  # type: ignore[arg-type]
        bot_token=token,
        chat_id=chat_id,
        timeout=5.0,
        logger=logging.getLogger("test"),
    )


def test_format_summary_lists_each_result() -> None:
    message = format_summary(
        [
            Result(
                emails=("hr@example.com", "jobs@example.com"),
                location="https://duckduckgo.com/?q=jobs",
                timestamp=datetime(2026, 5, 6, 7, 8, 9, tzinfo=timezone.utc),
                source="https://example.com/careers",
            )
        ]
    )
    assert message.splitlines() == [
        "📧 CareerFind Results",
        "",
        "📍 Location: https://duckduckgo.com/?q=jobs",
        "🕒 Time: 2026-05-06 07:08:09",
        "📧 Emails:",
        "- hr@example.com",
        "- jobs@example.com",
        "🔗 Source: https://example.com/careers",
        "-------------------",
    ]


def test_send_posts_to_bot_api() -> None:
    session = FakeSession()
    _notifier(session).send("hello")
    url, kwargs = session.calls[0]
    assert url == "https://api.telegram.org/bot123:abc/sendMessage"
    assert kwargs["json"] == {"chat_id": 42, "text": "hello"}
    assert kwargs["timeout"] == 5.0


@pytest.mark.parametrize("token,chat_id", [("", "42"), ("123:abc", "")])
def test_send_requires_credentials(token: str, chat_id: str) -> None:
    session = FakeSession()
    with pytest.raises(NotificationError, match="missing"):
        _notifier(session, token=token, chat_id=chat_id).send("hello")
    assert session.calls == []


def test_send_rejects_non_numeric_chat_id() -> None:
    with pytest.raises(NotificationError, match="chat ID"):
        _notifier(FakeSession(), chat_id="@channel").send("hello")


def test_send_surfaces_api_rejection() -> None:
    session = FakeSession(
        FakeResponse(status_code=401, payload={"ok": False, "description": "Unauthorized"})
    )
    with pytest.raises(NotificationError, match="Unauthorized"):
        _notifier(session).send("hello")


def test_send_hides_token_in_transport_errors() -> None:
    session = FakeSession(
        error=requests.ConnectionError("https://api.telegram.org/bot123:abc/sendMessage down")
    )
    with pytest.raises(NotificationError) as excinfo:
        _notifier(session).send("hello")
    assert "123:abc" not in str(excinfo.value)


def test_long_messages_are_split_on_lines() -> None:
    message = "".join(f"line {index:04d}\n" for index in range(1000))
    chunks = split_message(message, limit=100)
    assert all(len(chunk) <= 100 for chunk in chunks)
    assert "".join(chunks) == message

    session = FakeSession()
    _notifier(session).send("x" * 5000)
    assert [len(call[1]["json"]["text"]) for call in session.calls] == [4096, 904]
