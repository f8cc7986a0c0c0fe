import json
import logging
from pathlib import Path

import pytest

from careerfind.config import DEFAULT_USER_AGENT, CrawlConfig, load_config
from careerfind.errors import ConfigError

LOGGER = logging.getLogger("test")


def test_defaults_are_valid() -> None:
    config = CrawlConfig()
    assert config.request_timeout == 30
    assert config.rate_limit_ms == 1000
    assert config.rate_limit_seconds == 1.0
    assert config.max_retries == 3


@pytest.mark.parametrize(
    "changes",
    [{"request_timeout": 0}, {"rate_limit_ms": -5}, {"user_agent": ""}, {"max_retries": -1}],
)
def test_invalid_values_raise_config_error(changes: dict[str, object]) -> None:
    with pytest.raises(ConfigError, match="configuration validation failed"):
        CrawlConfig(**changes)  # type: ignore[arg-type]


def test_every_problem_is_reported() -> None:
    with pytest.raises(ConfigError) as excinfo:
        CrawlConfig(request_timeout=0, rate_limit_ms=0)
    assert "invalid request timeout value" in str(excinfo.value)
    assert "invalid rate limit value" in str(excinfo.value)


def test_load_config_from_environment(tmp_path: Path) -> None:
    env = {
        "TELEGRAM_BOT_TOKEN": "123:abc",
        "TELEGRAM_CHAT_ID": "42",
        "PROXY_ADDRESS": "127.0.0.1:9050",
        "REQUEST_TIMEOUT": "12",
        "RATE_LIMIT_MS": "250",
        "USER_AGENT": "agent/1.0",
        "MAX_RETRIES": "5",
    }
    config = load_config(env, path=str(tmp_path / "absent.json"), logger=LOGGER)
    assert config == CrawlConfig(
        request_timeout=12,
        rate_limit_ms=250,
        proxy_address="127.0.0.1:9050",
        user_agent="agent/1.0",
        max_retries=5,
        telegram_bot_token="123:abc",
        telegram_chat_id="42",
    )


def test_load_config_falls_back_to_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "telegram_bot_token": "file-token",
                "telegram_chat_id": 99,
                "proxy_address": "proxy:1080",
                "request_timeout_seconds": 9,
                "rate_limit_ms": 400,
            }
        ),
        encoding="utf-8",
    )
    config = load_config({"RATE_LIMIT_MS": "700"}, path=str(path), logger=LOGGER)
    assert config.telegram_bot_token == "file-token"
    assert config.telegram_chat_id == "99"
    assert config.proxy_address == "proxy:1080"
    assert config.request_timeout == 9
    assert config.rate_limit_ms == 400
    assert config.user_agent == DEFAULT_USER_AGENT


def test_missing_file_is_only_a_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="test"):
        config = load_config(
            {"REQUEST_TIMEOUT": "abc"}, path=str(tmp_path / "nope.json"), logger=LOGGER
        )
    assert config.request_timeout == 30
    assert "Could not load config file" in caplog.text


def test_malformed_file_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2", encoding="utf-8")
    assert load_config({}, path=str(path), logger=LOGGER) == CrawlConfig()


def test_invalid_environment_values_raise(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config({"RATE_LIMIT_MS": "0"}, path=str(tmp_path / "nope.json"), logger=LOGGER)


@pytest.mark.parametrize(
    "payload",
    [
        {"request_timeout_seconds": "30"},
        {"max_retries": None},
        {"rate_limit_ms": "fast"},
        {"rate_limit_ms": True},
        {"proxy_address": 1080},
    ],
)
def test_mistyped_file_values_raise_config_error(
    tmp_path: Path, payload: dict[str, object]
) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ConfigError, match="config file field"):
        load_config({}, path=str(path), logger=LOGGER)
