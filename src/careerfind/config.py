"""Runtime configuration model and loaders."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .validation import validate_runtime_constraints

VERSION = "2.0.0"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_RATE_LIMIT_MS = 1000
DEFAULT_MAX_RETRIES = 3
DEFAULT_CONFIG_PATH = "config.json"

# JSON file key -> dataclass field
_FILE_KEYS = {
    "telegram_bot_token": "telegram_bot_token",
    "telegram_chat_id": "telegram_chat_id",
    "proxy_address": "proxy_address",
    "request_timeout_seconds": "request_timeout",
    "rate_limit_ms": "rate_limit_ms",
    "user_agent": "user_agent",
    "max_retries": "max_retries",
}
_INT_FIELDS = frozenset({"request_timeout", "rate_limit_ms", "max_retries"})


@dataclass(frozen=True)
class CrawlConfig:
    """Validated configuration shared by every stage of a run."""

    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    rate_limit_ms: int = DEFAULT_RATE_LIMIT_MS
    proxy_address: str = ""
    user_agent: str = DEFAULT_USER_AGENT
    max_retries: int = DEFAULT_MAX_RETRIES
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""

    def __post_init__(self) -> None:
        validate_runtime_constraints(
            request_timeout=self.request_timeout,
            rate_limit_ms=self.rate_limit_ms,
            user_agent=self.user_agent,
            max_retries=self.max_retries,
        )

    @property
    def rate_limit_seconds(self) -> float:
        return self.rate_limit_ms / 1000.0


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    value = env.get(key, "")
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _check_file_value(key: str, field: str, value: Any) -> None:
    if field in _INT_FIELDS:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigError(f"config file field {key} must be an integer, got {value!r}")
    elif field == "telegram_chat_id":
        if not isinstance(value, (str, int)) or isinstance(value, bool):
            raise ConfigError(f"config file field {key} must be a string or integer")
    elif not isinstance(value, str):
        raise ConfigError(f"config file field {key} must be a string, got {value!r}")


def read_config_file(path: str) -> dict[str, Any]:
    """Read the JSON config file and map its keys onto CrawlConfig fields.

    Raises ConfigError when a field holds a value of the wrong JSON type.
    """
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{path} must contain a JSON object")
    values: dict[str, Any] = {}
    for key, field in _FILE_KEYS.items():
        if key in payload:
            _check_file_value(key, field, payload[key])
            values[field] = payload[key]
    return values


def load_config(
    env: Mapping[str, str] | None = None,
    *,
    path: str = DEFAULT_CONFIG_PATH,
    logger: logging.Logger,
) -> CrawlConfig:
    """Build configuration from environment variables, falling back to the JSON file.

    The file is only consulted when the Telegram credentials are absent from the
    environment; values it provides override the environment ones. A missing or
    malformed file is logged and ignored. Raises ConfigError when a file field has
    the wrong type or the merged values are invalid.
    """
    env = os.environ if env is None else env
    values: dict[str, Any] = {
        "telegram_bot_token": env.get("TELEGRAM_BOT_TOKEN", ""),
        "telegram_chat_id": env.get("TELEGRAM_CHAT_ID", ""),
        "proxy_address": env.get("PROXY_ADDRESS", ""),
        "request_timeout": _env_int(env, "REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        "rate_limit_ms": _env_int(env, "RATE_LIMIT_MS", DEFAULT_RATE_LIMIT_MS),
        "user_agent": env.get("USER_AGENT", ""),
        "max_retries": _env_int(env, "MAX_RETRIES", DEFAULT_MAX_RETRIES),
    }

    if not (values["telegram_bot_token"] and values["telegram_chat_id"]):
        try:
            values.update(read_config_file(path))
        except (OSError, ValueError) as exc:
            logger.warning("Could not load config file %s: %s", path, exc)

    if not values["user_agent"]:
        values["user_agent"] = DEFAULT_USER_AGENT
    values["telegram_chat_id"] = str(values["telegram_chat_id"] or "")
    return CrawlConfig(**values)


@dataclass(frozen=True)
class RunOptions:
    """Per-invocation choices, usually taken from the command line."""

    location: str
    engines: str = "all"
    linkedin_mode: bool = False
    proxy_enabled: bool = False
    output_format: str = "json"
    notify: str = "telegram"
    verbose: bool = False
    automation: bool = False
    output_dir: str = "."
    db_path: str = ""
    verify_mx: bool = False
    show_progress: bool = True
