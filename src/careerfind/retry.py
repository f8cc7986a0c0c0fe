"""Exponential backoff retry policy for page fetches."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .errors import FetchError

T = TypeVar("T")
SleepFn = Callable[[float], None]
RetryHook = Callable[[int, float, FetchError], None]


@dataclass(frozen=True)
class RetryPolicy:
    """Retry FetchError up to max_retries times, sleeping base ** attempt seconds.

    The attempt counter starts at 0, so the waits are 1s, 2s, 4s, ... for the
    default base. Any other exception, including ProxySetupError, propagates
    on the first occurrence.
    """

    max_retries: int = 3
    base: float = 2.0
    sleep: SleepFn = time.sleep

    def retrying(self, on_retry: RetryHook | None = None) -> Retrying:
        def before_sleep(retry_state: RetryCallState) -> None:
            if on_retry is None or retry_state.outcome is None:
                return
            wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
            on_retry(retry_state.attempt_number, wait, retry_state.outcome.exception())

        return Retrying(
            retry=retry_if_exception_type(FetchError),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=1, exp_base=self.base),
            sleep=self.sleep,
            before_sleep=before_sleep,
            reraise=True,
        )

    def call(self, fn: Callable[[], T], on_retry: RetryHook | None = None) -> T:
        return self.retrying(on_retry)(fn)
