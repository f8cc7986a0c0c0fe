"""Thread-safe accumulator of crawl results."""

from __future__ import annotations

from threading import Lock

from .models import Result


class ResultStore:
    """Append-only, lock-protected list of results in worker completion order."""

    def __init__(self) -> None:
        self._results: list[Result] = []
        self._lock = Lock()

    def append(self, result: Result) -> None:
        with self._lock:
            self._results.append(result)

    def snapshot(self) -> list[Result]:
        """Return a stable copy of the current contents."""
        with self._lock:
            return list(self._results)

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)
