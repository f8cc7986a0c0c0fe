"""HTTP page fetcher and SOCKS5 proxy dialer."""

from __future__ import annotations

import logging
import socket
from collections.abc import Mapping

from requests import Session
from requests.exceptions import InvalidSchema, ProxyError, RequestException

from .errors import FetchError, ProxySetupError
from .models import FetchedPage
from .validation import is_supported_url

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}
_SOCKS_SCHEMES = ("socks5://", "socks5h://")


def _split_proxy_address(address: str) -> tuple[str, int]:
    value = address.strip()
    for scheme in _SOCKS_SCHEMES:
        if value.lower().startswith(scheme):
            value = value[len(scheme) :]
            break
    host, _, port_text = value.rstrip("/").rpartition(":")
    if not host or not port_text.isdigit() or not 0 < int(port_text) < 65536:
        raise ProxySetupError(f"invalid SOCKS5 proxy address: {address!r}")
    return host.strip("[]"), int(port_text)


class Socks5Dialer:
    """Routes requests through a SOCKS5 proxy; DNS is resolved at the proxy."""

    def __init__(self, address: str) -> None:
        self.host, self.port = _split_proxy_address(address)
        try:
            import socks  # noqa: F401  # PySocks backs requests' socks5h:// scheme
        except ImportError as exc:
            raise ProxySetupError(
                "SOCKS support is not installed. Use pip install requests[socks]."
            ) from exc

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def proxies(self) -> dict[str, str]:
        url = f"socks5h://{self.address}"
        return {"http": url, "https": url}

    def ensure_reachable(self, timeout: float) -> None:
        """Open and close one TCP connection to the proxy."""
        try:
            with socket.create_connection((self.host, self.port), timeout=timeout):
                pass
        except OSError as exc:
            raise ProxySetupError(f"cannot reach SOCKS5 proxy {self.address}: {exc}") from exc


def make_session(user_agent: str) -> Session:
    """Create a requests session with a browser-like header set."""
    session = Session()
    session.headers.update({"User-Agent": user_agent, **BROWSER_HEADERS})
    return session


class PageFetcher:
    """Issues exactly one GET per call; retrying is left to the caller."""

    def __init__(
        self,
        *,
        session: Session,
        timeout: float,
        logger: logging.Logger,
        dialer: Socks5Dialer | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._session = session
        self._timeout = timeout
        self._logger = logger
        self._dialer = dialer
        self._headers = dict(headers or {})

    def fetch(self, url: str) -> FetchedPage:
        if not is_supported_url(url):
            raise FetchError(f"unsupported URL: {url}")
        proxies = None
        if self._dialer is not None:
            self._dialer.ensure_reachable(self._timeout)
            proxies = self._dialer.proxies()
        try:
            response = self._session.get(
                url, headers=self._headers, proxies=proxies, timeout=self._timeout
            )
            response.raise_for_status()
        except ProxyError as exc:
            raise ProxySetupError(f"proxy connection failed: {exc}") from exc
        except InvalidSchema as exc:
            if self._dialer is not None:
                raise ProxySetupError(f"proxy connection failed: {exc}") from exc
            raise FetchError(str(exc)) from exc
        except RequestException as exc:
            self._logger.debug("Fetch failed for %s: %s", url, exc)
            raise FetchError(str(exc)) from exc
        return FetchedPage(url=url, final_url=str(response.url or url), html=str(response.text))
