"""Validation and runtime guardrails."""

from __future__ import annotations

import socket
from urllib.parse import urlparse

import dns.resolver

from .errors import ConfigError


def is_supported_url(url: str) -> bool:
    """Allow only absolute HTTP(S) URLs with a hostname."""
    parsed = urlparse(url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def validate_runtime_constraints(
    *,
    request_timeout: float,
    rate_limit_ms: int,
    user_agent: str,
    max_retries: int,
) -> None:
    """Validate runtime configuration and raise ConfigError listing every problem."""
    problems: list[str] = []
    if request_timeout <= 0:
        problems.append("invalid request timeout value")
    if rate_limit_ms <= 0:
        problems.append("invalid rate limit value")
    if not user_agent:
        problems.append("user agent cannot be empty")
    if max_retries < 0:
        problems.append("max retries must be >= 0")
    if problems:
        raise ConfigError("configuration validation failed: " + ", ".join(problems))


def domain_accepts_mail(domain: str) -> bool:
    """Return True when the domain publishes an MX record or at least resolves."""
    if not domain:
        return False
    try:
        return bool(dns.resolver.resolve(domain, "MX", lifetime=8))
    except (dns.resolver.NoAnswer, dns.resolver.NXDOMAIN, dns.resolver.NoNameservers):
        pass
    except dns.exception.DNSException:
        return False
    try:
        socket.gethostbyname(domain)
    except OSError:
        return False
    return True


def mx_check(email: str) -> bool:
    """Return True when the email's domain can receive mail."""
    _, _, domain = email.partition("@")
    return domain_accepts_mail(domain)
