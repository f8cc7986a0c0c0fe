"""Pure email extraction utilities."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

EMAIL_PATTERN = r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}"
EMAIL_REGEX = re.compile(EMAIL_PATTERN)
MAILTO_PREFIX = "mailto:"


def is_valid_email(value: str) -> bool:
    """Return True when the whole value matches the email grammar."""
    return EMAIL_REGEX.fullmatch(value) is not None


def extract_emails(text: str) -> set[str]:
    """Return the distinct, validated emails found in plain text.

    Matching is case-sensitive: ``A@b.com`` and ``a@b.com`` are kept apart.
    """
    return {
        match.group(0)
        for match in EMAIL_REGEX.finditer(text or "")
        if is_valid_email(match.group(0))
    }


def extract_mailto(href: str) -> set[str]:
    """Return the address of a ``mailto:`` target, without its query string."""
    value = (href or "").strip()
    if not value.lower().startswith(MAILTO_PREFIX):
        return set()
    address = value[len(MAILTO_PREFIX) :].split("?", maxsplit=1)[0].strip()
    return {address} if is_valid_email(address) else set()


def find_mailto_links(html: str) -> list[str]:
    """Collect mailto hrefs from anchors in document order, without duplicates."""
    links: list[str] = []
    soup = BeautifulSoup(html or "", "html.parser")
    for anchor in soup.find_all("a", href=True):
        href = str(anchor["href"]).strip()
        if href.lower().startswith(MAILTO_PREFIX) and href not in links:
            links.append(href)
    return links


def extract_page_emails(html: str) -> set[str]:
    """Union of emails in the page body and in its mailto links."""
    emails = extract_emails(html)
    for href in find_mailto_links(html):
        emails |= extract_mailto(href)
    return emails
