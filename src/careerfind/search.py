"""Search-engine target page generation."""

from __future__ import annotations

from urllib.parse import quote_plus

from .errors import ConfigError

ALL_ENGINES = ("google", "bing", "duckduckgo")
SEARCH_URL_TEMPLATES = {
    "google": "https://www.google.com/search?q={query}&num=100",
    "bing": "https://www.bing.com/search?q={query}&count=100",
    "duckduckgo": "https://duckduckgo.com/?q={query}",
}
LINKEDIN_URL_TEMPLATE = "https://www.linkedin.com/jobs/search?keywords={query}"


def build_queries(location: str) -> list[str]:
    """Build career-contact queries scoped to one location."""
    return [
        f"email careers {location}",
        f"contact us jobs {location}",
        f"careers@company {location}",
        f"hr@company {location}",
        f"recruitment {location} email",
        f"apply jobs {location} contact",
    ]


def build_linkedin_queries(location: str) -> list[str]:
    return [f"jobs {location}", f"careers {location}", f"hiring {location}"]


def parse_engines(engines: str) -> list[str]:
    """Split a comma list of engine names; ``all`` selects every known engine."""
    names = [name.strip() for name in engines.lower().split(",") if name.strip()]
    if names == ["all"]:
        return list(ALL_ENGINES)
    return names


def build_target_pages(
    location: str, engines: str = "all", linkedin_mode: bool = False
) -> list[str]:
    """Return every search URL to crawl, in engine then query order.

    Unknown engine names are skipped. Raises ConfigError for an empty location
    or when no URL could be produced.
    """
    location = location.strip()
    if not location:
        raise ConfigError("location cannot be empty")

    pages: list[str] = []
    for engine in parse_engines(engines):
        template = SEARCH_URL_TEMPLATES.get(engine)
        if template is None:
            continue
        for query in build_queries(location):
            pages.append(template.format(query=quote_plus(query)))

    if linkedin_mode:
        for query in build_linkedin_queries(location):
            pages.append(LINKEDIN_URL_TEMPLATE.format(query=quote_plus(query)))

    if not pages:
        raise ConfigError("no valid search engines specified")
    return pages
