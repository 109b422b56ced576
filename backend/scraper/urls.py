"""URL normalisation helpers shared by the link extractor and the crawler.

The canonical form of a URL has a lower-cased scheme and host, no fragment,
and no trailing slash.  Two URLs that differ only in those respects refer to
the same crawl target.
"""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

_HTTP_SCHEMES = ("http", "https")


def canonicalize(url: str) -> str:
    """Return the canonical form of *url* (idempotent).

    >>> canonicalize("https://Example.edu/admissions/#apply")
    'https://example.edu/admissions'
    """
    parts = urlsplit(url.strip())
    rebuilt = urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, "")
    )
    return rebuilt.rstrip("/")


def is_http_url(url: str) -> bool:
    """Return ``True`` if *url* is an absolute ``http(s)`` URL with a host."""
    try:
        parts = urlsplit(url)
        return parts.scheme.lower() in _HTTP_SCHEMES and bool(parts.hostname)
    except ValueError:
        return False


def hostname(url: str) -> str:
    """Return the lower-cased host of *url*, or an empty string."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def is_same_site(url: str, base_host: str) -> bool:
    """``True`` when *url* is on *base_host* or one of its subdomains."""
    host = hostname(url)
    if not host or not base_host:
        return False
    return host == base_host or host.endswith(f".{base_host}")
