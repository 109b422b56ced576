"""Markup scanning: page title, visible text and same-site links.

Link discovery deliberately uses a regular expression over the raw markup
instead of a parse tree; real-world pages are frequently malformed and the
crawler only needs ``href`` targets.
"""

from __future__ import annotations

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from backend.config import settings
from backend.scraper.models import PageContent, RawPage
from backend.scraper.urls import canonicalize, hostname, is_http_url, is_same_site

_HREF_PATTERN = re.compile(r"""<a\b[^>]*?(?<![\w-])href\s*=\s*["']([^"']+)["']""", re.IGNORECASE)

# Targets that never lead to another page.
_SKIPPED_PREFIXES = ("javascript:", "mailto:", "tel:", "#")

_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _extract_title(html: str) -> str:
    """Return the text content of the first ``<title>`` tag, or empty string."""
    match = re.search(r"<title[^>]*>([^<]+)</title>", html, re.IGNORECASE)
    if match:
        return match.group(1).strip()
    return ""


def _visible_text(html: str) -> str:
    """Return the page's text with scripts and styles removed.

    Navigation and footer blocks are kept: portal links to legacy systems
    usually live there.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return _WHITESPACE.sub(" ", soup.get_text(separator=" ")).strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_links(html: str, base_url: str) -> list[str]:
    """Return canonical same-site links found in *html*, in document order.

    Relative targets are resolved against *base_url*.  A link is kept only
    when its host equals the host of *base_url* or is a subdomain of it.
    Each canonical URL appears once.
    """
    base_host = hostname(base_url)
    seen: set[str] = set()
    links: list[str] = []

    for match in _HREF_PATTERN.finditer(html):
        href = match.group(1).strip()
        if not href or href.lower().startswith(_SKIPPED_PREFIXES):
            continue
        try:
            absolute = urljoin(base_url, href)
        except ValueError:
            continue
        if not is_http_url(absolute) or not is_same_site(absolute, base_host):
            continue
        link = canonicalize(absolute)
        if link not in seen:
            seen.add(link)
            links.append(link)

    return links


def extract_page(raw: RawPage, limit: int | None = None) -> PageContent:
    """Build a :class:`PageContent` from *raw*.

    The visible text is whitespace-collapsed and truncated to *limit*
    characters (``settings.page_text_limit`` by default).
    """
    limit = limit if limit is not None else settings.page_text_limit
    text = _visible_text(raw.html)[:limit]
    return PageContent(url=raw.url, title=_extract_title(raw.html), text=text)
