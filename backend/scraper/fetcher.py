"""HTTP fetcher used by both the crawler and the page analyzer.

A fetch either yields a :class:`RawPage` or ``None``.  Transport errors,
timeouts, redirect loops and non-2xx statuses are all reported the same way
so callers never need to tell the causes apart.
"""

from __future__ import annotations

import httpx

from backend.config import settings
from backend.scraper.models import RawPage

_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent, "Accept": _ACCEPT}


def fetch_url(
    url: str,
    timeout: float | None = None,
    max_redirects: int | None = None,
) -> RawPage | None:
    """Fetch *url* and return a :class:`RawPage`, or ``None`` on any failure.

    Args:
        url: Absolute ``http(s)`` URL.
        timeout: Per-request timeout in seconds.  Defaults to
            ``settings.crawl_timeout``.
        max_redirects: Maximum redirect hops.  Defaults to
            ``settings.crawl_max_redirects``.
    """
    try:
        with httpx.Client(
            headers=_default_headers(),
            timeout=timeout if timeout is not None else settings.crawl_timeout,
            follow_redirects=True,
            max_redirects=(
                max_redirects if max_redirects is not None
                else settings.crawl_max_redirects
            ),
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            html = response.text
            status_code = response.status_code
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        print(f"[FETCH] ✗ {url}: {exc}")
        return None

    return RawPage(url=url, html=html, status_code=status_code)
