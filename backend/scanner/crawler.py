"""Bounded breadth-first crawl of a single site.

``crawl`` walks outward from a seed URL one page at a time.  Two caps bound
the walk: ``max_depth`` (link hops from the seed) and ``max_urls`` (records
returned).  Breadth-first order means shallow pages are recorded first when
the count cap truncates the crawl.

An optional exclude set lets a caller re-run a scan against the same site
without re-fetching pages it already knows about.  Excluded URLs are never
fetched, never recorded and never contribute links.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Iterable

from backend.config import settings
from backend.scanner.errors import Deadline, ValidationError
from backend.scanner.models import URLRecord
from backend.scraper.extractor import extract_links
from backend.scraper.fetcher import fetch_url
from backend.scraper.urls import canonicalize, is_http_url


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def normalize_seed(url: str) -> str:
    """Return the canonical seed URL, adding ``https://`` when no scheme is given.

    Raises:
        ValidationError: If *url* is empty or not a usable ``http(s)`` URL.
    """
    url = (url or "").strip()
    if not url:
        raise ValidationError("URL is required")
    if not url.startswith("http"):
        url = f"https://{url}"
    if not is_http_url(url):
        raise ValidationError("Invalid URL format")
    return canonicalize(url)


def validate_limits(max_urls: int, max_depth: int) -> None:
    """Reject caps outside ``1..settings.max_scan_urls`` / ``0..settings.max_scan_depth``."""
    if max_urls < 1:
        raise ValidationError("maxUrls must be at least 1")
    if max_urls > settings.max_scan_urls:
        raise ValidationError(f"Maximum {settings.max_scan_urls} URLs allowed")
    if max_depth < 0:
        raise ValidationError("maxDepth cannot be negative")
    if max_depth > settings.max_scan_depth:
        raise ValidationError(f"Maximum depth is {settings.max_scan_depth} layers")


# ---------------------------------------------------------------------------
# Frontier
# ---------------------------------------------------------------------------

class Frontier:
    """FIFO queue plus visited set for one crawl.

    A URL is queued at most once; breadth-first order guarantees the first
    time it is seen is also its shallowest depth.
    """

    def __init__(self, exclude: Iterable[str] = ()) -> None:
        self._queue: deque[tuple[str, int]] = deque()
        self._queued: set[str] = set()
        self.visited: set[str] = set()
        self.excluded: set[str] = set()
        for url in exclude:
            try:
                self.excluded.add(canonicalize(url))
            except ValueError:
                continue

    def __bool__(self) -> bool:
        return bool(self._queue)

    def push(self, url: str, depth: int) -> None:
        if url in self._queued or url in self.visited or url in self.excluded:
            return
        self._queued.add(url)
        self._queue.append((url, depth))

    def pop(self) -> tuple[str, int]:
        return self._queue.popleft()


# ---------------------------------------------------------------------------
# Crawl
# ---------------------------------------------------------------------------

def crawl(
    seed_url: str,
    max_depth: int = 5,
    max_urls: int = 200,
    exclude: Iterable[str] = (),
    deadline: Deadline | None = None,
) -> list[URLRecord]:
    """Discover same-site pages reachable from *seed_url*.

    Args:
        seed_url: Starting page.  Normalised with :func:`normalize_seed`.
        max_depth: Deepest link hop to record (the seed is depth 0).
        max_urls: Maximum number of records to return.
        exclude: URLs to skip entirely (compared in canonical form).
        deadline: Optional run deadline checked around every fetch.

    Returns:
        :class:`URLRecord` objects in discovery order, all ``pending``.

    Raises:
        ValidationError: If the seed or the caps are invalid.
        OperationTimeoutError: If *deadline* passes mid-crawl.
    """
    seed = normalize_seed(seed_url)
    validate_limits(max_urls, max_depth)

    frontier = Frontier(exclude)
    frontier.push(seed, 0)
    records: list[URLRecord] = []

    while frontier and len(records) < max_urls:
        url, depth = frontier.pop()
        if url in frontier.visited or depth > max_depth or url in frontier.excluded:
            continue

        frontier.visited.add(url)
        records.append(URLRecord(url=url, depth=depth))

        if depth >= max_depth or len(records) >= max_urls:
            continue

        if deadline is not None:
            deadline.check()
        raw = fetch_url(
            url,
            timeout=settings.crawl_timeout,
            max_redirects=settings.crawl_max_redirects,
        )
        if deadline is not None:
            deadline.check()
        if raw is None:
            continue

        links = extract_links(raw.html, url)
        for link in links:
            frontier.push(link, depth + 1)
        print(f"[CRAWL] depth={depth} {url} → {len(links)} link(s)")

    print(f"[CRAWL] Done: {len(records)} URL(s) from {seed}")
    return records


def scan(
    seed_url: str,
    max_urls: int = 200,
    max_depth: int = 5,
    exclude_urls: Iterable[str] = (),
    timeout: float | None = None,
) -> dict[str, Any]:
    """Crawl *seed_url* under the run ceiling and return ``{urls, count}``.

    *timeout* defaults to ``settings.operation_timeout``.
    """
    deadline = Deadline(
        timeout if timeout is not None else settings.operation_timeout, "scan"
    )
    records = crawl(
        seed_url,
        max_depth=max_depth,
        max_urls=max_urls,
        exclude=exclude_urls,
        deadline=deadline,
    )
    return {"urls": [r.to_dict() for r in records], "count": len(records)}
