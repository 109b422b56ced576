"""Caller-side helpers for saved URL lists.

The scanner itself stores nothing.  These helpers let a caller keep a master
URL list between runs: parse an uploaded or pasted list, merge it with the
latest scan, hand it back to ``scan`` as ``exclude_urls``, and record which
pages were analysed.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from backend.scanner.models import AnalysisResult, URLRecord, UrlStatus
from backend.scraper.urls import canonicalize

_HTTP_PREFIXES = ("http://", "https://")


def _record(url: str, depth: Any = 0, status: Any = None) -> URLRecord | None:
    """Build a record, or return ``None`` when *url* cannot be parsed."""
    try:
        canonical = canonicalize(url)
    except ValueError:
        return None
    try:
        parsed_status = UrlStatus(status) if status else UrlStatus.PENDING
    except ValueError:
        parsed_status = UrlStatus.PENDING
    valid_depth = isinstance(depth, int) and not isinstance(depth, bool) and depth >= 0
    return URLRecord(
        url=canonical,
        depth=depth if valid_depth else 0,
        status=parsed_status,
    )


def parse_url_list(text: str) -> list[URLRecord]:
    """Parse newline-separated URLs or a JSON array into URL records.

    JSON items may be plain strings or ``{"url": ..., "depth": ..., "status": ...}``
    objects; a missing or unknown status reads as ``pending``.  Lines and
    items that are not parseable ``http(s)`` URLs are ignored.  Duplicates
    collapse onto the last occurrence.
    """
    records: list[URLRecord] = []

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None

    if isinstance(data, list):
        for item in data:
            if isinstance(item, str):
                url, depth, status = item, 0, None
            elif isinstance(item, dict):
                url, depth = item.get("url"), item.get("depth", 0)
                status = item.get("status")
            else:
                continue
            if isinstance(url, str) and url.strip().startswith(_HTTP_PREFIXES):
                record = _record(url, depth, status)
                if record is not None:
                    records.append(record)
    else:
        for line in text.splitlines():
            line = line.strip()
            if line.startswith(_HTTP_PREFIXES):
                record = _record(line)
                if record is not None:
                    records.append(record)

    return merge_url_lists([], records)


def merge_url_lists(
    existing: Iterable[URLRecord],
    incoming: Iterable[URLRecord],
) -> list[URLRecord]:
    """Merge two record lists keyed by canonical URL.

    On a conflict the incoming record wins (depth and status); the position
    of the first occurrence is kept.
    """
    merged: dict[str, URLRecord] = {}
    for record in [*existing, *incoming]:
        key = canonicalize(record.url)
        merged[key] = URLRecord(url=key, depth=record.depth, status=record.status)
    return list(merged.values())


def dump_url_list(records: Iterable[URLRecord], fmt: str = "text") -> str:
    """Serialise *records* as plain text (one URL per line) or JSON with status."""
    records = list(records)
    if fmt == "json":
        return json.dumps(
            [{**r.to_dict(), "status": r.status.value} for r in records], indent=2
        )
    return "\n".join(r.url for r in records) + ("\n" if records else "")


def apply_results(
    records: Iterable[URLRecord],
    results: Iterable[AnalysisResult],
) -> list[URLRecord]:
    """Return *records* with status moved to ``analyzed`` or ``error``.

    Records without a matching result keep their status.
    """
    by_url = {canonicalize(r.url): r for r in results}
    updated: list[URLRecord] = []
    for record in records:
        result = by_url.get(canonicalize(record.url))
        status = record.status
        if result is not None:
            status = UrlStatus.ERROR if result.error else UrlStatus.ANALYZED
        updated.append(URLRecord(url=record.url, depth=record.depth, status=status))
    return updated
