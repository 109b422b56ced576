"""Data models for the scraper layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass
class PageContent:
    """Title and visible text extracted from a :class:`RawPage`."""

    url: str
    title: str
    text: str
