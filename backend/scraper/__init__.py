"""Scraper package — page fetch, link extraction and text extraction."""

from backend.scraper.extractor import extract_links, extract_page
from backend.scraper.fetcher import fetch_url
from backend.scraper.models import PageContent, RawPage
from backend.scraper.urls import canonicalize

__all__ = [
    "fetch_url",
    "extract_links",
    "extract_page",
    "canonicalize",
    "RawPage",
    "PageContent",
]
