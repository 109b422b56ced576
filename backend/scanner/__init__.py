"""Legacy-system website scanner: crawl, detect, classify, report.

Public API::

    from backend.scanner import scan, analyze, build_report
    payload = scan("https://example.edu", max_urls=50, max_depth=2)
"""

from backend.scanner.analyzer import analyze, analyze_payload
from backend.scanner.classifier import classify
from backend.scanner.crawler import crawl, scan
from backend.scanner.detector import detect
from backend.scanner.errors import OperationTimeoutError, ValidationError
from backend.scanner.report import build_report, render

__all__ = [
    "scan",
    "crawl",
    "analyze",
    "analyze_payload",
    "detect",
    "classify",
    "build_report",
    "render",
    "ValidationError",
    "OperationTimeoutError",
]
