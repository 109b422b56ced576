"""Page analysis: fetch → extract → detect → classify, one page at a time.

Pages and snippets are processed sequentially in request order.  This keeps
load on the target site and the rate of completion calls bounded, and keeps
result ordering deterministic.
"""

from __future__ import annotations

from typing import Any, Iterable

from backend.config import settings
from backend.scanner.classifier import classify
from backend.scanner.completion import CompletionFn
from backend.scanner.detector import DetectorConfig, detect
from backend.scanner.errors import Deadline, ValidationError
from backend.scanner.models import AnalysisResult
from backend.scraper.extractor import extract_page
from backend.scraper.fetcher import fetch_url


def validate_urls(urls: list[str]) -> None:
    """Reject an empty URL list or one above ``settings.max_analyze_urls``."""
    if not urls:
        raise ValidationError("urls array is required")
    if len(urls) > settings.max_analyze_urls:
        raise ValidationError(
            f"Maximum {settings.max_analyze_urls} URLs per request"
        )


def analyze_url(
    url: str,
    keywords: Iterable[str] = (),
    work_stream_areas: Iterable[str] = (),
    complete: CompletionFn | None = None,
    detector_config: DetectorConfig | None = None,
    deadline: Deadline | None = None,
) -> AnalysisResult:
    """Analyse a single page.

    A page that cannot be fetched yields an empty result with ``error`` set.
    A page with no legacy references yields an empty result.  Otherwise one
    :class:`~backend.scanner.models.Finding` is produced per snippet.
    """
    if deadline is not None:
        deadline.check()
    raw = fetch_url(
        url,
        timeout=settings.analyze_timeout,
        max_redirects=settings.analyze_max_redirects,
    )
    if deadline is not None:
        deadline.check()
    if raw is None:
        return AnalysisResult(url=url, error="Page could not be fetched")

    page = extract_page(raw)
    snippets = detect(page.text, source_url=url, config=detector_config)

    findings = []
    for snippet in snippets:
        if deadline is not None:
            deadline.check()
        findings.append(
            classify(
                snippet,
                work_stream_areas=work_stream_areas,
                keywords=keywords,
                complete=complete,
            )
        )
        if deadline is not None:
            deadline.check()

    return AnalysisResult(url=url, page_title=page.title, findings=findings)


def analyze(
    urls: list[str],
    keywords: Iterable[str] = (),
    work_stream_areas: Iterable[str] = (),
    complete: CompletionFn | None = None,
    timeout: float | None = None,
) -> list[AnalysisResult]:
    """Analyse every URL in *urls* under the run ceiling.

    Args:
        urls: Pages to analyse (1 to ``settings.max_analyze_urls``).
        keywords: Keyword hints forwarded to the classifier.
        work_stream_areas: Work-stream hints forwarded to the classifier.
        complete: Completion function override (tests, alternative providers).
        timeout: Run ceiling in seconds; defaults to ``settings.operation_timeout``.

    Returns:
        One :class:`AnalysisResult` per URL, in input order.

    Raises:
        ValidationError: If *urls* is empty or too long.
        OperationTimeoutError: If the ceiling passes before the run finishes.
    """
    urls = list(urls)
    validate_urls(urls)
    keywords = list(keywords)
    work_stream_areas = list(work_stream_areas)

    deadline = Deadline(
        timeout if timeout is not None else settings.operation_timeout, "analyze"
    )
    detector_config = DetectorConfig.from_settings()

    results: list[AnalysisResult] = []
    for i, url in enumerate(urls, start=1):
        print(f"[ANALYZE] ({i}/{len(urls)}) {url}")
        results.append(
            analyze_url(
                url,
                keywords=keywords,
                work_stream_areas=work_stream_areas,
                complete=complete,
                detector_config=detector_config,
                deadline=deadline,
            )
        )

    flagged = sum(1 for r in results if r.has_legacy_references)
    print(f"[ANALYZE] Done: {flagged}/{len(results)} page(s) with legacy references")
    return results


def analyze_payload(
    urls: list[str],
    keywords: Iterable[str] = (),
    work_stream_areas: Iterable[str] = (),
    timeout: float | None = None,
) -> dict[str, Any]:
    """Run :func:`analyze` and return the ``{"results": [...]}`` wire shape."""
    results = analyze(
        urls, keywords=keywords, work_stream_areas=work_stream_areas, timeout=timeout
    )
    return {"results": [r.to_dict() for r in results]}
