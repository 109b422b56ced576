"""Migration report assembly and rendering.

``build_report`` joins the crawled URL records with the analysis results by
canonical URL.  ``report_to_dict`` is the single source for both encodings:
``render_json`` dumps it, ``render_markdown`` lays the same fields out as a
readable document.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Iterable

from backend.scanner.models import AnalysisResult, Report, URLRecord
from backend.scraper.urls import canonicalize

REPORT_FORMATS = ("json", "markdown")
_EMPTY = "—"


def build_report(
    records: Iterable[URLRecord],
    results: Iterable[AnalysisResult],
    start_url: str = "",
    keywords: Iterable[str] = (),
    work_stream_areas: Iterable[str] = (),
    generated_at: datetime | None = None,
) -> Report:
    """Combine *records* and *results* into a :class:`Report`.

    Only URLs present in *records* are reported; a result whose URL was not
    scanned is ignored.
    """
    records = list(records)
    by_url = {canonicalize(r.url): r for r in results}

    updates: list[dict[str, Any]] = []
    for record in records:
        result = by_url.get(canonicalize(record.url))
        if result is None or not result.has_legacy_references:
            continue
        updates.append(
            {
                "url": record.url,
                "pageTitle": result.page_title,
                "findings": [
                    {
                        "current": f.html_context,
                        "proposed": f.proposed_replacement,
                        "audience": f.primary_audience.value,
                        "taskCategory": f.task_category.value,
                        "referenceType": f.reference_type.value,
                        "workdayFeature": f.workday_feature,
                        "suggestedKeywords": list(f.suggested_keywords),
                        "confidence": f.confidence.value,
                        "notes": f.notes,
                    }
                    for f in result.findings
                ],
            }
        )

    stamp = generated_at or datetime.now(timezone.utc)
    return Report(
        generated_at=stamp.isoformat(),
        start_url=start_url,
        keywords=[k for k in keywords if k],
        work_stream_areas=[w for w in work_stream_areas if w],
        total_urls_scanned=len(records),
        urls_with_legacy_references=len(updates),
        url_list=[r.to_dict() for r in records],
        recommended_updates=updates,
    )


def report_to_dict(report: Report) -> dict[str, Any]:
    return {
        "generatedAt": report.generated_at,
        "startUrl": report.start_url,
        "keywords": list(report.keywords),
        "workStreamAreas": list(report.work_stream_areas),
        "totalUrlsScanned": report.total_urls_scanned,
        "urlsWithLegacyReferences": report.urls_with_legacy_references,
        "urlList": list(report.url_list),
        "recommendedUpdates": list(report.recommended_updates),
    }


def render_json(report: Report) -> str:
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)


def render_markdown(report: Report) -> str:
    """Render *report* as a Markdown document with the same fields as the JSON."""
    data = report_to_dict(report)
    lines = [
        "# Workday Website Scanner Report",
        "",
        f"**Generated:** {data['generatedAt']}",
        f"**Start URL:** {data['startUrl'] or _EMPTY}",
        f"**Keywords:** {', '.join(data['keywords']) or _EMPTY}",
        f"**Work stream areas:** {', '.join(data['workStreamAreas']) or _EMPTY}",
        (
            f"**Summary:** {data['totalUrlsScanned']} URL(s) scanned, "
            f"{data['urlsWithLegacyReferences']} with CougarWeb/Colleague references."
        ),
        "",
        "## Full URL list",
        "",
    ]
    lines += [f"- {item['url']} (depth {item['depth']})" for item in data["urlList"]]

    lines += ["", "## Recommended updates"]
    for update in data["recommendedUpdates"]:
        lines += ["", f"### {update['url']}"]
        if update["pageTitle"]:
            lines.append(f"Page: {update['pageTitle']}")
        for i, finding in enumerate(update["findings"], start=1):
            lines += [
                "",
                f"#### Finding {i}",
                "",
                f"- **Audience:** {finding['audience']}",
                f"- **Task:** {finding['taskCategory']}",
                f"- **Reference type:** {finding['referenceType']}",
                f"- **Workday feature:** {finding['workdayFeature']}",
                f"- **Confidence:** {finding['confidence']}",
                f"- **Current copy:** {finding['current']}",
                f"- **Proposed Workday copy:** {finding['proposed']}",
            ]
            if finding["suggestedKeywords"]:
                lines.append(
                    f"- **Suggested keywords:** {', '.join(finding['suggestedKeywords'])}"
                )
            if finding["notes"]:
                lines.append(f"- **Notes:** {finding['notes']}")

    return "\n".join(lines) + "\n"


def render(report: Report, fmt: str = "json") -> str:
    """Render *report* in *fmt* (``json`` or ``markdown``).

    Raises:
        ValueError: If *fmt* is not a known format.
    """
    if fmt == "json":
        return render_json(report)
    if fmt == "markdown":
        return render_markdown(report)
    raise ValueError(f"Unknown report format {fmt!r}. Use: {' | '.join(REPORT_FORMATS)}")


def report_filename(report: Report, fmt: str = "json") -> str:
    """Return e.g. ``workday-scanner-report-2026-10-18.json``."""
    suffix = "md" if fmt == "markdown" else "json"
    return f"workday-scanner-report-{report.generated_at[:10]}.{suffix}"
