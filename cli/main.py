"""Workday website scanner CLI — entry-point for all backend operations.

Usage:
    python cli/main.py --help

Commands map onto the scanner pipeline:
    scan     → crawl a site and save the URL list
    analyze  → detect and classify legacy references on saved URLs
    report   → export the migration report (JSON or Markdown)
    urls     → manage saved URL lists
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from backend.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import re
from typing import Optional

import typer

from backend.scanner.analyzer import analyze
from backend.scanner.crawler import crawl
from backend.scanner.errors import Deadline, OperationTimeoutError, ValidationError
from backend.scanner.models import AnalysisResult, URLRecord
from backend.scanner.report import REPORT_FORMATS, build_report, render, report_filename
from backend.scanner.url_list import (
    apply_results,
    dump_url_list,
    merge_url_lists,
    parse_url_list,
)
from backend.config import settings
from cli.commands.urls import urls_app

app = typer.Typer(
    name="site-scanner",
    help="Find CougarWeb / Colleague references on a website and plan Workday updates.",
    no_args_is_help=True,
)
app.add_typer(urls_app, name="urls")


def split_hints(raw: str | None) -> list[str]:
    """Split a comma/semicolon separated option value into trimmed items."""
    if not raw:
        return []
    return [part.strip() for part in re.split(r"[,;]", raw) if part.strip()]


def _load_records(path: Path) -> list[URLRecord]:
    if not path.exists():
        return []
    return parse_url_list(path.read_text(encoding="utf-8"))


def _fail(message: str) -> None:
    typer.echo(f"❌ {message}")
    raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# scan
# ---------------------------------------------------------------------------
@app.command("scan")
def scan_cmd(
    url: str = typer.Option(..., help="Starting website URL (e.g. example.edu)."),
    max_urls: int = typer.Option(200, "--max-urls", help="Maximum URLs to record (≤ 300)."),
    max_depth: int = typer.Option(5, "--max-depth", help="Maximum link depth (≤ 5)."),
    urls_file: Path = typer.Option(
        Path("scanner-urls.json"),
        "--urls-file",
        help="Saved URL list. Its URLs are skipped, and new ones are merged back in.",
    ),
) -> None:
    """Crawl a site breadth-first and merge new URLs into the saved list."""
    existing = _load_records(urls_file)
    typer.echo(f"🌐 Scanning {url!r}  (max {max_urls} URLs, depth {max_depth}) …")
    if existing:
        typer.echo(f"   Skipping {len(existing)} URL(s) already in {urls_file}")

    try:
        records = crawl(
            url,
            max_depth=max_depth,
            max_urls=max_urls,
            exclude=[r.url for r in existing],
            deadline=Deadline(settings.operation_timeout, "scan"),
        )
    except (ValidationError, OperationTimeoutError) as exc:
        _fail(str(exc))

    merged = merge_url_lists(existing, records)
    urls_file.write_text(dump_url_list(merged, fmt="json"), encoding="utf-8")

    for record in records:
        typer.echo(f"  [{record.depth}] {record.url}")
    typer.echo(f"✅ {len(records)} new URL(s); {len(merged)} total saved to {urls_file}")


# ---------------------------------------------------------------------------
# analyze
# ---------------------------------------------------------------------------
@app.command("analyze")
def analyze_cmd(
    urls_file: Path = typer.Option(Path("scanner-urls.json"), "--urls-file", help="Saved URL list."),
    keywords: Optional[str] = typer.Option(None, help="Keyword hints, comma or semicolon separated."),
    work_streams: Optional[str] = typer.Option(
        None, "--work-streams", help="Work-stream areas, comma or semicolon separated."
    ),
    output: Path = typer.Option(
        Path("scanner-results.json"), "--output", help="Where to write analysis results."
    ),
) -> None:
    """Detect and classify legacy references on every saved URL."""
    records = _load_records(urls_file)
    if not records:
        _fail(f"No URLs found in {urls_file}. Run a scan or load URLs first.")

    typer.echo(f"🔍 Analyzing {len(records)} URL(s) …")
    try:
        results = analyze(
            [r.url for r in records],
            keywords=split_hints(keywords),
            work_stream_areas=split_hints(work_streams),
        )
    except (ValidationError, OperationTimeoutError) as exc:
        _fail(str(exc))

    output.write_text(
        json.dumps({"results": [r.to_dict() for r in results]}, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    updated = apply_results(records, results)
    urls_file.write_text(dump_url_list(updated, fmt="json"), encoding="utf-8")

    flagged = [r for r in results if r.has_legacy_references]
    for result in flagged:
        typer.echo(f"  ⚠️  {result.url}  ({len(result.findings)} finding(s))")
    typer.echo(f"✅ {len(flagged)}/{len(results)} page(s) with legacy references → {output}")


# ---------------------------------------------------------------------------
# report
# ---------------------------------------------------------------------------
@app.command("report")
def report_cmd(
    start_url: str = typer.Option("", "--start-url", help="Seed URL shown in the report."),
    urls_file: Path = typer.Option(Path("scanner-urls.json"), "--urls-file", help="Saved URL list."),
    results_file: Path = typer.Option(
        Path("scanner-results.json"), "--results", help="Output of the analyze command."
    ),
    keywords: Optional[str] = typer.Option(None, help="Keyword hints shown in the report."),
    work_streams: Optional[str] = typer.Option(None, "--work-streams", help="Work-stream areas."),
    fmt: str = typer.Option("json", "--format", help="Report format: json | markdown."),
    output: Optional[Path] = typer.Option(None, "--output", help="Output path (default: dated file name)."),
) -> None:
    """Export the migration report."""
    if fmt not in REPORT_FORMATS:
        _fail(f"Unknown format {fmt!r}. Use: {' | '.join(REPORT_FORMATS)}")
    if not results_file.exists():
        _fail(f"Results file {results_file} not found. Run analyze first.")

    records = _load_records(urls_file)
    try:
        data = json.loads(results_file.read_text(encoding="utf-8"))
        results = [AnalysisResult.from_dict(r) for r in data.get("results", [])]
    except (json.JSONDecodeError, AttributeError, KeyError, ValueError) as exc:
        _fail(f"Could not read {results_file}: {exc}")

    report = build_report(
        records,
        results,
        start_url=start_url,
        keywords=split_hints(keywords),
        work_stream_areas=split_hints(work_streams),
    )
    target = output or Path(report_filename(report, fmt))
    target.write_text(render(report, fmt), encoding="utf-8")
    typer.echo(
        f"📝 Report: {report.total_urls_scanned} URL(s) scanned, "
        f"{report.urls_with_legacy_references} with legacy references → {target}"
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
