"""Website scanner endpoints.

Routes
------
POST /website/scan       Body: {"url": "...", "maxUrls": 200, "maxDepth": 5, "excludeUrls": [...]}
POST /website/analyze    Body: {"urls": [...], "keywords": [...], "workStreamAreas": [...]}
POST /website/report     Body: {"startUrl": "...", "urls": [...], "results": [...]}
                         Query: ?format=json|markdown

Every error is returned as ``{"success": false, "error": "..."}``:
400 for rejected input, 504 when the run ceiling is exceeded, 500 otherwise.
"""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from backend.scanner.analyzer import analyze_payload
from backend.scanner.crawler import scan
from backend.scanner.errors import OperationTimeoutError, ValidationError
from backend.scanner.models import AnalysisResult, URLRecord
from backend.scanner.report import build_report, render, report_to_dict
from backend.scraper.urls import canonicalize

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScanRequest(BaseModel):
    url: str = ""
    max_urls: int = Field(200, alias="maxUrls")
    max_depth: int = Field(5, alias="maxDepth")
    exclude_urls: list[str] = Field(default_factory=list, alias="excludeUrls")
    keywords: list[str] = Field(default_factory=list)
    work_stream_areas: list[str] = Field(default_factory=list, alias="workStreamAreas")


class AnalyzeRequest(BaseModel):
    urls: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    work_stream_areas: list[str] = Field(default_factory=list, alias="workStreamAreas")


class UrlEntry(BaseModel):
    url: str
    depth: int = 0


class ReportRequest(BaseModel):
    start_url: str = Field("", alias="startUrl")
    keywords: list[str] = Field(default_factory=list)
    work_stream_areas: list[str] = Field(default_factory=list, alias="workStreamAreas")
    urls: list[UrlEntry] = Field(default_factory=list)
    results: list[dict[str, Any]] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/scan")
def scan_endpoint(body: ScanRequest) -> Any:
    """Crawl the site at ``url`` and return the discovered URL list."""
    try:
        payload = scan(
            body.url,
            max_urls=body.max_urls,
            max_depth=body.max_depth,
            exclude_urls=body.exclude_urls,
        )
    except ValidationError as exc:
        return _error(400, str(exc))
    except OperationTimeoutError as exc:
        return _error(504, str(exc))
    except Exception as exc:  # noqa: BLE001
        print(f"[API] Website scan error: {exc}")
        return _error(500, str(exc) or "Failed to scan website")

    return {
        "success": True,
        **payload,
        "keywords": body.keywords,
        "workStreamAreas": body.work_stream_areas,
    }


@router.post("/analyze")
def analyze_endpoint(body: AnalyzeRequest) -> Any:
    """Fetch each URL, detect legacy references and classify them."""
    try:
        payload = analyze_payload(
            body.urls,
            keywords=body.keywords,
            work_stream_areas=body.work_stream_areas,
        )
    except ValidationError as exc:
        return _error(400, str(exc))
    except OperationTimeoutError as exc:
        return _error(504, str(exc))
    except Exception as exc:  # noqa: BLE001
        print(f"[API] Analyze error: {exc}")
        return _error(500, str(exc) or "Failed to analyze websites")

    return {"success": True, **payload}


@router.post("/report")
def report_endpoint(
    body: ReportRequest,
    format: Literal["json", "markdown"] = "json",
) -> Any:
    """Build the migration report from a URL list and analysis results."""
    try:
        records = [URLRecord(url=canonicalize(u.url), depth=u.depth) for u in body.urls]
        results = [AnalysisResult.from_dict(r) for r in body.results]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        return _error(400, f"Invalid report input: {exc}")

    report = build_report(
        records,
        results,
        start_url=body.start_url,
        keywords=body.keywords,
        work_stream_areas=body.work_stream_areas,
    )
    if format == "markdown":
        return PlainTextResponse(render(report, "markdown"), media_type="text/markdown")
    return JSONResponse(content={"success": True, "report": report_to_dict(report)})
