"""Dataclass models for the crawl → detect → classify pipeline.

These are plain Python objects.  The ``to_dict`` helpers produce the wire
shape used by the HTTP API and the saved JSON files (page-level keys in
camelCase, finding keys in snake_case).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Closed value sets
# ---------------------------------------------------------------------------

class UrlStatus(str, Enum):
    PENDING = "pending"
    ANALYZED = "analyzed"
    ERROR = "error"


class Audience(str, Enum):
    STUDENTS = "students"
    EMPLOYEES = "employees/faculty/staff"
    MIXED = "mixed/other"


class TaskCategory(str, Enum):
    REGISTRATION = "registration_and_academic_planning"
    RECORDS = "grades_transcripts_and_records"
    FINANCE_AND_AID = "student_finance_and_aid"
    STUDENT_PORTAL = "general_student_portal_access"
    HR_TIME_PAYROLL = "hr_time_payroll"
    EMPLOYEE_SELF_SERVICE = "employee_self_service_other"
    ADMIN_REPORTING = "administrative_reporting_and_advising"
    GENERIC = "generic_system_reference"


class ReferenceType(str, Enum):
    ACTION_PORTAL = "action_portal"
    INFORMATIONAL = "informational_reference"
    HISTORICAL = "historical_reference"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass
class URLRecord:
    """One discovered page.  ``url`` is always in canonical form."""

    url: str
    depth: int = 0
    status: UrlStatus = UrlStatus.PENDING

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "depth": self.depth}


@dataclass
class ReferenceSnippet:
    """A bounded window of page text around one legacy-system mention."""

    text: str
    matched_term: str
    source_url: str = ""


@dataclass
class Finding:
    """Classification and proposed rewrite for one snippet."""

    html_context: str
    primary_audience: Audience = Audience.MIXED
    task_category: TaskCategory = TaskCategory.GENERIC
    reference_type: ReferenceType = ReferenceType.INFORMATIONAL
    workday_feature: str = ""
    proposed_replacement: str = ""
    suggested_keywords: list[str] = field(default_factory=list)
    confidence: Confidence = Confidence.LOW
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "html_context": self.html_context,
            "primary_audience": self.primary_audience.value,
            "task_category": self.task_category.value,
            "reference_type": self.reference_type.value,
            "workday_feature": self.workday_feature,
            "proposed_replacement": self.proposed_replacement,
            "suggested_keywords": list(self.suggested_keywords),
            "confidence": self.confidence.value,
        }
        if self.notes:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Finding:
        """Rebuild a finding from :meth:`to_dict` output.

        Raises:
            ValueError: If an enumerated field holds an unknown value.
        """
        return cls(
            html_context=str(data.get("html_context", "")),
            primary_audience=Audience(data.get("primary_audience", Audience.MIXED.value)),
            task_category=TaskCategory(data.get("task_category", TaskCategory.GENERIC.value)),
            reference_type=ReferenceType(
                data.get("reference_type", ReferenceType.INFORMATIONAL.value)
            ),
            workday_feature=str(data.get("workday_feature", "")),
            proposed_replacement=str(data.get("proposed_replacement", "")),
            suggested_keywords=[str(k) for k in data.get("suggested_keywords") or []],
            confidence=Confidence(data.get("confidence", Confidence.LOW.value)),
            notes=data.get("notes") or None,
        )


@dataclass
class AnalysisResult:
    """Outcome of analysing one page.

    ``has_legacy_references`` is derived from ``findings`` so the two can
    never disagree.  ``error`` is set when the page could not be fetched.
    """

    url: str
    page_title: str = ""
    findings: list[Finding] = field(default_factory=list)
    error: str | None = None

    @property
    def has_legacy_references(self) -> bool:
        return bool(self.findings)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "url": self.url,
            "pageTitle": self.page_title,
            "hasLegacyReferences": self.has_legacy_references,
            "findings": [f.to_dict() for f in self.findings],
        }
        if self.error:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisResult:
        return cls(
            url=str(data["url"]),
            page_title=str(data.get("pageTitle") or ""),
            findings=[Finding.from_dict(f) for f in data.get("findings") or []],
            error=data.get("error") or None,
        )


@dataclass
class Report:
    """Derived migration report; see :mod:`backend.scanner.report`."""

    generated_at: str
    start_url: str
    keywords: list[str]
    work_stream_areas: list[str]
    total_urls_scanned: int
    urls_with_legacy_references: int
    url_list: list[dict[str, Any]] = field(default_factory=list)
    recommended_updates: list[dict[str, Any]] = field(default_factory=list)
