"""Tests for page analysis (fetch → detect → classify).

Mocking strategy:
- ``backend.scanner.analyzer.fetch_url`` is patched to serve canned pages.
- The completion collaborator is a ``MagicMock`` passed as ``complete=``.
"""

from __future__ import annotations

import json
import time
from unittest.mock import MagicMock, patch

import pytest

from backend.scanner.analyzer import analyze, analyze_payload, analyze_url
from backend.scanner.errors import OperationTimeoutError, ValidationError
from backend.scanner.models import Confidence
from backend.scraper.models import RawPage


_PAGES = {
    "https://example.edu/registration": (
        "<html><head><title>Registration</title></head><body>"
        "<p>Use CougarWeb to add or drop classes before the census date.</p>"
        "<p>Advisors review degree audits in Colleague, the student information system.</p>"
        "</body></html>"
    ),
    "https://example.edu/about": (
        "<html><head><title>About</title></head><body>"
        "<p>Ask a colleague about our history and mission.</p>"
        "</body></html>"
    ),
}

_PAYLOAD = json.dumps(
    {
        "primary_audience": "students",
        "task_category": "registration_and_academic_planning",
        "reference_type": "action_portal",
        "workday_feature": "Workday Student – academic planning and registration",
        "proposed_replacement": "Use Workday to add or drop classes.",
        "suggested_keywords": ["Workday", "registration", "add drop classes"],
        "confidence": "medium",
    }
)


def _fake_fetch(url: str, timeout=None, max_redirects=None):  # noqa: ANN001
    html = _PAGES.get(url)
    return RawPage(url=url, html=html, status_code=200) if html is not None else None


@pytest.fixture()
def fetch():
    with patch("backend.scanner.analyzer.fetch_url", side_effect=_fake_fetch) as mock_fetch:
        yield mock_fetch


class TestAnalyzeUrl:
    def test_page_with_references(self, fetch) -> None:  # noqa: ANN001
        complete = MagicMock(return_value=_PAYLOAD)
        result = analyze_url("https://example.edu/registration", complete=complete)

        assert result.page_title == "Registration"
        assert result.has_legacy_references is True
        assert len(result.findings) == 2
        assert complete.call_count == 2
        assert result.error is None

    def test_page_without_references(self, fetch) -> None:  # noqa: ANN001
        complete = MagicMock(return_value=_PAYLOAD)
        result = analyze_url("https://example.edu/about", complete=complete)

        assert result.page_title == "About"
        assert result.has_legacy_references is False
        assert result.findings == []
        complete.assert_not_called()

    def test_unfetchable_page(self, fetch) -> None:  # noqa: ANN001
        result = analyze_url("https://example.edu/gone", complete=MagicMock())

        assert result.has_legacy_references is False
        assert result.findings == []
        assert result.error

    def test_one_bad_response_does_not_abort_page(self, fetch) -> None:  # noqa: ANN001
        complete = MagicMock(side_effect=[RuntimeError("rate limited"), _PAYLOAD])
        result = analyze_url("https://example.edu/registration", complete=complete)

        assert [f.confidence for f in result.findings] == [Confidence.LOW, Confidence.MEDIUM]
        assert "rate limited" in result.findings[0].notes


class TestAnalyze:
    def test_results_follow_input_order(self, fetch) -> None:  # noqa: ANN001
        urls = [
            "https://example.edu/about",
            "https://example.edu/registration",
            "https://example.edu/gone",
        ]
        results = analyze(urls, complete=MagicMock(return_value=_PAYLOAD))
        assert [r.url for r in results] == urls

    def test_hints_reach_the_prompt(self, fetch) -> None:  # noqa: ANN001
        complete = MagicMock(return_value=_PAYLOAD)
        analyze(
            ["https://example.edu/registration"],
            keywords=["census date"],
            work_stream_areas=["Student"],
            complete=complete,
        )
        prompt = complete.call_args.args[0][0]["content"]
        assert "census date" in prompt
        assert "Student" in prompt

    def test_empty_list_is_rejected(self, fetch) -> None:  # noqa: ANN001
        with pytest.raises(ValidationError, match="required"):
            analyze([])
        fetch.assert_not_called()

    def test_too_many_urls_is_rejected(self, fetch) -> None:  # noqa: ANN001
        urls = [f"https://example.edu/p{i}" for i in range(501)]
        with pytest.raises(ValidationError, match="500"):
            analyze(urls)
        fetch.assert_not_called()

    def test_timeout_fails_whole_run(self, fetch) -> None:  # noqa: ANN001
        with pytest.raises(OperationTimeoutError):
            analyze(["https://example.edu/registration"], complete=MagicMock(), timeout=-1)

    def test_payload_shape(self, fetch) -> None:  # noqa: ANN001
        with patch("backend.scanner.classifier.chat_completion", return_value=_PAYLOAD):
            payload = analyze_payload(["https://example.edu/registration"])

        result = payload["results"][0]
        assert result["url"] == "https://example.edu/registration"
        assert result["pageTitle"] == "Registration"
        assert result["hasLegacyReferences"] is True
        assert result["findings"][0]["confidence"] == "medium"

    def test_ceiling_passed_during_last_fetch_fails(self) -> None:
        def slow_fetch(url, timeout=None, max_redirects=None):  # noqa: ANN001
            time.sleep(0.05)
            return _fake_fetch(url)

        with patch("backend.scanner.analyzer.fetch_url", side_effect=slow_fetch):
            with pytest.raises(OperationTimeoutError):
                analyze(["https://example.edu/about"], complete=MagicMock(), timeout=0.01)

    def test_ceiling_passed_during_last_completion_fails(self, fetch) -> None:  # noqa: ANN001
        def slow_complete(messages, temperature):  # noqa: ANN001
            time.sleep(0.05)
            return _PAYLOAD

        with pytest.raises(OperationTimeoutError):
            analyze(
                ["https://example.edu/registration"],
                complete=MagicMock(side_effect=slow_complete),
                timeout=0.04,
            )
