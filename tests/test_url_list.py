"""Tests for saved URL list helpers (parse, merge, dump, status updates)."""

from __future__ import annotations

import json

from backend.scanner.models import AnalysisResult, Finding, URLRecord, UrlStatus
from backend.scanner.url_list import (
    apply_results,
    dump_url_list,
    merge_url_lists,
    parse_url_list,
)


class TestParseUrlList:
    def test_plain_text_lines(self) -> None:
        text = "https://example.edu/a\n\n  http://example.edu/b/  \nnot a url\nftp://example.edu/c\n"
        records = parse_url_list(text)
        assert [r.url for r in records] == ["https://example.edu/a", "http://example.edu/b"]
        assert all(r.depth == 0 and r.status is UrlStatus.PENDING for r in records)

    def test_json_strings(self) -> None:
        records = parse_url_list(json.dumps(["https://example.edu/a", "mailto:x@example.edu"]))
        assert [r.url for r in records] == ["https://example.edu/a"]

    def test_json_objects(self) -> None:
        text = json.dumps(
            [
                {"url": "https://example.edu/a/", "depth": 2, "status": "analyzed"},
                {"url": "https://example.edu/b", "depth": -1, "status": "archived"},
                {"depth": 1},
                42,
            ]
        )
        records = parse_url_list(text)
        assert records == [
            URLRecord(url="https://example.edu/a", depth=2, status=UrlStatus.ANALYZED),
            URLRecord(url="https://example.edu/b", depth=0, status=UrlStatus.PENDING),
        ]

    def test_unparseable_urls_are_skipped(self) -> None:
        text = "https://[bad\nhttps://example.edu/a\n"
        assert [r.url for r in parse_url_list(text)] == ["https://example.edu/a"]

        data = json.dumps(["https://[bad", {"url": "http://[::1", "depth": 1}, "https://example.edu/b"])
        assert [r.url for r in parse_url_list(data)] == ["https://example.edu/b"]

    def test_boolean_depth_reads_as_zero(self) -> None:
        text = json.dumps([{"url": "https://example.edu/a", "depth": True}])
        assert parse_url_list(text)[0].depth == 0

    def test_duplicates_collapse(self) -> None:
        text = "https://example.edu/a\nhttps://example.edu/a/#top\n"
        assert len(parse_url_list(text)) == 1

    def test_json_object_is_not_a_list(self) -> None:
        assert parse_url_list('{"url": "https://example.edu"}') == []

    def test_empty(self) -> None:
        assert parse_url_list("") == []


class TestMergeUrlLists:
    def test_incoming_wins_and_keeps_first_position(self) -> None:
        existing = [
            URLRecord(url="https://example.edu/a", depth=1),
            URLRecord(url="https://example.edu/b", depth=1),
        ]
        incoming = [
            URLRecord(url="https://example.edu/a/", depth=3, status=UrlStatus.ANALYZED),
            URLRecord(url="https://example.edu/c", depth=2),
        ]
        merged = merge_url_lists(existing, incoming)

        assert [r.url for r in merged] == [
            "https://example.edu/a",
            "https://example.edu/b",
            "https://example.edu/c",
        ]
        assert merged[0].depth == 3
        assert merged[0].status is UrlStatus.ANALYZED

    def test_merge_with_empty(self) -> None:
        records = [URLRecord(url="https://example.edu/a")]
        assert merge_url_lists(records, []) == records
        assert merge_url_lists([], records) == records


class TestDumpUrlList:
    def test_text(self) -> None:
        records = [URLRecord(url="https://example.edu/a"), URLRecord(url="https://example.edu/b")]
        assert dump_url_list(records) == "https://example.edu/a\nhttps://example.edu/b\n"

    def test_text_empty(self) -> None:
        assert dump_url_list([]) == ""

    def test_json_keeps_depth_and_status(self) -> None:
        records = [URLRecord(url="https://example.edu/a", depth=2, status=UrlStatus.ERROR)]
        data = json.loads(dump_url_list(records, fmt="json"))
        assert data == [{"url": "https://example.edu/a", "depth": 2, "status": "error"}]

    def test_json_reloads(self) -> None:
        records = [URLRecord(url="https://example.edu/a", depth=1, status=UrlStatus.ANALYZED)]
        assert parse_url_list(dump_url_list(records, fmt="json")) == records


class TestApplyResults:
    def test_statuses_follow_results(self) -> None:
        records = [
            URLRecord(url="https://example.edu/a"),
            URLRecord(url="https://example.edu/b"),
            URLRecord(url="https://example.edu/c"),
        ]
        results = [
            AnalysisResult(url="https://example.edu/a/", findings=[Finding(html_context="x")]),
            AnalysisResult(url="https://example.edu/b", error="Page could not be fetched"),
        ]
        updated = apply_results(records, results)

        assert [r.status for r in updated] == [
            UrlStatus.ANALYZED,
            UrlStatus.ERROR,
            UrlStatus.PENDING,
        ]
        assert [r.url for r in updated] == [r.url for r in records]

    def test_page_without_findings_counts_as_analyzed(self) -> None:
        records = [URLRecord(url="https://example.edu/a")]
        updated = apply_results(records, [AnalysisResult(url="https://example.edu/a")])
        assert updated[0].status is UrlStatus.ANALYZED
