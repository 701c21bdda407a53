"""Tests for shared data types."""

from aeorank.models import (
    AuditStatus,
    CriterionResult,
    DomainSnapshot,
    FetchedDocument,
    Finding,
    FindingSeverity,
    PageCategory,
    Priority,
)


class TestFetchedDocument:
    """Tests for FetchedDocument."""

    def test_html_catch_all(self) -> None:
        """Test HTML bodies served with 200 are catch-alls."""
        assert FetchedDocument(text="\n  <!DOCTYPE html><html></html>", status=200).is_html_catch_all
        assert FetchedDocument(text="<HTML>", status=200).is_html_catch_all
        assert not FetchedDocument(text="<!DOCTYPE html>", status=404).is_html_catch_all
        assert not FetchedDocument(text="# Title\n\nBody", status=200).is_html_catch_all

    def test_tagged_copies(self) -> None:
        """Test tagging returns a new document."""
        doc = FetchedDocument(text="x", status=200)
        tagged = doc.tagged(PageCategory.BLOG)

        assert tagged.category == PageCategory.BLOG
        assert doc.category is None
        assert tagged.to_dict()["category"] == "blog"


class TestDomainSnapshot:
    """Tests for DomainSnapshot."""

    def test_base_url(self) -> None:
        """Test the base URL needs a protocol."""
        assert DomainSnapshot(domain="example.com").base_url is None
        assert DomainSnapshot(domain="example.com", protocol="http").base_url == "http://example.com"

    def test_is_aborted(self) -> None:
        """Test hijacked and parked snapshots are aborted."""
        assert not DomainSnapshot(domain="example.com").is_aborted
        assert DomainSnapshot(domain="example.com", redirected_to="spam.net").is_aborted
        assert DomainSnapshot(domain="example.com", parked_reason="parked").is_aborted


class TestCriterionResult:
    """Tests for CriterionResult."""

    def test_score_clamped(self) -> None:
        """Test scores are clamped to 0-10."""
        high = CriterionResult("llms_txt", "llms.txt File", 14, AuditStatus.PASS)
        low = CriterionResult("llms_txt", "llms.txt File", -3, AuditStatus.FAIL)

        assert high.score == 10
        assert low.score == 0

    def test_to_dict(self) -> None:
        """Test serialisation."""
        result = CriterionResult(
            "rss_feed",
            "RSS/Atom Feed",
            5,
            AuditStatus.PARTIAL,
            findings=[Finding(FindingSeverity.LOW, "No feed", fix="Publish one")],
            fix_priority=Priority.P3,
        )

        assert result.to_dict() == {
            "criterion": "rss_feed",
            "criterion_label": "RSS/Atom Feed",
            "score": 5,
            "status": "partial",
            "findings": [{"severity": "low", "detail": "No feed", "fix": "Publish one"}],
            "fix_priority": "P3",
        }
