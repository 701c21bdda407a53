"""Tests for authority criteria."""

from datetime import UTC, datetime

from aeorank.models import AuditStatus, DomainSnapshot, FetchedDocument, Priority
from aeorank.scoring.authority import (
    CONTENT_FRESHNESS,
    CONTENT_LICENSING,
    ENTITY_CONSISTENCY,
    FACT_DENSITY,
    ORIGINAL_DATA,
)
from aeorank.scoring.context import SiteView
from aeorank.scoring.rules import run_criterion

NOW = datetime(2026, 10, 1, tzinfo=UTC)


def _view(homepage: str | None = "<html></html>", pages: list[str] | None = None, **documents) -> SiteView:
    snapshot = DomainSnapshot(domain="example.com", protocol="https", **documents)
    if homepage is not None:
        snapshot.homepage = FetchedDocument(text=homepage, status=200)
    snapshot.pages = [FetchedDocument(text=html, status=200) for html in pages or []]
    return SiteView(snapshot, now=NOW)


def _details(result) -> list[str]:
    return [f.detail for f in result.findings]


class TestEntityConsistency:
    """Tests for the entity authority criterion."""

    def test_entity_signals(self) -> None:
        """Test address, Organization schema and social links."""
        homepage = (
            "<p>Visit us at 123 Main Street</p>"
            '<script type="application/ld+json">{"@type": "Organization",'
            ' "sameAs": ["https://linkedin.com/company/acme"]}</script>'
        )
        result = run_criterion(ENTITY_CONSISTENCY, _view(homepage))

        assert result.score == 8
        assert "Physical address found on page" in _details(result)
        assert "No phone number found on homepage" in _details(result)

    def test_bare_homepage(self) -> None:
        """Test a homepage without entity signals."""
        result = run_criterion(ENTITY_CONSISTENCY, _view())

        assert result.score == 1
        assert result.fix_priority == Priority.P1
        assert "No Organization schema to reinforce entity identity" in _details(result)

    def test_no_homepage(self) -> None:
        """Test the homepage gate."""
        assert run_criterion(ENTITY_CONSISTENCY, _view(None)).status == AuditStatus.NOT_FOUND


class TestOriginalData:
    """Tests for the original data criterion."""

    def test_research_and_case_studies(self) -> None:
        """Test statistics with research context and measurable case studies."""
        homepage = (
            "<p>We surveyed 500 customers. Our analysis found 45% growth.</p>"
            "<p>Case study: revenue up 30% in one quarter.</p>"
            "<p>Written by an industry expert.</p>"
            '<a href="/blog/latest">Blog</a>'
        )
        result = run_criterion(ORIGINAL_DATA, _view(homepage))

        assert result.score == 10
        assert result.fix_priority == Priority.P2

    def test_statistics_without_context(self) -> None:
        """Test bare statistics earn partial credit."""
        result = run_criterion(ORIGINAL_DATA, _view("<p>Trusted by 500 clients</p>"))

        assert 'Statistics found but without research context (e.g., "500+ clients")' in _details(result)

    def test_nothing_original(self) -> None:
        """Test a page without original data."""
        result = run_criterion(ORIGINAL_DATA, _view())

        assert result.score == 0
        assert result.fix_priority == Priority.P2
        assert "No proprietary data or statistics found" in _details(result)
        assert "No case studies or testimonials found" in _details(result)

    def test_blog_case_studies(self) -> None:
        """Test case studies on sampled pages add credit."""
        result = run_criterion(ORIGINAL_DATA, _view(pages=["<p>Read our client stories.</p>"]))

        assert "Case studies or testimonials found on blog posts" in _details(result)


class TestContentFreshness:
    """Tests for the content freshness criterion."""

    def test_fresh_page(self) -> None:
        """Test date schema, time elements, article meta and recent years."""
        homepage = (
            '<script type="application/ld+json">{"datePublished": "2026-01-01", "dateModified": "2026-02-01"}</script>'
            '<meta property="article:published_time" content="2026-01-01">'
            '<time datetime="2026-01-01">January</time><time datetime="2026-02-01">February</time>'
        )
        result = run_criterion(CONTENT_FRESHNESS, _view(homepage))

        assert result.score == 10
        assert "JSON-LD date properties found: datePublished, dateModified" in _details(result)
        assert "References to 2026 or 2025 found, suggesting recent content" in _details(result)

    def test_stale_page(self) -> None:
        """Test a page with no freshness signals."""
        result = run_criterion(CONTENT_FRESHNESS, _view("<p>Copyright 2019</p>"))

        assert result.score == 0
        assert "No references to recent years found on homepage" in _details(result)


class TestFactDensity:
    """Tests for the fact density criterion."""

    def test_dense_page(self) -> None:
        """Test numbers, years, attributions and units."""
        homepage = (
            "<p>According to our data, 45% of buyers return, 30% refer friends and 12% upgrade.</p>"
            "<p>We serve 1,000 customers, 500 users and 20 clients since 2024 and 2025.</p>"
            "<p>Setup takes 3 hours and delivery covers 5 miles.</p>"
        )
        result = run_criterion(FACT_DENSITY, _view(homepage))

        assert result.score == 10

    def test_no_facts(self) -> None:
        """Test a page without facts."""
        result = run_criterion(FACT_DENSITY, _view("<p>We make widgets.</p>"))

        assert result.score == 0
        assert "No quantitative data points found" in _details(result)


class TestContentLicensing:
    """Tests for the content licensing criterion."""

    def test_ai_txt_and_policy(self) -> None:
        """Test ai.txt, policy language and TDM references."""
        ai_txt = "User-agent: *\nAllow: /\nTDM-Reservation: 0\n"
        result = run_criterion(
            CONTENT_LICENSING,
            _view("<p>See our content licensing terms.</p>", ai_txt=FetchedDocument(text=ai_txt, status=200)),
        )

        assert result.score == 8
        assert f"ai.txt file found ({len(ai_txt)} characters)" in _details(result)
        assert "No license or copyright properties in schema" in _details(result)

    def test_html_ai_txt_ignored(self) -> None:
        """Test an HTML catch-all does not count as ai.txt."""
        page = "<!DOCTYPE html><html><body>" + "app " * 20 + "</body></html>"
        result = run_criterion(CONTENT_LICENSING, _view(ai_txt=FetchedDocument(text=page, status=200)))

        assert "No ai.txt file found" in _details(result)

    def test_nothing(self) -> None:
        """Test a site without licensing signals."""
        result = run_criterion(CONTENT_LICENSING, _view())

        assert result.score == 0
        assert result.fix_priority == Priority.P2
