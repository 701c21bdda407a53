"""Tests for structured data criteria."""

from aeorank.models import AuditStatus, DomainSnapshot, FetchedDocument, FindingSeverity, Priority
from aeorank.scoring.context import SiteView
from aeorank.scoring.rules import run_criterion
from aeorank.scoring.schema import (
    AUTHOR_SCHEMA_DEPTH,
    SCHEMA_COVERAGE,
    SCHEMA_MARKUP,
    SPEAKABLE_SCHEMA,
)


def _ld(body: str) -> str:
    return f'<script type="application/ld+json">{body}</script>'


ORG_BLOCK = _ld(
    '{"@context": "https://schema.org", "@type": "Organization", "@id": "https://example.com/#org",'
    ' "name": "Acme", "url": "https://example.com", "logo": "https://example.com/logo.png",'
    ' "sameAs": ["https://linkedin.com/company/acme"], "telephone": "+1-555-123-4567"}'
)
FAQ_BLOCK = _ld('{"@context": "https://schema.org", "@type": "FAQPage", "mainEntity": []}')
ARTICLE_BLOCK = _ld(
    '{"@context": "https://schema.org", "@type": "Article", "headline": "Widgets",'
    ' "datePublished": "2026-01-01", "dateModified": "2026-02-01", "author": {"@type": "Person", "name": "Jane"}}'
)


def _view(homepage: str | None = "<html></html>", pages: list[str] | None = None) -> SiteView:
    snapshot = DomainSnapshot(domain="example.com", protocol="https")
    if homepage is not None:
        snapshot.homepage = FetchedDocument(text=homepage, status=200)
    snapshot.pages = [FetchedDocument(text=html, status=200) for html in pages or []]
    return SiteView(snapshot)


def _details(result) -> list[str]:
    return [f.detail for f in result.findings]


class TestSchemaMarkup:
    """Tests for the schema markup criterion."""

    def test_organization_and_faq(self) -> None:
        """Test a homepage with Organization and FAQPage blocks."""
        result = run_criterion(SCHEMA_MARKUP, _view(ORG_BLOCK + FAQ_BLOCK))

        assert result.score == 10
        assert "Found 2 JSON-LD block(s) on homepage" in _details(result)
        assert "Schema types found: organization, faqpage" in _details(result)

    def test_blog_types_add_credit(self) -> None:
        """Test schema types only present on blog posts."""
        homepage = _ld('{"@type": "WebSite", "name": "Acme"}')
        result = run_criterion(SCHEMA_MARKUP, _view(homepage, pages=[ARTICLE_BLOCK]))

        assert result.score == 6
        assert "Additional schema types found on blog pages: article" in _details(result)
        assert "Missing Organization or LocalBusiness schema" in _details(result)

    def test_no_json_ld(self) -> None:
        """Test a homepage without JSON-LD."""
        result = run_criterion(SCHEMA_MARKUP, _view())

        assert result.score == 0
        assert result.fix_priority == Priority.P1
        assert _details(result) == ["No JSON-LD structured data found on homepage"]

    def test_no_homepage(self) -> None:
        """Test the homepage gate uses its own message."""
        result = run_criterion(SCHEMA_MARKUP, _view(None))

        assert result.status == AuditStatus.NOT_FOUND
        assert _details(result) == ["Could not fetch homepage to check schema markup"]


class TestSchemaCoverage:
    """Tests for the schema coverage criterion."""

    def test_rich_graph(self) -> None:
        """Test connected, property-rich schema."""
        result = run_criterion(SCHEMA_COVERAGE, _view(ORG_BLOCK + FAQ_BLOCK, pages=[ARTICLE_BLOCK]))

        assert "@id linking found - schema types are connected in a graph" in _details(result)
        assert any(d.startswith("Article schema has 4/") for d in _details(result))
        assert result.score >= 7

    def test_no_json_ld(self) -> None:
        """Test the no-schema gate."""
        result = run_criterion(SCHEMA_COVERAGE, _view())

        assert result.score == 0
        assert result.fix_priority == Priority.P1


class TestSpeakableSchema:
    """Tests for the speakable schema criterion."""

    def test_speakable_with_selector(self) -> None:
        """Test speakable markup targeting CSS selectors."""
        homepage = _ld(
            '{"@type": "WebPage", "speakable": {"@type": "SpeakableSpecification", "cssSelector": [".headline"]}}'
        )
        result = run_criterion(SPEAKABLE_SCHEMA, _view(homepage))

        assert result.score == 7
        assert "Speakable uses cssSelector targeting for precise content selection" in _details(result)
        assert "No blog pages sampled - blog speakable coverage not assessed" in _details(result)

    def test_speakable_on_blog(self) -> None:
        """Test speakable coverage on sampled pages."""
        block = _ld('{"@type": "Article", "speakable": {"xpath": ["/html/head/title"]}}')
        result = run_criterion(SPEAKABLE_SCHEMA, _view(block, pages=[block]))

        assert result.score == 10

    def test_no_speakable(self) -> None:
        """Test schema without speakable markup."""
        result = run_criterion(SPEAKABLE_SCHEMA, _view(ORG_BLOCK))

        assert result.score == 0
        assert result.findings[0].severity == FindingSeverity.MEDIUM

    def test_no_json_ld(self) -> None:
        """Test the no-schema gate."""
        result = run_criterion(SPEAKABLE_SCHEMA, _view())

        assert result.findings[0].severity == FindingSeverity.CRITICAL


class TestAuthorSchemaDepth:
    """Tests for the author schema criterion."""

    def test_complete_author_markup(self) -> None:
        """Test Person schema with credentials, profiles, byline and address."""
        homepage = (
            _ld(
                '{"@type": "Person", "name": "Jane Doe", "jobTitle": "Editor",'
                ' "sameAs": ["https://linkedin.com/in/jane"]}'
            )
            + "<p>Written by Jane Doe</p><address>1 Main St</address>"
        )
        result = run_criterion(AUTHOR_SCHEMA_DEPTH, _view(homepage))

        assert result.score == 10

    def test_no_author_markup(self) -> None:
        """Test a page without author signals."""
        result = run_criterion(AUTHOR_SCHEMA_DEPTH, _view())

        assert result.score == 0
        assert "No Person schema found" in _details(result)
