"""Tests for snapshot acquisition and headless re-rendering."""

import httpx
import pytest

from aeorank.crawler.fetcher import Fetcher
from aeorank.crawler.orchestrator import (
    acquire_snapshot,
    apply_headless_rendering,
    find_feed_link,
    is_feed,
)
from aeorank.models import DomainSnapshot, FetchedDocument, PageCategory

HOMEPAGE = """<!DOCTYPE html><html><head><title>Acme</title>
<link rel="alternate" type="application/rss+xml" href="/rss">
</head><body><h1>Acme widgets</h1></body></html>"""

SITEMAP = """<?xml version="1.0"?><urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
<url><loc>https://example.com/blog/first-post</loc><lastmod>2026-09-01</lastmod></url>
<url><loc>https://example.com/blog/short-post</loc></url>
</urlset>"""

BLOG_POST = "<html><body><article>" + "<p>Widgets are useful.</p>" * 40 + "</article></body></html>"

SHELL = '<html><body><div id="root"></div><script src="/static/js/main.abc123.js"></script></body></html>'
RICH = "<html><body><main>" + "<p>Rendered content.</p>" * 50 + "</main></body></html>"


def _full_site(fake_site):
    return fake_site(
        {
            "example.com/": (200, HOMEPAGE),
            "example.com/llms.txt": (200, "# Acme\n\nhttps://example.com/about"),
            "example.com/robots.txt": (200, "User-agent: *\nAllow: /"),
            "example.com/sitemap.xml": (200, SITEMAP),
            "example.com/faq": (200, "<html><body><h2>What is Acme?</h2></body></html>"),
            "example.com/rss": (200, "<rss><channel><item></item></channel></rss>"),
            "example.com/blog/first-post": (200, BLOG_POST),
            "example.com/blog/short-post": (200, "<p>tiny</p>"),
        }
    )


class TestAcquireSnapshot:
    """Tests for acquire_snapshot."""

    @pytest.mark.asyncio
    async def test_full_site(self, fake_site, settings) -> None:
        """Test every resource is fetched and blog pages sampled."""
        site = _full_site(fake_site)

        snapshot = await acquire_snapshot("example.com", Fetcher(transport=site.transport), settings)

        assert snapshot.protocol == "https"
        assert snapshot.homepage is not None
        assert snapshot.homepage.category == PageCategory.HOMEPAGE
        assert snapshot.llms_txt is not None and snapshot.llms_txt.ok
        assert snapshot.robots_txt is not None and snapshot.robots_txt.ok
        assert snapshot.ai_txt is not None and snapshot.ai_txt.status == 404
        assert snapshot.faq_page is not None and snapshot.faq_page.ok
        assert snapshot.rss_feed is not None and "<rss" in snapshot.rss_feed.text
        assert len(snapshot.pages) == 1
        assert snapshot.pages[0].category == PageCategory.BLOG
        assert snapshot.pages[0].final_url == "https://example.com/blog/first-post"

    @pytest.mark.asyncio
    async def test_falls_back_to_http(self, fake_site, settings) -> None:
        """Test HTTP is used when HTTPS refuses connections."""
        site = fake_site({"example.com/": (200, HOMEPAGE)}, down={"https://example.com"})

        snapshot = await acquire_snapshot("example.com", Fetcher(transport=site.transport), settings)

        assert snapshot.protocol == "http"
        assert snapshot.base_url == "http://example.com"

    @pytest.mark.asyncio
    async def test_unreachable(self, fake_site, settings) -> None:
        """Test an unreachable domain yields an empty snapshot."""
        site = fake_site(down={"example.com"})

        snapshot = await acquire_snapshot("example.com", Fetcher(transport=site.transport), settings)

        assert snapshot.protocol is None
        assert snapshot.homepage is None
        assert snapshot.base_url is None

    @pytest.mark.asyncio
    async def test_server_error_homepage_is_unreachable(self, fake_site, settings) -> None:
        """Test a 5xx homepage on both protocols counts as unreachable."""
        site = fake_site({"example.com/": (503, "down")})

        snapshot = await acquire_snapshot("example.com", Fetcher(transport=site.transport), settings)

        assert snapshot.protocol is None

    @pytest.mark.asyncio
    async def test_hijacked_domain_stops(self, fake_site, settings) -> None:
        """Test a cross-domain redirect stops acquisition."""
        site = fake_site(
            {
                "example.com/": lambda r: httpx.Response(302, headers={"Location": "https://spam.net/"}),
                "spam.net/": (200, "<html>casino</html>"),
            }
        )

        snapshot = await acquire_snapshot("example.com", Fetcher(transport=site.transport), settings)

        assert snapshot.redirected_to == "spam.net"
        assert snapshot.is_aborted
        assert snapshot.llms_txt is None
        assert not site.requested("/llms.txt")

    @pytest.mark.asyncio
    async def test_parked_domain_stops(self, fake_site, settings) -> None:
        """Test a parked homepage stops acquisition."""
        site = fake_site({"example.com/": (200, "<h1>This domain is for sale</h1>")})

        snapshot = await acquire_snapshot("example.com", Fetcher(transport=site.transport), settings)

        assert snapshot.parked_reason == "parking text: domain is for sale"
        assert snapshot.robots_txt is None
        assert not site.requested("/robots.txt")

    @pytest.mark.asyncio
    async def test_faq_fallback_paths(self, fake_site, settings) -> None:
        """Test FAQ fallbacks are tried in order."""
        site = fake_site(
            {
                "example.com/": (200, HOMEPAGE),
                "example.com/help": (200, "<h2>How do I reset my password?</h2>"),
            }
        )

        snapshot = await acquire_snapshot("example.com", Fetcher(transport=site.transport), settings)

        assert snapshot.faq_page is not None
        assert snapshot.faq_page.final_url == "https://example.com/help"

    @pytest.mark.asyncio
    async def test_rss_fallback_requires_feed_markup(self, fake_site, settings) -> None:
        """Test fallback feed paths must return feed XML."""
        site = fake_site(
            {
                "example.com/": (200, "<html><body>no feed link</body></html>"),
                "example.com/feed": (200, "<html>not a feed</html>"),
                "example.com/feed.xml": (200, '<feed xmlns="http://www.w3.org/2005/Atom"></feed>'),
            }
        )

        snapshot = await acquire_snapshot("example.com", Fetcher(transport=site.transport), settings)

        assert snapshot.rss_feed is not None
        assert snapshot.rss_feed.final_url == "https://example.com/feed.xml"

    @pytest.mark.asyncio
    async def test_relative_feed_link_resolved_against_site(self, fake_site, settings) -> None:
        """Test a feed href without a leading slash resolves under the site root."""
        homepage = '<html><head><link rel="alternate" type="application/atom+xml" href="atom.xml"></head></html>'
        site = fake_site(
            {
                "example.com/": (200, homepage),
                "example.com/atom.xml": (200, '<feed xmlns="http://www.w3.org/2005/Atom"></feed>'),
            }
        )

        snapshot = await acquire_snapshot("example.com", Fetcher(transport=site.transport), settings)

        assert snapshot.rss_feed is not None
        assert snapshot.rss_feed.final_url == "https://example.com/atom.xml"

    @pytest.mark.asyncio
    async def test_sitemap_index_child_is_followed(self, fake_site, settings) -> None:
        """Test blog sampling reads the preferred child sitemap."""
        index = (
            "<sitemapindex><sitemap><loc>https://example.com/post-sitemap.xml</loc></sitemap></sitemapindex>"
        )
        site = fake_site(
            {
                "example.com/": (200, HOMEPAGE),
                "example.com/sitemap.xml": (200, index),
                "example.com/post-sitemap.xml": (200, SITEMAP),
                "example.com/blog/first-post": (200, BLOG_POST),
            }
        )

        snapshot = await acquire_snapshot("example.com", Fetcher(transport=site.transport), settings)

        assert [p.final_url for p in snapshot.pages] == ["https://example.com/blog/first-post"]


class TestFeedHelpers:
    """Tests for feed detection helpers."""

    def test_find_feed_link(self) -> None:
        """Test feed link discovery."""
        assert find_feed_link(HOMEPAGE) == "/rss"
        assert find_feed_link("<html></html>") is None

    def test_is_feed(self) -> None:
        """Test feed markers and status."""
        assert is_feed(FetchedDocument(text="<rss></rss>", status=200))
        assert not is_feed(FetchedDocument(text="<rss></rss>", status=404))
        assert not is_feed(FetchedDocument(text="<html></html>", status=200))


class FakeRenderer:
    """Renderer returning canned HTML per URL."""

    def __init__(self, pages: dict[str, str]):
        self.pages = pages
        self.calls: list[str] = []

    async def render(self, url: str) -> FetchedDocument | None:
        self.calls.append(url)
        if url not in self.pages:
            return None
        return FetchedDocument(text=self.pages[url], status=200, final_url=url)


def _shell_snapshot(faq: str | None = None) -> DomainSnapshot:
    return DomainSnapshot(
        domain="example.com",
        protocol="https",
        homepage=FetchedDocument(text=SHELL, status=200, category=PageCategory.HOMEPAGE),
        faq_page=FetchedDocument(text=faq, status=200) if faq else None,
    )


class TestApplyHeadlessRendering:
    """Tests for apply_headless_rendering."""

    @pytest.mark.asyncio
    async def test_replaces_shell_with_richer_render(self, settings) -> None:
        """Test a richer render replaces the homepage."""
        snapshot = _shell_snapshot()
        renderer = FakeRenderer({"https://example.com": RICH})

        replaced = await apply_headless_rendering(snapshot, renderer, settings)

        assert replaced
        assert snapshot.homepage is not None
        assert snapshot.homepage.text == RICH
        assert snapshot.homepage.category == PageCategory.HOMEPAGE

    @pytest.mark.asyncio
    async def test_keeps_original_when_render_not_richer(self, settings) -> None:
        """Test a render without more text is discarded."""
        snapshot = _shell_snapshot()
        renderer = FakeRenderer({"https://example.com": SHELL})

        assert not await apply_headless_rendering(snapshot, renderer, settings)
        assert snapshot.homepage is not None and snapshot.homepage.text == SHELL

    @pytest.mark.asyncio
    async def test_render_failure_keeps_original(self, settings) -> None:
        """Test a failed render is not fatal."""
        snapshot = _shell_snapshot()

        assert not await apply_headless_rendering(snapshot, FakeRenderer({}), settings)
        assert snapshot.homepage is not None and snapshot.homepage.text == SHELL

    @pytest.mark.asyncio
    async def test_server_rendered_homepage_skipped(self, settings) -> None:
        """Test non-shell pages are never rendered."""
        snapshot = DomainSnapshot(
            domain="example.com",
            protocol="https",
            homepage=FetchedDocument(text=RICH, status=200),
        )
        renderer = FakeRenderer({"https://example.com": RICH})

        assert not await apply_headless_rendering(snapshot, renderer, settings)
        assert renderer.calls == []

    @pytest.mark.asyncio
    async def test_faq_rendered_after_homepage(self, settings) -> None:
        """Test the FAQ shell is rendered once the homepage was replaced."""
        snapshot = _shell_snapshot(faq=SHELL)
        renderer = FakeRenderer({"https://example.com": RICH, "https://example.com/faq": RICH})

        await apply_headless_rendering(snapshot, renderer, settings)

        assert renderer.calls == ["https://example.com", "https://example.com/faq"]
        assert snapshot.faq_page is not None and snapshot.faq_page.text == RICH

    @pytest.mark.asyncio
    async def test_faq_untouched_when_homepage_kept(self, settings) -> None:
        """Test the FAQ is not rendered when the homepage was kept."""
        snapshot = _shell_snapshot(faq=SHELL)
        renderer = FakeRenderer({"https://example.com/faq": RICH})

        await apply_headless_rendering(snapshot, renderer, settings)

        assert renderer.calls == ["https://example.com"]
        assert snapshot.faq_page is not None and snapshot.faq_page.text == SHELL
