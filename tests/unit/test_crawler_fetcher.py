"""Tests for the HTTP fetcher."""

import httpx
import pytest

from aeorank.crawler.fetcher import Fetcher, is_ok, is_reachable
from aeorank.models import FetchedDocument


class TestFetch:
    """Tests for Fetcher.fetch."""

    @pytest.mark.asyncio
    async def test_returns_document(self, fake_site) -> None:
        """Test a successful fetch."""
        site = fake_site({"example.com/llms.txt": (200, "# Acme")})
        fetcher = Fetcher(transport=site.transport)

        doc = await fetcher.fetch("https://example.com/llms.txt")

        assert doc is not None
        assert doc.status == 200
        assert doc.text == "# Acme"
        assert doc.final_url == "https://example.com/llms.txt"

    @pytest.mark.asyncio
    async def test_non_200_is_returned(self, fake_site) -> None:
        """Test error statuses are documents, not failures."""
        fetcher = Fetcher(transport=fake_site().transport)

        doc = await fetcher.fetch("https://example.com/missing")

        assert doc is not None
        assert doc.status == 404

    @pytest.mark.asyncio
    async def test_body_is_capped(self, fake_site) -> None:
        """Test bodies are truncated to max_body_chars."""
        site = fake_site({"example.com/": (200, "x" * 1000)})
        fetcher = Fetcher(max_body_chars=100, transport=site.transport)

        doc = await fetcher.fetch("https://example.com/")

        assert doc is not None
        assert len(doc.text) == 100

    @pytest.mark.asyncio
    async def test_connection_error_returns_none(self, fake_site) -> None:
        """Test network failures resolve to None."""
        site = fake_site(down={"example.com"})
        fetcher = Fetcher(transport=site.transport)

        assert await fetcher.fetch("https://example.com/") is None

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self) -> None:
        """Test timeouts resolve to None."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        fetcher = Fetcher(transport=httpx.MockTransport(handler))

        assert await fetcher.fetch("https://example.com/") is None

    @pytest.mark.asyncio
    async def test_follows_redirects(self, fake_site) -> None:
        """Test redirects are followed and the final URL recorded."""
        site = fake_site(
            {
                "example.com/": lambda r: httpx.Response(301, headers={"Location": "https://www.example.com/"}),
                "www.example.com/": (200, "<html>home</html>"),
            }
        )
        fetcher = Fetcher(transport=site.transport)

        doc = await fetcher.fetch("https://example.com/")

        assert doc is not None
        assert doc.status == 200
        assert doc.final_url == "https://www.example.com/"

    @pytest.mark.asyncio
    async def test_sends_user_agent(self) -> None:
        """Test the configured User-Agent is sent."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["User-Agent"])
            return httpx.Response(200, text="ok")

        async with Fetcher(user_agent="TestBot/2.0", transport=httpx.MockTransport(handler)) as fetcher:
            await fetcher.fetch("https://example.com/")

        assert seen == ["TestBot/2.0"]


class TestFetchMany:
    """Tests for concurrent fetching."""

    @pytest.mark.asyncio
    async def test_preserves_order(self, fake_site) -> None:
        """Test results follow input order, failures as None."""
        site = fake_site({"a.com/": (200, "a"), "c.com/": (200, "c")}, down={"b.com"})
        fetcher = Fetcher(transport=site.transport)

        docs = await fetcher.fetch_many(["https://a.com/", "https://b.com/", "https://c.com/"])

        assert [d.text if d else None for d in docs] == ["a", None, "c"]


class TestFirstSuccess:
    """Tests for sequential fallback fetching."""

    @pytest.mark.asyncio
    async def test_falls_back(self, fake_site) -> None:
        """Test the next attempt runs after a failure."""
        site = fake_site({"example.com/": (200, "home")}, down={"https://example.com"})
        fetcher = Fetcher(transport=site.transport)

        label, doc = await fetcher.first_success(
            [("https", "https://example.com"), ("http", "http://example.com")],
            accept=is_reachable,
        )

        assert label == "http"
        assert doc is not None and doc.text == "home"

    @pytest.mark.asyncio
    async def test_stops_at_first_accepted(self, fake_site) -> None:
        """Test later attempts are skipped once one is accepted."""
        site = fake_site({"example.com/faq": (200, "faq"), "example.com/help": (200, "help")})
        fetcher = Fetcher(transport=site.transport)

        label, doc = await fetcher.first_success(
            [("/faq", "https://example.com/faq"), ("/help", "https://example.com/help")]
        )

        assert label == "/faq"
        assert not site.requested("/help")

    @pytest.mark.asyncio
    async def test_none_accepted_returns_first(self, fake_site) -> None:
        """Test the first response is returned when nothing is accepted."""
        fetcher = Fetcher(transport=fake_site().transport)

        label, doc = await fetcher.first_success(
            [("/faq", "https://example.com/faq"), ("/help", "https://example.com/help")]
        )

        assert label is None
        assert doc is not None and doc.status == 404


class TestStatusPredicates:
    """Tests for is_ok and is_reachable."""

    def test_predicates(self) -> None:
        """Test status ranges."""
        assert is_ok(FetchedDocument(text="", status=200))
        assert not is_ok(FetchedDocument(text="", status=204))
        assert is_reachable(FetchedDocument(text="", status=304))
        assert not is_reachable(FetchedDocument(text="", status=404))
