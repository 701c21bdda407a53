"""HTTP fetcher for audit resources.

One GET per URL under a fixed timeout, no retries. Failures resolve to None
so concurrent fetches never abort their siblings.
"""

import asyncio
from collections.abc import Callable, Sequence

import httpx
import structlog

from aeorank.config import Settings, get_settings
from aeorank.models import FetchedDocument

logger = structlog.get_logger(__name__)

Acceptor = Callable[[FetchedDocument], bool]


def is_reachable(document: FetchedDocument) -> bool:
    """Status in [200, 400): a usable answer, possibly after redirects."""
    return 200 <= document.status < 400


def is_ok(document: FetchedDocument) -> bool:
    return document.status == 200


class Fetcher:
    """Async HTTP fetcher with a body cap and per-request timeouts."""

    def __init__(
        self,
        user_agent: str = "AEO-Visibility-Bot/1.0",
        timeout: float = 15.0,
        max_body_chars: int = 500_000,
        max_redirects: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_body_chars = max_body_chars
        self.max_redirects = max_redirects
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "Fetcher":
        settings = settings or get_settings()
        return cls(
            user_agent=settings.user_agent,
            timeout=settings.fetch_timeout,
            max_body_chars=settings.max_body_chars,
            transport=transport,
        )

    async def __aenter__(self) -> "Fetcher":
        """Open a shared client for the lifetime of the context."""
        self._client = self._build_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            max_redirects=self.max_redirects,
            headers={
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            },
            transport=self._transport,
        )

    async def fetch(self, url: str, timeout: float | None = None) -> FetchedDocument | None:
        """
        Fetch a URL once.

        Args:
            url: Absolute URL to fetch
            timeout: Override for the default timeout, in seconds

        Returns:
            FetchedDocument with the (capped) body and final status, or None
            on network error, timeout or invalid URL
        """
        if self._client is not None:
            return await self._fetch_with(self._client, url, timeout)
        async with self._build_client() as client:
            return await self._fetch_with(client, url, timeout)

    async def _fetch_with(
        self, client: httpx.AsyncClient, url: str, timeout: float | None
    ) -> FetchedDocument | None:
        try:
            async with client.stream(
                "GET", url, timeout=timeout if timeout is not None else self.timeout
            ) as response:
                chunks: list[str] = []
                size = 0
                async for chunk in response.aiter_text():
                    chunks.append(chunk)
                    size += len(chunk)
                    if size >= self.max_body_chars:
                        break
                return FetchedDocument(
                    text="".join(chunks)[: self.max_body_chars],
                    status=response.status_code,
                    final_url=str(response.url),
                )
        except httpx.TimeoutException:
            logger.warning("fetch_timeout", url=url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("fetch_failed", url=url, error=str(e) or type(e).__name__)
        return None

    async def fetch_many(
        self, urls: Sequence[str], timeout: float | None = None
    ) -> list[FetchedDocument | None]:
        """Fetch URLs concurrently; results keep the order of ``urls``."""
        return list(await asyncio.gather(*(self.fetch(url, timeout) for url in urls)))

    async def first_success(
        self,
        attempts: Sequence[tuple[str, str]],
        accept: Acceptor = is_ok,
        timeout: float | None = None,
    ) -> tuple[str | None, FetchedDocument | None]:
        """
        Try labelled URLs in order until one response is accepted.

        Each attempt only runs after the previous one failed.

        Args:
            attempts: (label, url) pairs in priority order
            accept: Predicate a response must satisfy
            timeout: Per-request timeout override

        Returns:
            (label, document) of the first accepted response. When none is
            accepted the label is None and the document is the response to
            the first attempt (None if it failed outright).
        """
        first: FetchedDocument | None = None
        for index, (label, url) in enumerate(attempts):
            document = await self.fetch(url, timeout)
            if index == 0:
                first = document
            if document is not None and accept(document):
                return label, document
        return None, first
