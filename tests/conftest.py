"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable, Iterator

import httpx
import pytest

# Set test environment before any package code reads settings
os.environ["AEORANK_ENV"] = "test"
os.environ["AEORANK_HEADLESS_ENABLED"] = "false"


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Re-read settings for every test so env overrides apply."""
    from aeorank.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Test settings instance."""
    from aeorank.config import get_settings

    return get_settings()


Route = tuple[int, str] | Callable[[httpx.Request], httpx.Response]


class FakeSite:
    """In-memory site served through httpx.MockTransport.

    Routes are keyed by ``host + path``; unknown URLs answer 404. Hosts in
    ``down`` refuse connections, optionally per scheme (``"https://host"``).
    """

    def __init__(self, routes: dict[str, Route] | None = None, down: set[str] | None = None):
        self.routes = routes or {}
        self.down = down or set()
        self.requests: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        path = request.url.path or "/"
        self.requests.append(f"{request.url.scheme}://{host}{path}")

        if host in self.down or f"{request.url.scheme}://{host}" in self.down:
            raise httpx.ConnectError("connection refused", request=request)

        route = self.routes.get(f"{host}{path}")
        if route is None:
            return httpx.Response(404, text="Not Found")
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requested(self, path: str) -> bool:
        return any(url.endswith(path) for url in self.requests)


@pytest.fixture
def fake_site() -> Callable[..., FakeSite]:
    """Factory for FakeSite instances."""
    return FakeSite
