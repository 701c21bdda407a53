"""Headless browser rendering for client-side rendered pages.

Playwright is optional. Every failure (package missing, browser launch,
navigation) degrades to "no rendering" and never propagates.
"""

import contextlib
from dataclasses import dataclass

import structlog

try:
    from playwright.async_api import Route, async_playwright
    from playwright.async_api import TimeoutError as PlaywrightTimeout

    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    PLAYWRIGHT_AVAILABLE = False

from aeorank.config import Settings, get_settings
from aeorank.models import FetchedDocument

logger = structlog.get_logger(__name__)

# Resource types not needed to build the DOM
BLOCKED_RESOURCE_TYPES = frozenset(["image", "font", "media", "stylesheet"])

BODY_TEXT_READY = (
    "() => document.body && document.body.innerText"
    " && document.body.innerText.replace(/\\s+/g, ' ').trim().length > 100"
)

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


@dataclass
class RendererConfig:
    """Configuration for the headless renderer."""

    user_agent: str = "AEO-Visibility-Bot/1.0"
    timeout: float = 25.0  # seconds, navigation
    content_wait: float = 5.0  # seconds, waiting for body text
    max_body_chars: int = 500_000
    viewport_width: int = 1280
    viewport_height: int = 720

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RendererConfig":
        settings = settings or get_settings()
        return cls(
            user_agent=settings.user_agent,
            timeout=settings.headless_timeout,
            content_wait=settings.headless_content_wait,
            max_body_chars=settings.max_body_chars,
        )


async def _block_heavy_resources(route: "Route") -> None:
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class HeadlessRenderer:
    """Renders a page in headless Chromium and returns the resulting HTML."""

    def __init__(self, config: RendererConfig | None = None):
        self.config = config or RendererConfig()

    @property
    def available(self) -> bool:
        return PLAYWRIGHT_AVAILABLE

    async def render(self, url: str) -> FetchedDocument | None:
        """
        Render a URL with a fresh browser.

        Returns:
            FetchedDocument with status 200 and the rendered HTML, or None
            when rendering is unavailable or failed
        """
        if not PLAYWRIGHT_AVAILABLE:
            logger.info("headless_unavailable", url=url)
            return None

        try:
            async with async_playwright() as pw:
                browser = await pw.chromium.launch(headless=True, args=BROWSER_ARGS)
                try:
                    context = await browser.new_context(
                        user_agent=self.config.user_agent,
                        viewport={
                            "width": self.config.viewport_width,
                            "height": self.config.viewport_height,
                        },
                    )
                    page = await context.new_page()
                    await page.route("**/*", _block_heavy_resources)
                    await page.goto(
                        url,
                        timeout=self.config.timeout * 1000,
                        wait_until="networkidle",
                    )
                    # Body text may never pass the threshold; keep whatever rendered
                    with contextlib.suppress(PlaywrightTimeout):
                        await page.wait_for_function(
                            BODY_TEXT_READY, timeout=self.config.content_wait * 1000
                        )
                    html = await page.content()
                    final_url = page.url
                finally:
                    await browser.close()
        except Exception as e:
            logger.warning("headless_render_failed", url=url, error=str(e))
            return None

        logger.info("headless_render_complete", url=url, length=len(html))
        return FetchedDocument(
            text=html[: self.config.max_body_chars],
            status=200,
            final_url=final_url,
        )
