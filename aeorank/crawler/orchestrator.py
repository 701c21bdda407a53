"""Acquisition orchestrator.

Builds the DomainSnapshot for one audit: protocol resolution, hijack and
parked classification, concurrent secondary fetches, RSS discovery and
sitemap-driven blog sampling. Secondary failures only leave gaps in the
snapshot; nothing here raises for an unreachable resource.
"""

import asyncio
from typing import Protocol
from urllib.parse import urljoin

import structlog

from aeorank.config import Settings, get_settings
from aeorank.crawler.fetcher import Fetcher, is_ok, is_reachable
from aeorank.crawler.parked import detect_hijack, detect_parked_domain
from aeorank.crawler.sitemap import extract_blog_urls, select_child_sitemap
from aeorank.extraction.html import parse_html, visible_text
from aeorank.extraction.spa import is_spa_shell
from aeorank.models import DomainSnapshot, FetchedDocument, PageCategory

logger = structlog.get_logger(__name__)

FAQ_PATH = "/faq"
FAQ_FALLBACK_PATHS = ["/frequently-asked-questions", "/help", "/support", "/help-center"]
RSS_FALLBACK_PATHS = ["/feed", "/rss.xml", "/feed.xml"]
FEED_MARKERS = ("<rss", "<feed", "<channel")
FEED_LINK_TYPES = ("application/rss+xml", "application/atom+xml")


class Renderer(Protocol):
    async def render(self, url: str) -> FetchedDocument | None: ...


def is_feed(document: FetchedDocument) -> bool:
    return document.status == 200 and any(marker in document.text for marker in FEED_MARKERS)


def find_feed_link(html: str) -> str | None:
    """href of the first ``<link>`` advertising an RSS or Atom feed."""
    for link in parse_html(html).find_all("link", href=True):
        if str(link.get("type", "")).lower() in FEED_LINK_TYPES:
            return str(link["href"])
    return None


async def _fetch_faq(fetcher: Fetcher, base_url: str) -> FetchedDocument | None:
    attempts = [(path, f"{base_url}{path}") for path in [FAQ_PATH, *FAQ_FALLBACK_PATHS]]
    _, document = await fetcher.first_success(attempts, accept=is_ok)
    return document


async def _fetch_rss(fetcher: Fetcher, base_url: str, homepage: FetchedDocument) -> FetchedDocument | None:
    """Advertised feed first, then well-known feed paths."""
    href = find_feed_link(homepage.text)
    if href:
        feed_url = urljoin(base_url + "/", href)
        feed = await fetcher.fetch(feed_url)
        if feed is not None and feed.status == 200:
            return feed

    attempts = [(path, f"{base_url}{path}") for path in RSS_FALLBACK_PATHS]
    label, feed = await fetcher.first_success(attempts, accept=is_feed)
    return feed if label else None


async def _sample_blog_pages(
    fetcher: Fetcher,
    domain: str,
    sitemap: FetchedDocument,
    settings: Settings,
) -> list[FetchedDocument]:
    sitemap_text = sitemap.text
    child_url = select_child_sitemap(sitemap_text)
    if child_url:
        child = await fetcher.fetch(child_url)
        if child is not None and child.status == 200:
            sitemap_text = child.text

    blog_urls = extract_blog_urls(sitemap_text, domain, limit=settings.blog_sample_limit)
    if not blog_urls:
        return []

    fetched = await fetcher.fetch_many(blog_urls)
    return [
        doc.tagged(PageCategory.BLOG)
        for doc in fetched
        if doc is not None and doc.status == 200 and len(doc.text) > settings.min_page_chars
    ]


async def acquire_snapshot(
    domain: str,
    fetcher: Fetcher,
    settings: Settings | None = None,
) -> DomainSnapshot:
    """
    Fetch everything needed to score a domain.

    Args:
        domain: Bare domain to audit (no scheme)
        fetcher: Fetcher used for every request
        settings: Sampling limits; defaults to the global settings

    Returns:
        DomainSnapshot. ``protocol`` is None when the site is unreachable;
        ``redirected_to`` or ``parked_reason`` is set when acquisition
        stopped after the homepage.
    """
    settings = settings or get_settings()
    log = logger.bind(domain=domain)

    protocol, homepage = await fetcher.first_success(
        [("https", f"https://{domain}"), ("http", f"http://{domain}")],
        accept=is_reachable,
    )
    if protocol is None or homepage is None:
        log.warning("domain_unreachable")
        return DomainSnapshot(domain=domain)

    homepage = homepage.tagged(PageCategory.HOMEPAGE)
    snapshot = DomainSnapshot(domain=domain, protocol=protocol, homepage=homepage)

    redirected_to = detect_hijack(domain, homepage.text, homepage.final_url)
    if redirected_to:
        log.warning("domain_hijacked", redirected_to=redirected_to)
        snapshot.redirected_to = redirected_to
        return snapshot

    parked = detect_parked_domain(homepage.text)
    if parked.is_parked:
        log.warning("domain_parked", reason=parked.reason)
        snapshot.parked_reason = parked.reason or "parked"
        return snapshot

    base_url = f"{protocol}://{domain}"

    llms_txt, robots_txt, faq_page, sitemap_xml, ai_txt = await asyncio.gather(
        fetcher.fetch(f"{base_url}/llms.txt"),
        fetcher.fetch(f"{base_url}/robots.txt"),
        _fetch_faq(fetcher, base_url),
        fetcher.fetch(f"{base_url}/sitemap.xml"),
        fetcher.fetch(f"{base_url}/ai.txt"),
    )
    snapshot.llms_txt = llms_txt
    snapshot.robots_txt = robots_txt
    snapshot.faq_page = faq_page
    snapshot.sitemap_xml = sitemap_xml
    snapshot.ai_txt = ai_txt

    snapshot.rss_feed = await _fetch_rss(fetcher, base_url, homepage)

    if sitemap_xml is not None and sitemap_xml.status == 200:
        snapshot.pages.extend(await _sample_blog_pages(fetcher, domain, sitemap_xml, settings))

    log.info(
        "snapshot_acquired",
        protocol=protocol,
        homepage_length=len(homepage.text),
        has_llms_txt=llms_txt is not None and llms_txt.ok,
        has_robots_txt=robots_txt is not None and robots_txt.ok,
        has_sitemap=sitemap_xml is not None and sitemap_xml.ok,
        has_rss=snapshot.rss_feed is not None,
        blog_samples=len(snapshot.pages),
    )
    return snapshot


async def _render_if_richer(
    renderer: Renderer, url: str, original: FetchedDocument
) -> FetchedDocument | None:
    rendered = await renderer.render(url)
    if rendered is None:
        return None
    if len(visible_text(rendered.text)) > len(visible_text(original.text)):
        return rendered
    return None


async def apply_headless_rendering(
    snapshot: DomainSnapshot,
    renderer: Renderer,
    settings: Settings | None = None,
) -> bool:
    """
    Replace client-rendered shells with their headless-rendered HTML.

    The homepage is only replaced when rendering yields strictly more
    visible text. The FAQ page is considered only after the homepage was
    replaced, and follows the same rule.

    Returns:
        Whether the homepage was replaced
    """
    settings = settings or get_settings()
    homepage = snapshot.homepage
    if homepage is None or snapshot.base_url is None:
        return False
    if not is_spa_shell(homepage.text, settings.spa_text_threshold):
        return False

    log = logger.bind(domain=snapshot.domain)
    rendered = await _render_if_richer(renderer, snapshot.base_url, homepage)
    if rendered is None:
        log.info("headless_homepage_kept")
        return False

    snapshot.homepage = FetchedDocument(
        text=rendered.text,
        status=rendered.status,
        final_url=rendered.final_url or homepage.final_url,
        category=PageCategory.HOMEPAGE,
    )
    log.info(
        "headless_homepage_replaced",
        original_text_length=len(visible_text(homepage.text)),
        rendered_text_length=len(visible_text(rendered.text)),
    )

    faq = snapshot.faq_page
    if faq is not None and is_spa_shell(faq.text, settings.spa_text_threshold):
        faq_url = f"{snapshot.base_url}{FAQ_PATH}"
        rendered_faq = await _render_if_richer(renderer, faq_url, faq)
        if rendered_faq is not None:
            snapshot.faq_page = rendered_faq
            log.info("headless_faq_replaced", url=faq_url)

    return True
