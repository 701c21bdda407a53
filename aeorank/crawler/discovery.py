"""Multi-page discovery.

Finds well-known pages (about, pricing, contact, ...) through the homepage
navigation or fallback paths, plus a spread of content pages from the
sitemap, and appends what it fetches to the snapshot's page sample.
"""

import re
from urllib.parse import urlparse

import structlog

from aeorank.config import Settings, get_settings
from aeorank.crawler.fetcher import Fetcher
from aeorank.crawler.sitemap import extract_content_pages_from_sitemap
from aeorank.crawler.url import strip_www
from aeorank.extraction.html import parse_html
from aeorank.models import DomainSnapshot, FetchedDocument, PageCategory

logger = structlog.get_logger(__name__)

# Candidate paths per category; the first entry is the fallback
PAGE_VARIANTS: dict[PageCategory, list[str]] = {
    PageCategory.ABOUT: ["/about", "/about-us", "/company", "/who-we-are"],
    PageCategory.PRICING: ["/pricing", "/plans", "/packages"],
    PageCategory.SERVICES: ["/services", "/features", "/solutions", "/products", "/what-we-do"],
    PageCategory.CONTACT: ["/contact", "/contact-us", "/get-in-touch"],
    PageCategory.TEAM: ["/team", "/our-team", "/authors", "/people", "/leadership"],
    PageCategory.RESOURCES: ["/resources", "/resource-center", "/library"],
    PageCategory.DOCS: ["/docs", "/documentation", "/help", "/help-center", "/support"],
    PageCategory.CASES: ["/case-studies", "/customers", "/success-stories", "/testimonials"],
}

SKIP_EXTENSION_PATTERN = re.compile(r"\.(js|css|png|jpg|svg|ico|pdf|xml|txt)$", re.IGNORECASE)
SKIP_PREFIX_PATTERN = re.compile(
    r"^/(api|wp-|static|assets|_next|auth|login|signup|cart|checkout)\b", re.IGNORECASE
)

# Bodies shorter than this are never worth keeping
MIN_FETCH_CHARS = 200


def extract_nav_links(html: str, domain: str) -> list[str]:
    """
    Extract internal page paths linked from ``<nav>`` elements.

    Args:
        html: Homepage HTML
        domain: Audited domain

    Returns:
        Deduplicated paths in document order, e.g. ``["/about", "/pricing"]``
    """
    site = strip_www(domain)
    paths: list[str] = []

    for nav in parse_html(html).find_all("nav"):
        for anchor in nav.find_all("a", href=True):
            href = str(anchor["href"]).strip()
            if not href or "#" in href:
                continue

            if href.startswith("/"):
                path = href
            elif href.startswith("http"):
                parsed = urlparse(href)
                if not parsed.hostname or strip_www(parsed.hostname) != site:
                    continue
                path = parsed.path
            else:
                continue

            path = path.rstrip("/") or "/"
            if path == "/":
                continue
            if SKIP_EXTENSION_PATTERN.search(path) or SKIP_PREFIX_PATTERN.search(path):
                continue
            if path not in paths:
                paths.append(path)

    return paths


def match_category_path(nav_paths: list[str], variants: list[str]) -> str:
    """Nav path belonging to a category, or the category's first variant."""
    for path in nav_paths:
        lower = path.lower()
        if any(lower == v or lower.startswith(v + "/") for v in variants):
            return path
    return variants[0]


def collect_candidates(snapshot: DomainSnapshot, content_limit: int = 6) -> dict[str, PageCategory]:
    """URLs to fetch mapped to their category, excluding pages already held."""
    base_url = snapshot.base_url
    if base_url is None or snapshot.homepage is None:
        return {}

    known = {base_url, base_url + "/"}
    known.update(page.final_url for page in snapshot.pages if page.final_url)

    candidates: dict[str, PageCategory] = {}
    nav_paths = extract_nav_links(snapshot.homepage.text, snapshot.domain)
    for category, variants in PAGE_VARIANTS.items():
        url = f"{base_url}{match_category_path(nav_paths, variants)}"
        if url not in known:
            candidates[url] = category

    sitemap = snapshot.sitemap_xml
    if sitemap is not None and sitemap.status == 200:
        for url in extract_content_pages_from_sitemap(sitemap.text, snapshot.domain, limit=content_limit):
            if url not in known:
                candidates[url] = PageCategory.CONTENT

    return candidates


def _is_usable(document: FetchedDocument | None, min_chars: int) -> bool:
    return (
        document is not None
        and document.status == 200
        and len(document.text) >= MIN_FETCH_CHARS
        and len(document.text) > min_chars
    )


async def discover_pages(
    snapshot: DomainSnapshot,
    fetcher: Fetcher,
    settings: Settings | None = None,
) -> int:
    """
    Fetch well-known and sitemap content pages and append them to the snapshot.

    Returns:
        Number of pages added
    """
    if not snapshot.protocol or snapshot.homepage is None:
        return 0

    settings = settings or get_settings()
    candidates = collect_candidates(snapshot, content_limit=settings.content_page_limit)
    if not candidates:
        return 0

    urls = list(candidates)
    results = await fetcher.fetch_many(urls, timeout=settings.page_timeout)

    added = 0
    for url, document in zip(urls, results, strict=True):
        if _is_usable(document, settings.min_page_chars):
            snapshot.pages.append(document.tagged(candidates[url]))
            added += 1

    logger.info(
        "pages_discovered",
        domain=snapshot.domain,
        candidates=len(urls),
        added=added,
    )
    return added
