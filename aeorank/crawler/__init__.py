"""Crawler package for site data acquisition."""

# Lazy imports to avoid requiring all dependencies at import time
# Use explicit imports when needed:
# from aeorank.crawler.fetcher import Fetcher
# from aeorank.crawler.orchestrator import acquire_snapshot, apply_headless_rendering
# from aeorank.crawler.discovery import discover_pages
# from aeorank.crawler.render import HeadlessRenderer, RendererConfig
# from aeorank.crawler.parked import detect_parked_domain, detect_hijack
# from aeorank.crawler.sitemap import parse_sitemap, analyze_lastmod_dates
# from aeorank.crawler.url import extract_domain, extract_brand_name

__all__ = [
    # Fetcher
    "Fetcher",
    "is_ok",
    "is_reachable",
    # Acquisition
    "acquire_snapshot",
    "apply_headless_rendering",
    "discover_pages",
    # Headless rendering
    "HeadlessRenderer",
    "RendererConfig",
    # Parked / hijacked domains
    "ParkedDomainResult",
    "detect_parked_domain",
    "detect_hijack",
    # Sitemap
    "SitemapDocument",
    "SitemapDateAnalysis",
    "parse_sitemap",
    "extract_blog_urls",
    "extract_content_pages_from_sitemap",
    "analyze_lastmod_dates",
    # URL utilities
    "extract_domain",
    "extract_brand_name",
    "is_same_brand",
]
