"""Technical access criteria: crawler files, sitemaps, feeds and canonical tags."""

import re

from aeorank.crawler.sitemap import SitemapDateAnalysis, count_locations
from aeorank.extraction.html import stripped_text
from aeorank.extraction.signals import (
    CANONICAL_TAG_RE,
    FEED_ITEM_RE,
    FEED_LINK_RE,
    META_DESCRIPTION_RE,
    TITLE_RE,
    blocked_ai_crawlers,
    canonical_match,
    count_tag,
    has_tag,
    mentioned_ai_crawlers,
)
from aeorank.models import Priority
from aeorank.scoring.context import SiteView
from aeorank.scoring.rules import (
    CRITICAL,
    HIGH,
    LOW,
    MEDIUM,
    CriterionSpec,
    Gate,
    PriorityBands,
    check,
    info,
    issue,
    requires_homepage,
    tiers,
)

URL_RE = re.compile(r"https?://")
LASTMOD_RE = re.compile(r"<lastmod>([^<]+)</lastmod>", re.IGNORECASE)
FEED_ROOT_MARKERS = ("<rss", "<feed", "<channel")
CLEAN_TEXT_MIN_CHARS = 500
NO_HTTPS_CAP = 3


# llms.txt


def _llms_txt_note(view: SiteView) -> str:
    document = view.snapshot.llms_txt
    if document is None:
        return "connection failed"
    if document.is_html_catch_all:
        return "HTML page served (not a valid text file)"
    return f"HTTP {document.status}"


LLMS_TXT = CriterionSpec(
    id="llms_txt",
    label="llms.txt File",
    gates=(
        Gate(
            blocked=lambda v: v.llms_txt is None,
            score=0,
            finding=issue(
                CRITICAL,
                lambda v: f"No llms.txt file found at {v.protocol}://{v.domain}/llms.txt ({_llms_txt_note(v)})",
                "Create a /llms.txt file that describes your site, services, and key pages in markdown format",
            ),
            priority=Priority.P0,
        ),
    ),
    base=4,
    rules=(
        tiers(
            lambda v: len(v.llms_txt),
            [(100, info("llms.txt file found ({v} characters)", 2))],
            otherwise=issue(
                MEDIUM,
                "llms.txt exists but is very short ({v} characters)",
                "Add comprehensive description of your services, team, and key content",
            ),
        ),
        check(
            lambda v: "#" in v.llms_txt,
            info("llms.txt uses markdown headings for structure", 2),
            issue(LOW, "llms.txt lacks markdown structure", "Add headings (# About, ## Services, etc.) for better LLM parsing"),
        ),
        check(
            lambda v: URL_RE.search(v.llms_txt),
            info("llms.txt includes URLs to key pages", 2),
            issue(MEDIUM, "llms.txt does not link to key pages", "Add URLs to your most important pages (services, about, FAQ)"),
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P0),
)


# robots.txt

ROBOTS_TXT = CriterionSpec(
    id="robots_txt",
    label="robots.txt for AI Crawlers",
    gates=(
        Gate(
            blocked=lambda v: v.robots_txt is None,
            score=2,
            finding=issue(HIGH, "No robots.txt file found", "Create a robots.txt that explicitly allows AI crawlers"),
            priority=Priority.P0,
        ),
    ),
    base=3,
    rules=(
        check(
            lambda v: mentioned_ai_crawlers(v.robots_txt),
            info(lambda found: f"AI crawlers mentioned: {', '.join(found)}", 3),
            issue(
                MEDIUM,
                "No explicit AI crawler rules in robots.txt",
                "Add User-agent rules for GPTBot, ClaudeBot, PerplexityBot with Allow: /",
            ),
        ),
        check(
            lambda v: blocked_ai_crawlers(v.robots_txt),
            issue(
                CRITICAL,
                lambda blocked: f"AI crawlers BLOCKED: {', '.join(blocked)}",
                "Change Disallow: / to Allow: / for AI crawler user-agents",
                delta=-2,
            ),
            info("AI crawlers are allowed to index the site", 2),
            when=lambda v: bool(mentioned_ai_crawlers(v.robots_txt)),
        ),
        check(
            lambda v: "sitemap:" in v.robots_txt.lower(),
            info("Sitemap URL referenced in robots.txt", 2),
            issue(LOW, "No sitemap reference in robots.txt", "Add Sitemap: https://yoursite.com/sitemap.xml to robots.txt"),
        ),
    ),
    priority=PriorityBands(4, Priority.P2, Priority.P0),
)


# Crawlable HTML


def _semantic_containers(view: SiteView) -> list[str]:
    return [tag for tag in ("main", "article", "section") if has_tag(view.homepage_html, tag)]


def _missing_head_tags(view: SiteView) -> list[str]:
    missing = []
    if not TITLE_RE.search(view.homepage_html):
        missing.append("title tag")
    if not META_DESCRIPTION_RE.search(view.homepage_html):
        missing.append("meta description")
    return missing


CLEAN_HTML = CriterionSpec(
    id="clean_html",
    label="Clean, Crawlable HTML",
    gates=(requires_homepage(Priority.P1),),
    rules=(
        check(
            lambda v: v.is_https,
            info("Site serves over HTTPS"),
            issue(
                CRITICAL,
                "Site does not support HTTPS",
                "Enable HTTPS with a valid SSL certificate. Sites without HTTPS are penalized by AI crawlers.",
            ),
        ),
        tiers(
            _semantic_containers,
            [(2, info(lambda found: f"Uses semantic HTML5 elements: {', '.join(found)}", lambda found: min(3, len(found))))],
            otherwise=issue(
                MEDIUM,
                "Limited semantic HTML5 usage",
                "Wrap main content in <main>, use <article> for standalone content, <section> for grouped content",
                delta=lambda found: min(3, len(found)),
            ),
            key=len,
        ),
        tiers(
            lambda v: count_tag(v.homepage_html, "h1"),
            [
                (2, issue(MEDIUM, "Multiple H1 tag(s) found ({v})", "Use exactly one H1 per page")),
                (1, info("Single H1 tag found - correct heading hierarchy", 2)),
            ],
            otherwise=issue(HIGH, "No H1 tag(s) found ({v})", "Use exactly one H1 per page"),
        ),
        check(
            lambda v: len(stripped_text(v.homepage_html)) > CLEAN_TEXT_MIN_CHARS,
            info("Page has substantial text content accessible without JavaScript", 3),
            issue(
                HIGH,
                "Very little text content visible in HTML source",
                "Ensure key content is server-rendered, not loaded via JavaScript only",
            ),
        ),
        check(
            _missing_head_tags,
            issue(MEDIUM, lambda missing: f"Missing {' and '.join(missing)}", 'Add <title> and <meta name="description"> tags'),
            info("Page has title and meta description", 2),
        ),
    ),
    cap=lambda v: None if v.is_https else NO_HTTPS_CAP,
    priority=PriorityBands(7, Priority.P3, Priority.P1),
)


# Sitemap

SITEMAP_COMPLETENESS = CriterionSpec(
    id="sitemap_completeness",
    label="Sitemap Completeness",
    gates=(
        Gate(
            blocked=lambda v: v.sitemap_text is None,
            score=0,
            finding=issue(
                CRITICAL,
                "No sitemap.xml found",
                "Create a sitemap.xml with all indexable pages and submit to search engines",
            ),
            priority=Priority.P1,
        ),
    ),
    base=2,
    rules=(
        check(
            lambda v: "<urlset" in v.sitemap_text or "<sitemapindex" in v.sitemap_text,
            info("Valid sitemap XML structure detected", 2),
            issue(
                HIGH,
                "sitemap.xml does not contain valid XML structure",
                "Ensure sitemap uses proper <urlset> or <sitemapindex> XML format",
            ),
        ),
        tiers(
            lambda v: count_locations(v.sitemap_text),
            [
                (50, info("{v} URLs in sitemap", 3)),
                (10, info("{v} URLs in sitemap", 2)),
                (1, issue(LOW, "Only {v} URL(s) in sitemap", "Add all important pages to your sitemap", delta=1)),
            ],
        ),
        tiers(
            lambda v: len(LASTMOD_RE.findall(v.sitemap_text)),
            [(1, info("{v} URLs have lastmod dates", 2))],
            otherwise=issue(
                MEDIUM,
                "No lastmod dates in sitemap",
                "Add <lastmod> dates to sitemap entries for freshness signals",
            ),
        ),
        check(
            lambda v: "<sitemapindex" in v.sitemap_text,
            info("Sitemap index found, indicating organized sitemap structure", 1),
            issue(
                LOW,
                "No sitemap index structure",
                "Use a <sitemapindex> with multiple child sitemaps for larger sites to improve crawl efficiency",
            ),
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P1),
)


# RSS / Atom


def _feed_body(view: SiteView) -> str | None:
    feed = view.snapshot.rss_feed
    if feed is None or feed.status != 200:
        return None
    return feed.text


def _is_valid_feed(view: SiteView) -> bool:
    body = _feed_body(view)
    return body is not None and any(marker in body for marker in FEED_ROOT_MARKERS)


def _has_feed_link(view: SiteView) -> bool:
    return bool(FEED_LINK_RE.search(view.homepage_html))


RSS_FEED = CriterionSpec(
    id="rss_feed",
    label="RSS/Atom Feed",
    rules=(
        check(
            _has_feed_link,
            info("RSS/Atom feed link tag found in homepage <head>", 3),
            issue(
                HIGH,
                "No RSS/Atom feed link tag in homepage",
                'Add <link rel="alternate" type="application/rss+xml" href="/feed"> to your <head>',
            ),
        ),
        check(
            _is_valid_feed,
            info("Valid RSS/Atom feed content detected", 3),
            issue(
                MEDIUM,
                "Feed URL returned content but not valid RSS/Atom XML",
                "Ensure your feed outputs valid RSS 2.0 or Atom XML",
            ),
            when=lambda v: _feed_body(v) is not None,
        ),
        tiers(
            lambda v: len(FEED_ITEM_RE.findall(_feed_body(v))),
            [
                (5, info("Feed contains {v} items", 4)),
                (
                    1,
                    issue(
                        LOW,
                        "Feed contains only {v} item(s)",
                        "Publish more content to populate your RSS feed with at least 5 items",
                        delta=2,
                    ),
                ),
            ],
            when=_is_valid_feed,
        ),
        check(
            lambda v: True,
            issue(
                MEDIUM,
                "No accessible RSS/Atom feed found",
                "Create an RSS feed to help AI engines discover and index new content automatically",
            ),
            when=lambda v: _feed_body(v) is None and not _has_feed_link(v),
        ),
    ),
    priority=PriorityBands(4, Priority.P3, Priority.P2),
)


# Canonical URL

CANONICAL_URL = CriterionSpec(
    id="canonical_url",
    label="Canonical URL Strategy",
    gates=(requires_homepage(Priority.P1),),
    rules=(
        check(
            lambda v: canonical_match(v.homepage_html),
            info(lambda match: f"Canonical URL found: {match.group(1)[:80]}", 4),
            issue(
                HIGH,
                "No canonical URL tag found",
                'Add <link rel="canonical" href="https://yoursite.com/page"> to prevent duplicate content issues',
            ),
        ),
        check(
            lambda v: v.domain in canonical_match(v.homepage_html).group(1),
            info("Canonical URL is self-referencing (points to same domain)", 3),
            issue(
                MEDIUM,
                "Canonical URL points to a different domain",
                "Ensure canonical URL points to the authoritative version of this page",
            ),
            when=lambda v: canonical_match(v.homepage_html) is not None,
        ),
        check(
            lambda v: canonical_match(v.homepage_html).group(1).startswith("https://"),
            info("Canonical URL uses HTTPS", 2),
            issue(MEDIUM, "Canonical URL does not use HTTPS", "Update canonical URL to use https://"),
            when=lambda v: canonical_match(v.homepage_html) is not None,
        ),
        tiers(
            lambda v: len(CANONICAL_TAG_RE.findall(v.homepage_html)),
            [
                (
                    2,
                    issue(
                        HIGH,
                        "{v} canonical tags found - must have exactly one",
                        "Remove duplicate canonical tags, keeping only one per page",
                        delta=-1,
                    ),
                ),
                (1, info("Single canonical tag present (no duplicates)", 1)),
            ],
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P1),
)


# Content velocity


def _velocity_noun(analysis: SitemapDateAnalysis, singular: bool = False) -> str:
    if analysis.is_uniform:
        return "distinct date(s)" if singular else "distinct dates"
    return "page(s) updated" if singular else "pages updated"


def _velocity_detail(suffix: str = ""):
    def detail(analysis: SitemapDateAnalysis) -> str:
        return (
            f"{analysis.effective_recent_count} {_velocity_noun(analysis)} "
            f"in last {analysis.window_days} days{suffix}"
        )

    return detail


CONTENT_VELOCITY = CriterionSpec(
    id="content_velocity",
    label="Content Publishing Velocity",
    gates=(
        Gate(
            blocked=lambda v: v.sitemap_text is None,
            score=0,
            finding=issue(
                MEDIUM,
                "No sitemap available to assess content velocity",
                "Create a sitemap.xml with lastmod dates to signal content publishing frequency",
            ),
            priority=Priority.P2,
        ),
        Gate(
            blocked=lambda v: v.sitemap_dates.total_with_dates == 0,
            score=2,
            finding=issue(
                MEDIUM,
                "No lastmod dates in sitemap",
                "Add lastmod dates to sitemap entries to signal content freshness",
            ),
            priority=Priority.P2,
        ),
    ),
    base=2,
    rules=(
        check(lambda v: v.sitemap_dates.total_with_dates, info("{v} pages have lastmod dates")),
        check(
            lambda v: v.sitemap_dates.uniform_detail if v.sitemap_dates.is_uniform else None,
            issue(
                MEDIUM,
                lambda detail: detail,
                "Set genuine lastmod dates per page reflecting actual content changes, not build timestamps",
            ),
        ),
        tiers(
            lambda v: v.sitemap_dates,
            [
                (20, info(_velocity_detail(" - excellent content velocity"), 8)),
                (10, info(_velocity_detail(" - good velocity"), 5)),
                (5, info(_velocity_detail(), 3)),
                (
                    1,
                    issue(
                        LOW,
                        lambda a: f"Only {a.effective_recent_count} {_velocity_noun(a, singular=True)} in last {a.window_days} days",
                        "Publish or update content more frequently to signal active maintenance",
                        delta=1,
                    ),
                ),
            ],
            otherwise=issue(
                MEDIUM,
                lambda a: f"No pages updated in the last {a.window_days} days",
                "Update existing content and publish new pages regularly",
            ),
            key=lambda analysis: analysis.effective_recent_count,
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P2),
)

TECHNICAL_CRITERIA = (
    LLMS_TXT,
    ROBOTS_TXT,
    CLEAN_HTML,
    SITEMAP_COMPLETENESS,
    RSS_FEED,
    CANONICAL_URL,
    CONTENT_VELOCITY,
)
