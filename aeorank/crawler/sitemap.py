"""Sitemap parsing and URL selection for content sampling."""

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from xml.etree import ElementTree as ET

import structlog

from aeorank.crawler.url import path_depth, site_path

logger = structlog.get_logger(__name__)

# Paths that look like editorial content
BLOG_PATH_PATTERN = re.compile(
    r"/(?:blog|articles?|insights?|guides?|resources?|news|posts?|learn|help|how-?to"
    r"|tutorials?|case-stud|whitepapers?)\b",
    re.IGNORECASE,
)

# Taxonomy, pagination and utility paths never sampled as blog posts
BLOG_EXCLUDE_PATTERN = re.compile(
    r"/(?:tag|category|author|page|feed|wp-content|wp-admin|wp-json|cart|checkout|login"
    r"|search|api|static|assets|_next)\b",
    re.IGNORECASE,
)

# Paths already covered by blog sampling or well-known page discovery
CONTENT_SKIP_PATTERN = re.compile(
    r"/(?:blog|articles?|posts?|news|tag|category|author|feed|faq|about|pricing|contact|team"
    r"|resources?|docs?|documentation|help|support|case-studies|customers|testimonials"
    r"|sitemap|wp-|api|login|cart|checkout|search)\b",
    re.IGNORECASE,
)

PREFERRED_CHILD_SITEMAP = re.compile(r"post|blog|article", re.IGNORECASE)

# Content velocity defaults
RECENT_WINDOW_DAYS = 90
UNIFORM_MIN_SAMPLE = 5
UNIFORM_MAX_DAY_SHARE = 0.8

_URL_BLOCK_RE = re.compile(r"<url>([\s\S]*?)</url>", re.IGNORECASE)
_SITEMAP_BLOCK_RE = re.compile(r"<sitemap>([\s\S]*?)</sitemap>", re.IGNORECASE)
_LOC_RE = re.compile(r"<loc>([^<]+)</loc>", re.IGNORECASE)
_LASTMOD_RE = re.compile(r"<lastmod>([^<]+)</lastmod>", re.IGNORECASE)


@dataclass
class SitemapEntry:
    """A ``<url>`` or child ``<sitemap>`` entry."""

    loc: str
    lastmod: str | None = None


@dataclass
class SitemapDocument:
    """Parsed sitemap or sitemap index."""

    urls: list[SitemapEntry] = field(default_factory=list)
    children: list[SitemapEntry] = field(default_factory=list)
    is_index: bool = False

    @property
    def lastmods(self) -> list[str]:
        return [e.lastmod for e in self.urls + self.children if e.lastmod]


@dataclass
class SitemapDateAnalysis:
    """Recency of sitemap ``<lastmod>`` dates."""

    recent_count: int
    is_uniform: bool
    total_with_dates: int
    distinct_recent_days: int
    uniform_detail: str | None = None
    window_days: int = RECENT_WINDOW_DAYS

    @property
    def effective_recent_count(self) -> int:
        """Recent entries, counting days instead of URLs when dates are build stamps."""
        return self.distinct_recent_days if self.is_uniform else self.recent_count

    def to_dict(self) -> dict:
        return {
            "recent_count": self.recent_count,
            "is_uniform": self.is_uniform,
            "uniform_detail": self.uniform_detail,
            "total_with_dates": self.total_with_dates,
            "distinct_recent_days": self.distinct_recent_days,
            "effective_recent_count": self.effective_recent_count,
        }


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1].lower()


def _child_text(elem: ET.Element, name: str) -> str | None:
    for child in elem:
        if _local_name(child.tag) == name and child.text and child.text.strip():
            return child.text.strip()
    return None


def _parse_with_regex(text: str) -> SitemapDocument:
    """Tolerant fallback for sitemaps that are not well-formed XML."""

    def _entries(pattern: re.Pattern[str]) -> list[SitemapEntry]:
        entries = []
        for block in pattern.findall(text):
            loc = _LOC_RE.search(block)
            if not loc:
                continue
            lastmod = _LASTMOD_RE.search(block)
            entries.append(
                SitemapEntry(loc=loc.group(1).strip(), lastmod=lastmod.group(1).strip() if lastmod else None)
            )
        return entries

    return SitemapDocument(
        urls=_entries(_URL_BLOCK_RE),
        children=_entries(_SITEMAP_BLOCK_RE),
        is_index="<sitemapindex" in text,
    )


def parse_sitemap(text: str) -> SitemapDocument:
    """Parse a sitemap or sitemap index, with or without the sitemaps.org namespace."""
    try:
        root = ET.fromstring(text.strip().lstrip("\ufeff"))
    except (ET.ParseError, ValueError) as e:
        logger.debug("sitemap_xml_invalid", error=str(e))
        return _parse_with_regex(text)

    document = SitemapDocument(is_index=_local_name(root.tag) == "sitemapindex")
    for elem in root.iter():
        name = _local_name(elem.tag)
        if name not in ("url", "sitemap"):
            continue
        loc = _child_text(elem, "loc")
        if not loc:
            continue
        entry = SitemapEntry(loc=loc, lastmod=_child_text(elem, "lastmod"))
        if name == "url":
            document.urls.append(entry)
        else:
            document.children.append(entry)
    return document


def count_locations(text: str) -> int:
    """Number of ``<loc>`` entries in the raw sitemap body."""
    return len(_LOC_RE.findall(text))


def select_child_sitemap(text: str) -> str | None:
    """Pick the child sitemap most likely to list posts from a sitemap index.

    Returns None when the body is not a sitemap index.
    """
    if "<sitemapindex" not in text:
        return None
    children = [c.loc for c in parse_sitemap(text).children]
    if not children:
        return None
    for loc in children:
        if PREFERRED_CHILD_SITEMAP.search(loc):
            return loc
    return children[0]


def extract_blog_urls(text: str, domain: str, limit: int = 10) -> list[str]:
    """
    Extract blog-like URLs from a sitemap, newest first.

    Keeps same-domain, non-root URLs whose path looks editorial or has at
    least two segments, minus taxonomy and utility paths. Entries with a
    ``lastmod`` sort before undated ones.

    Args:
        text: Sitemap XML body
        domain: Audited domain
        limit: Maximum number of URLs returned

    Returns:
        Up to ``limit`` absolute URLs
    """
    dated: list[SitemapEntry] = []
    undated: list[SitemapEntry] = []

    for entry in parse_sitemap(text).urls:
        path = site_path(entry.loc, domain)
        if path is None:
            continue
        path = path.lower()
        if BLOG_EXCLUDE_PATTERN.search(path):
            continue
        if not BLOG_PATH_PATTERN.search(path) and path_depth(path) < 2:
            continue
        (dated if entry.lastmod else undated).append(entry)

    dated.sort(key=lambda e: e.lastmod or "", reverse=True)
    return [e.loc for e in (dated + undated)[:limit]]


def extract_content_pages_from_sitemap(text: str, domain: str, limit: int = 6) -> list[str]:
    """
    Extract non-blog content pages (services, products) from a sitemap.

    Keeps same-domain URLs one to three segments deep that are not covered
    elsewhere, then picks ``limit`` evenly spaced entries for variety.
    """
    candidates = []
    for entry in parse_sitemap(text).urls:
        path = site_path(entry.loc, domain)
        if path is None:
            continue
        path = path.lower()
        if CONTENT_SKIP_PATTERN.search(path):
            continue
        if not 1 <= path_depth(path) <= 3:
            continue
        candidates.append(entry.loc)

    if len(candidates) <= limit:
        return candidates
    if limit <= 1:
        return candidates[:limit]

    span = len(candidates) - 1
    # Math.round semantics: halves go up
    return [candidates[int(i * span / (limit - 1) + 0.5)] for i in range(limit)]


# Reduced-precision W3C forms that fromisoformat rejects
REDUCED_LASTMOD_FORMATS = ("%Y-%m", "%Y")


def parse_lastmod(value: str) -> datetime | None:
    """Parse a W3C datetime; naive values are taken as UTC."""
    value = value.strip()
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        for fmt in REDUCED_LASTMOD_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue
        else:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def analyze_lastmod_dates(
    text: str,
    now: datetime | None = None,
    window_days: int = RECENT_WINDOW_DAYS,
    min_sample: int = UNIFORM_MIN_SAMPLE,
    max_day_share: float = UNIFORM_MAX_DAY_SHARE,
) -> SitemapDateAnalysis:
    """
    Count recent ``<lastmod>`` dates and detect build-stamped sitemaps.

    Dates are bucketed per UTC day. When at least ``min_sample`` entries are
    dated and one day holds more than ``max_day_share`` of them, the sitemap
    is considered uniform: its dates reflect deploys, not edits.
    """
    now = now or datetime.now(UTC)
    cutoff = now - timedelta(days=window_days)

    day_counts: Counter[str] = Counter()
    recent_days: set[str] = set()
    recent_count = 0

    for raw in _LASTMOD_RE.findall(text):
        parsed = parse_lastmod(raw)
        if parsed is None:
            continue
        day = parsed.astimezone(UTC).date().isoformat()
        day_counts[day] += 1
        if parsed >= cutoff:
            recent_count += 1
            recent_days.add(day)

    total = sum(day_counts.values())
    if total == 0:
        return SitemapDateAnalysis(
            recent_count=0,
            is_uniform=False,
            total_with_dates=0,
            distinct_recent_days=0,
            window_days=window_days,
        )

    top_day, top_count = day_counts.most_common(1)[0]
    is_uniform = total >= min_sample and top_count / total > max_day_share
    uniform_detail = None
    if is_uniform:
        uniform_detail = (
            f"{top_count} of {total} URLs share lastmod date {top_day}"
            " - likely auto-generated by build system"
        )

    return SitemapDateAnalysis(
        recent_count=recent_count,
        is_uniform=is_uniform,
        total_with_dates=total,
        distinct_recent_days=len(recent_days),
        uniform_detail=uniform_detail,
        window_days=window_days,
    )
