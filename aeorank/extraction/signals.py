"""Signal extractors over raw HTML and text.

Patterns run on raw markup on purpose: the audit measures what a crawler
that does not execute JavaScript would see in the served source.
"""

import re
from functools import lru_cache

from aeorank.extraction.html import heading_texts

# robots.txt
AI_CRAWLERS = ["gptbot", "claudebot", "perplexitybot", "anthropic", "chatgpt"]
_ROBOTS_ALLOW_ROOT_RE = re.compile(r"^allow:\s*/\s*$", re.IGNORECASE | re.MULTILINE)
_ROBOTS_DISALLOW_ROOT_RE = re.compile(r"^disallow:\s*/\s*$", re.IGNORECASE | re.MULTILINE)

# Entity
PHONE_RE = re.compile(r"(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
PHONE_CONTEXT_RE = re.compile(r"\b(phone|call|tel:|contact\s*us|fax|dial)\b", re.IGNORECASE)
PHONE_CONTEXT_WINDOW = 100
TEL_LINK_RE = re.compile(r'href="tel:', re.IGNORECASE)
SCHEMA_TELEPHONE_RE = re.compile(r'"telephone"', re.IGNORECASE)
ADDRESS_RE = re.compile(
    r"\d+\s+\w+\s+(street|st|avenue|ave|road|rd|drive|dr|blvd|boulevard|lane|ln|way|court|ct)",
    re.IGNORECASE,
)
ORG_SCHEMA_RE = re.compile(r"organization|localbusiness", re.IGNORECASE)
SOCIAL_RE = re.compile(r"sameas|linkedin\.com|facebook\.com|twitter\.com|x\.com", re.IGNORECASE)

# Schema.org
SCHEMA_TYPES = [
    "organization",
    "localbusiness",
    "faqpage",
    "service",
    "article",
    "webpage",
    "website",
    "breadcrumblist",
    "howto",
    "product",
]
EXTENDED_SCHEMA_TYPES = [*SCHEMA_TYPES, "person", "event", "offer", "review", "aboutpage"]
ORGANIZATION_PROPERTIES = [
    "name",
    "url",
    "logo",
    "contactpoint",
    "sameas",
    "address",
    "telephone",
    "description",
    "founder",
    "foundingdate",
]
ARTICLE_PROPERTIES = [
    "headline",
    "datepublished",
    "datemodified",
    "author",
    "image",
    "description",
    "publisher",
]
SCHEMA_PROPERTY_RE = re.compile(r'"[a-zA-Z@]+"\s*:')
PERSON_SCHEMA_RE = re.compile(r'"@type"\s*:\s*"Person"', re.IGNORECASE)
LD_JSON_MARKER_RE = re.compile(r"application/ld\+json", re.IGNORECASE)
SPEAKABLE_RE = re.compile(r'speakablespecification|"speakable"\s*:', re.IGNORECASE)

# Questions and answers
QUESTION_START_RE = re.compile(
    r"^(what|how|why|when|who|where|can|do|does|is|are|should)\s", re.IGNORECASE
)
DIRECT_ANSWER_RE = re.compile(
    r"<h[2-3][^>]*>[^<]*\?</h[2-3]>\s*<p[^>]*>[\s\S]{20,500}</p>", re.IGNORECASE
)
QA_PAIR_RE = re.compile(r"<h[2-4][^>]*>[^<]*\?</h[2-4]>\s*<p[^>]*>", re.IGNORECASE)
QUESTION_HEADING_TAG_RE = re.compile(r"<h[2-4][^>]*>[^<]*\?</h[2-4]>", re.IGNORECASE)
FAQ_MENTION_RE = re.compile(r"faq|frequently\s+asked", re.IGNORECASE)

# Original data
STATISTIC_RE = re.compile(
    r"\d+%|\d+\s*(patients|clients|customers|cases|years|professionals|specialists|companies"
    r"|users|businesses|domains|audits)",
    re.IGNORECASE,
)
RESEARCH_CONTEXT_RE = re.compile(
    r"\b(our\s+(?:study|analysis|research|data|survey|findings|report)"
    r"|we\s+(?:surveyed|analyzed|studied|measured|tracked)|proprietary|methodology"
    r"|original\s+research)\b",
    re.IGNORECASE,
)
CASE_STUDY_RE = re.compile(r"case\s+stud|testimonial|success\s+stor|client\s+stor", re.IGNORECASE)
CASE_STUDY_METRIC_RE = re.compile(r"\d+%|\$[\d,]+|\d+x\b", re.IGNORECASE)
CASE_STUDY_WINDOW = 200
EXPERT_RE = re.compile(
    r"written\s+by|authored\s+by|expert|specialist|board.certified|licensed", re.IGNORECASE
)
CONTENT_LINK_RE = re.compile(
    r'href="[^"]*/(?:blog|articles|insights|guides|resources)\b[^"]*"', re.IGNORECASE
)

# Definitions
DEFINITION_PATTERNS = [
    re.compile(r"\b\w[\w\s]{2,30}\bis\s+(?:a|an|the)\s", re.IGNORECASE),
    re.compile(r"\b\w[\w\s]{2,30}\bare\s+(?:a|an|the)\s", re.IGNORECASE),
    re.compile(r"\brefers?\s+to\b", re.IGNORECASE),
    re.compile(r"\bdefined\s+as\b", re.IGNORECASE),
    re.compile(r"\bknown\s+as\b", re.IGNORECASE),
    re.compile(r"\bmeans?\s+that\b", re.IGNORECASE),
]
EXPLICIT_DEFINITION_RE = re.compile(r"\brefers?\s+to\b|\bdefined\s+as\b|\bknown\s+as\b", re.IGNORECASE)

# Facts
DATA_POINT_RE = re.compile(r"\d+(?:\.\d+)?(?:\s*%|\s*\$|\s*USD|\s*EUR)")
COUNT_PHRASE_RE = re.compile(
    r"\d+(?:,\d{3})*\+?\s+(?:users?|clients?|customers?|companies|businesses|patients?"
    r"|members?|employees?|projects?|downloads?)",
    re.IGNORECASE,
)
YEAR_RE = re.compile(r"(?:19|20)\d{2}")
ATTRIBUTION_RE = re.compile(
    r"according\s+to|source:|study\s+(?:by|from)|research\s+(?:by|from|shows)|data\s+from"
    r"|report\s+(?:by|from)|published\s+(?:by|in)",
    re.IGNORECASE,
)
UNIT_RE = re.compile(
    r"\d+\s*(?:hours?|minutes?|days?|weeks?|months?|years?|miles?|km|lbs?|kg|mg|sq\s*ft"
    r"|acres?|gallons?|liters?)",
    re.IGNORECASE,
)
DIRECT_OPENER_RE = re.compile(
    r"\b(yes|no|the answer is|in short|simply put|to summarize)\b", re.IGNORECASE
)

# Markup
ANCHOR_HREF_RE = re.compile(r'<a[^>]*href="([^"]*)"[^>]*>', re.IGNORECASE)
IMG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)
IMG_ALT_RE = re.compile(r'alt="[^"]+"', re.IGNORECASE)
TABLE_BLOCK_RE = re.compile(r"<table[\s\S]*?</table>", re.IGNORECASE)
PARAGRAPH_RE = re.compile(r"<p[^>]*>([\s\S]*?)</p>", re.IGNORECASE)
META_DESCRIPTION_RE = re.compile(r'<meta[^>]*name="description"[^>]*>', re.IGNORECASE)
TITLE_RE = re.compile(r"<title[^>]*>[^<]+</title>", re.IGNORECASE)
FEED_LINK_RE = re.compile(r'<link[^>]*type="application/(?:rss|atom)\+xml"', re.IGNORECASE)
FEED_ITEM_RE = re.compile(r"<item[\s>]|<entry[\s>]", re.IGNORECASE)
CANONICAL_RE_PAIR = (
    re.compile(r'<link[^>]*rel="canonical"[^>]*href="([^"]*)"[^>]*>', re.IGNORECASE),
    re.compile(r'<link[^>]*href="([^"]*)"[^>]*rel="canonical"[^>]*>', re.IGNORECASE),
)
CANONICAL_TAG_RE = re.compile(r"<link[^>]*(?:rel=\"canonical\"|rel='canonical')[^>]*>", re.IGNORECASE)
LANG_RE = re.compile(r'lang="[a-z]{2}"', re.IGNORECASE)
ARIA_RE = re.compile(r'role="|aria-', re.IGNORECASE)
BREADCRUMB_RE = re.compile(r'breadcrumb|aria-label="breadcrumb"', re.IGNORECASE)
RELATED_CONTENT_RE = re.compile(r"related|see\s+also|learn\s+more|explore|you\s+may\s+also", re.IGNORECASE)


@lru_cache(maxsize=64)
def _tag_re(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{tag}[\s>]", re.IGNORECASE)


def count_tag(html: str, tag: str) -> int:
    """Number of opening ``<tag`` elements in raw markup."""
    return len(_tag_re(tag).findall(html))


def has_tag(html: str, tag: str) -> bool:
    return _tag_re(tag).search(html) is not None


def mentioned_ai_crawlers(robots_text: str) -> list[str]:
    lower = robots_text.lower()
    return [crawler for crawler in AI_CRAWLERS if crawler in lower]


def _robots_section(robots_text: str, crawler: str) -> str | None:
    # Section runs from the crawler's user-agent line to the next user-agent or EOF
    pattern = re.compile(
        rf"user-agent:\s*{re.escape(crawler)}[^\S\n]*\n([\s\S]*?)(?=user-agent:|\Z)",
        re.IGNORECASE,
    )
    match = pattern.search(robots_text)
    return match.group(1) if match else None


def is_crawler_blocked(robots_text: str, crawler: str) -> bool:
    """A crawler is blocked when its own section disallows the root and never allows it."""
    section = _robots_section(robots_text, crawler)
    if section is None:
        return False
    if _ROBOTS_ALLOW_ROOT_RE.search(section):
        return False
    return _ROBOTS_DISALLOW_ROOT_RE.search(section) is not None


def blocked_ai_crawlers(robots_text: str) -> list[str]:
    return [c for c in mentioned_ai_crawlers(robots_text) if is_crawler_blocked(robots_text, c)]


def has_global_phone_context(html: str) -> bool:
    """A ``tel:`` link or schema ``"telephone"`` anywhere vouches for every number."""
    return TEL_LINK_RE.search(html) is not None or SCHEMA_TELEPHONE_RE.search(html) is not None


def validated_phone_numbers(html: str, text: str) -> list[str]:
    """
    Phone-shaped matches in ``text`` that carry supporting context.

    Without a global signal, a match needs a context keyword within
    100 characters on either side, so postal codes, SKUs and order numbers
    are not mistaken for phone numbers.

    Returns:
        Unique digit strings in order of first appearance
    """
    global_context = has_global_phone_context(html)
    numbers: list[str] = []
    for match in PHONE_RE.finditer(text):
        if not global_context:
            start = max(0, match.start() - PHONE_CONTEXT_WINDOW)
            end = min(len(text), match.end() + PHONE_CONTEXT_WINDOW)
            if not PHONE_CONTEXT_RE.search(text[start:end]):
                continue
        digits = re.sub(r"\D", "", match.group(0))
        if digits not in numbers:
            numbers.append(digits)
    return numbers


def schema_types_in(blocks: list[str], types: list[str] = SCHEMA_TYPES) -> list[str]:
    """Known schema types quoted anywhere in the JSON-LD blocks."""
    joined = " ".join(blocks).lower()
    return [t for t in types if f'"{t}"' in joined]


def schema_properties_in(blocks: list[str], properties: list[str]) -> list[str]:
    joined = " ".join(blocks).lower()
    return [p for p in properties if f'"{p}"' in joined]


def unique_schema_properties(blocks: list[str]) -> set[str]:
    keys = SCHEMA_PROPERTY_RE.findall(" ".join(blocks))
    return {re.sub(r'[":\s]', "", key).lower() for key in keys}


def is_question_heading(text: str) -> bool:
    return "?" in text or QUESTION_START_RE.match(text) is not None


def question_headings(html: str) -> list[str]:
    return [h for h in heading_texts(html) if is_question_heading(h)]


def has_case_study_with_metric(text: str) -> bool:
    """A case study mention with a percentage, dollar figure or multiplier nearby."""
    for match in CASE_STUDY_RE.finditer(text):
        start = max(0, match.start() - CASE_STUDY_WINDOW)
        end = min(len(text), match.end() + CASE_STUDY_WINDOW)
        if CASE_STUDY_METRIC_RE.search(text[start:end]):
            return True
    return False


def count_definition_patterns(text: str) -> int:
    return sum(len(pattern.findall(text)) for pattern in DEFINITION_PATTERNS)


def has_definition_pattern(text: str) -> bool:
    return any(pattern.search(text) for pattern in DEFINITION_PATTERNS)


def internal_link_hrefs(html: str, domain: str) -> list[str]:
    return [h for h in ANCHOR_HREF_RE.findall(html) if h.startswith("/") or domain in h]


def external_link_hrefs(html: str, domain: str) -> list[str]:
    return [h for h in ANCHOR_HREF_RE.findall(html) if h.startswith("http") and domain not in h]


def image_alt_counts(html: str) -> tuple[int, int]:
    """(images, images with non-empty alt text)."""
    images = IMG_RE.findall(html)
    return len(images), sum(1 for img in images if IMG_ALT_RE.search(img))


def snippet_paragraph_count(html: str, min_words: int = 40, max_words: int = 150) -> int:
    """Paragraphs whose tag-stripped text is within the snippet word range."""
    count = 0
    for body in PARAGRAPH_RE.findall(html):
        words = re.sub(r"<[^>]*>", "", body).strip().split()
        if min_words <= len(words) <= max_words:
            count += 1
    return count


def data_point_count(text: str) -> int:
    return len(DATA_POINT_RE.findall(text)) + len(COUNT_PHRASE_RE.findall(text))


def canonical_match(html: str) -> re.Match[str] | None:
    """First canonical ``<link>``, with rel and href in either order."""
    for pattern in CANONICAL_RE_PAIR:
        match = pattern.search(html)
        if match:
            return match
    return None
