"""Per-page review: deterministic issue and strength checks for each fetched page."""

import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup

from aeorank.crawler.url import extract_domain
from aeorank.extraction.html import collapse_whitespace, json_ld_blocks, parse_html, visible_text
from aeorank.models import DomainSnapshot, PageCategory

THIN_CONTENT_WORDS = 300
SCHEMA_TYPE_RE = re.compile(r'"@type"\s*:\s*"([^"]+)"')
QUESTION_WORD_RE = re.compile(
    r"^(what|how|why|when|where|who|which|can|do|does|is|are|should|will)\b", re.IGNORECASE
)
OPEN_GRAPH_RE = re.compile(r"^og:", re.IGNORECASE)
DESCRIPTION_RE = re.compile(r"^description$", re.IGNORECASE)


@dataclass
class PageIssue:
    """A single page-level observation."""

    check: str
    label: str
    severity: str  # error, warning or info

    def to_dict(self) -> dict:
        return {"check": self.check, "label": self.label, "severity": self.severity}


@dataclass
class PageReview:
    """Issues and strengths found on one page."""

    url: str
    title: str
    category: PageCategory
    word_count: int
    issues: list[PageIssue] = field(default_factory=list)
    strengths: list[PageIssue] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "url": self.url,
            "title": self.title,
            "category": self.category.value,
            "word_count": self.word_count,
            "issues": [issue.to_dict() for issue in self.issues],
            "strengths": [strength.to_dict() for strength in self.strengths],
        }


def _title_text(soup: BeautifulSoup) -> str | None:
    title = soup.find("title")
    if title is None:
        return None
    return collapse_whitespace(title.get_text())


def _check_title(soup: BeautifulSoup) -> PageIssue | None:
    title = _title_text(soup)
    if title is None:
        return PageIssue("missing-title", "Missing <title> tag", "error")
    if not title:
        return PageIssue("missing-title", "Empty <title> tag", "error")
    return None


def _check_meta_description(soup: BeautifulSoup) -> PageIssue | None:
    tag = soup.find("meta", attrs={"name": DESCRIPTION_RE})
    if tag is None or not (tag.get("content") or "").strip():
        return PageIssue("missing-meta-description", "Missing meta description", "error")
    return None


def _check_h1(soup: BeautifulSoup) -> list[PageIssue]:
    count = len(soup.find_all("h1"))
    if count == 0:
        return [PageIssue("no-h1", "No <h1> tag", "error")]
    if count > 1:
        return [PageIssue("multiple-h1", f"Multiple <h1> tags ({count})", "warning")]
    return []


def _check_images_alt(soup: BeautifulSoup) -> PageIssue | None:
    # alt="" marks a decorative image and counts as present
    missing = sum(1 for img in soup.find_all("img") if img.get("alt") is None)
    if missing == 0:
        return None
    plural = "s" if missing > 1 else ""
    return PageIssue("images-missing-alt", f"{missing} image{plural} missing alt text", "warning")


def _count_internal_links(soup: BeautifulSoup, domain: str) -> int:
    count = 0
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if "#" in href:
            continue
        if href.startswith("/") and not href.startswith("//"):
            count += 1
        elif href.startswith("http") and extract_domain(href) == domain:
            count += 1
    return count


def _schema_types(html: str) -> list[str]:
    types = [t for block in json_ld_blocks(html) for t in SCHEMA_TYPE_RE.findall(block)]
    return list(dict.fromkeys(types))


def _question_heading_count(soup: BeautifulSoup) -> int:
    count = 0
    for heading in soup.find_all(["h2", "h3", "h4"]):
        text = heading.get_text().strip()
        if text.endswith("?") or QUESTION_WORD_RE.match(text):
            count += 1
    return count


def analyze_page(html: str, url: str, category: PageCategory) -> PageReview:
    """
    Review one page.

    Args:
        html: Page HTML
        url: Page URL, used to tell internal links from external ones
        category: What the page represents

    Returns:
        PageReview with issues and strengths in a fixed check order
    """
    soup = parse_html(html)
    word_count = len(visible_text(html).split())
    review = PageReview(url=url, title=_title_text(soup) or "", category=category, word_count=word_count)

    issues: list[PageIssue | None] = [
        _check_title(soup),
        _check_meta_description(soup),
        *_check_h1(soup),
    ]
    if not json_ld_blocks(html):
        issues.append(PageIssue("no-schema", "No JSON-LD structured data", "warning"))
    if soup.find("link", rel="canonical") is None:
        issues.append(PageIssue("missing-canonical", "Missing canonical link", "warning"))
    if soup.find("meta", attrs={"property": OPEN_GRAPH_RE}) is None:
        issues.append(PageIssue("missing-og-tags", "No Open Graph tags", "warning"))
    if word_count < THIN_CONTENT_WORDS:
        issues.append(PageIssue("thin-content", f"Thin content ({word_count} words)", "warning"))
    issues.append(_check_images_alt(soup))
    if url.startswith(("http://", "https://")) and _count_internal_links(soup, extract_domain(url)) == 0:
        issues.append(PageIssue("no-internal-links", "No internal links found", "warning"))
    review.issues = [issue for issue in issues if issue is not None]

    types = _schema_types(html)
    if types:
        review.strengths.append(PageIssue("has-structured-data", f"JSON-LD: {', '.join(types)}", "info"))
    questions = _question_heading_count(soup)
    if questions:
        plural = "s" if questions > 1 else ""
        review.strengths.append(
            PageIssue("has-question-headings", f"{questions} question-format heading{plural}", "info")
        )

    return review


def analyze_all_pages(snapshot: DomainSnapshot) -> list[PageReview]:
    """Review the homepage followed by every sampled page."""
    reviews = []
    if snapshot.homepage is not None:
        reviews.append(
            analyze_page(
                snapshot.homepage.text,
                snapshot.base_url or "unknown",
                snapshot.homepage.category or PageCategory.HOMEPAGE,
            )
        )
    for page in snapshot.pages:
        reviews.append(analyze_page(page.text, page.final_url or "unknown", page.category or PageCategory.CONTENT))
    return reviews
