"""Content structure criteria: Q&A format, FAQs, linking, semantic markup and extractability."""

import re

from aeorank.extraction.signals import (
    ARIA_RE,
    BREADCRUMB_RE,
    DIRECT_ANSWER_RE,
    DIRECT_OPENER_RE,
    FAQ_MENTION_RE,
    LANG_RE,
    LD_JSON_MARKER_RE,
    QA_PAIR_RE,
    QUESTION_HEADING_TAG_RE,
    RELATED_CONTENT_RE,
    TABLE_BLOCK_RE,
    count_definition_patterns,
    count_tag,
    has_definition_pattern,
    has_tag,
    image_alt_counts,
    internal_link_hrefs,
    snippet_paragraph_count,
)
from aeorank.models import Finding, FindingSeverity, Priority
from aeorank.scoring.context import SiteView
from aeorank.scoring.rules import (
    HIGH,
    LOW,
    MEDIUM,
    CriterionSpec,
    Custom,
    PriorityBands,
    check,
    info,
    issue,
    requires_homepage,
    tiers,
)

FAQ_PAGE_MIN_CHARS = 500
ACCORDION_RE = re.compile(r"accordion|toggle|collaps|expand", re.IGNORECASE)
FAQ_SCHEMA_RE = re.compile(r"faqpage", re.IGNORECASE)
GLOSSARY_RE = re.compile(r"glossary|definitions|terminology", re.IGNORECASE)
EARLY_TEXT_CHARS = 2000
ALT_TEXT_RATIO = 0.8

SEMANTIC_ELEMENTS = (
    ("main", "Wrap primary page content in <main>"),
    ("article", "Use <article> for standalone content blocks"),
    ("time", "Use <time> elements for dates"),
    ("nav", "Use <nav> for navigation sections"),
    ("header", "Use <header> for page/section headers"),
    ("footer", "Use <footer> for page/section footers"),
)


# Q&A content format

QA_CONTENT_FORMAT = CriterionSpec(
    id="qa_content_format",
    label="Q&A Content Format",
    gates=(requires_homepage(Priority.P1),),
    rules=(
        tiers(
            lambda v: len(v.combined_question_headings),
            [
                (10, info("Found {v} question-format headings", 5)),
                (3, info("Found {v} question-format headings", 3)),
                (
                    1,
                    issue(
                        LOW,
                        "Only {v} question-format heading(s) found",
                        "Structure more content as Q&A with question headings (H2/H3) followed by direct answers",
                        delta=1,
                    ),
                ),
            ],
            otherwise=issue(
                HIGH,
                "No question-format headings found",
                'Add Q&A sections with headings like "What is...?", "How does...?" followed by concise answers',
            ),
        ),
        check(
            lambda v: DIRECT_ANSWER_RE.search(v.combined_html),
            info("Content uses direct-answer format after question headings", 3),
            issue(
                MEDIUM,
                "Content does not follow direct-answer format",
                "Start each answer paragraph with a concise 1-2 sentence definition before elaborating",
            ),
        ),
        tiers(
            lambda v: count_tag(v.homepage_html, "h1"),
            [
                (
                    2,
                    issue(
                        MEDIUM,
                        "Multiple H1 tags found ({v})",
                        "Use only one H1 per page; use H2/H3 for subsections",
                        delta=1,
                    ),
                ),
                (1, info("Proper single H1 tag hierarchy", 2)),
            ],
            otherwise=issue(HIGH, "No H1 tag found", "Add exactly one H1 tag as the main page heading"),
        ),
    ),
    priority=PriorityBands(7, Priority.P2, Priority.P1),
)


# FAQ section


def _faq_page_html(view: SiteView) -> str:
    faq = view.snapshot.faq_page
    return faq.text if faq else ""


def _has_faq_page(view: SiteView) -> bool:
    faq = view.snapshot.faq_page
    return faq is not None and faq.status == 200 and len(faq.text) > FAQ_PAGE_MIN_CHARS


def _faq_pages_html(view: SiteView) -> str:
    return view.homepage_html + _faq_page_html(view) + view.blog_html


def _has_faq_schema(html: str) -> bool:
    return bool(html) and bool(FAQ_SCHEMA_RE.search(html)) and bool(LD_JSON_MARKER_RE.search(html))


def _faq_schema_detail(view: SiteView) -> str | None:
    if not _has_faq_schema(_faq_pages_html(view)):
        return None
    if _has_faq_schema(view.blog_html):
        return "FAQPage schema markup found on blog posts"
    return "FAQPage schema markup found"


FAQ_SECTION = CriterionSpec(
    id="faq_section",
    label="Comprehensive FAQ Sections",
    rules=(
        check(
            lambda v: FAQ_MENTION_RE.search(v.homepage_html),
            info("FAQ content found on homepage", 2),
            issue(
                LOW,
                "No FAQ content found on homepage",
                "Add an FAQ section to your homepage addressing common visitor questions",
            ),
        ),
        check(
            _has_faq_page,
            info("Dedicated FAQ page exists", 3),
            issue(
                HIGH,
                "No dedicated FAQ page found at /faq",
                "Create a comprehensive FAQ page at /faq covering common questions about your service",
            ),
        ),
        check(
            lambda v: ACCORDION_RE.search(_faq_page_html(v)),
            info("FAQ uses accordion/toggle UI pattern", 1),
            when=_has_faq_page,
        ),
        check(
            _faq_schema_detail,
            info("{v}", 3),
            issue(MEDIUM, "No FAQPage schema markup", "Add FAQPage JSON-LD schema to pages with FAQ content"),
        ),
        tiers(
            lambda v: len(QUESTION_HEADING_TAG_RE.findall(_faq_pages_html(v))),
            [
                (10, info("{v} question headings found across checked pages", 1)),
                (5, issue(LOW, "Only {v} question headings found", "Expand FAQ to cover at least 10-15 common questions")),
            ],
        ),
    ),
    priority=PriorityBands(4, Priority.P2, Priority.P1),
)


# Internal linking

INTERNAL_LINKING = CriterionSpec(
    id="internal_linking",
    label="Internal Linking Architecture",
    gates=(requires_homepage(Priority.P2),),
    rules=(
        tiers(
            lambda v: len(internal_link_hrefs(v.homepage_html, v.domain)),
            [
                (20, info("{v} internal links found on homepage", 3)),
                (
                    10,
                    issue(
                        LOW,
                        "{v} internal links on homepage",
                        "Add more internal links to key service/content pages",
                        delta=2,
                    ),
                ),
            ],
            otherwise=issue(
                HIGH,
                "Only {v} internal links on homepage",
                "Add prominent internal links to service pages, FAQ, blog, and about pages",
            ),
        ),
        check(
            lambda v: BREADCRUMB_RE.search(v.homepage_html),
            info("Breadcrumb navigation detected", 2),
            issue(MEDIUM, "No breadcrumb navigation found", "Add breadcrumb navigation with BreadcrumbList schema markup"),
        ),
        check(
            lambda v: has_tag(v.homepage_html, "nav"),
            info("Semantic <nav> element used for navigation", 2),
            issue(
                LOW,
                "No semantic <nav> element found",
                "Wrap navigation menus in <nav> for better AI and accessibility parsing",
            ),
        ),
        check(
            lambda v: RELATED_CONTENT_RE.search(v.homepage_html),
            info("Related content or cross-linking sections found", 2),
            issue(
                LOW,
                "No related content or cross-linking found",
                'Add "Related Services" or "Learn More" sections to build topic clusters',
            ),
        ),
        check(
            lambda v: has_tag(v.homepage_html, "footer"),
            info("Footer element with likely navigation links", 1),
            issue(
                LOW,
                "No <footer> element found",
                "Add a <footer> with navigation links, contact info, and site structure",
            ),
        ),
    ),
    priority=PriorityBands(4, Priority.P2, Priority.P1),
)


# Semantic HTML


def _semantic_elements(view: SiteView) -> tuple[int, list[Finding]]:
    found = 0
    findings = []
    for tag, fix in SEMANTIC_ELEMENTS:
        if has_tag(view.combined_html, tag):
            found += 1
        else:
            findings.append(Finding(severity=FindingSeverity.LOW, detail=f"Missing <{tag}> element", fix=fix))
    if found >= 4:
        findings.append(
            Finding(severity=FindingSeverity.INFO, detail=f"{found}/{len(SEMANTIC_ELEMENTS)} key semantic HTML5 elements found")
        )
    return min(4, int(found * 0.7)), findings


def _alt_text_ratio(view: SiteView) -> float:
    images, with_alt = image_alt_counts(view.homepage_html)
    return with_alt / images


def _percent(ratio: float) -> int:
    return int(ratio * 100 + 0.5)


SEMANTIC_HTML = CriterionSpec(
    id="semantic_html",
    label="Semantic HTML5 & Accessibility",
    gates=(requires_homepage(Priority.P2),),
    rules=(
        Custom(_semantic_elements),
        tiers(
            _alt_text_ratio,
            [(ALT_TEXT_RATIO, info(lambda r: f"{_percent(r)}% of images have alt text", 2))],
            otherwise=issue(
                MEDIUM,
                lambda r: f"Only {_percent(r)}% of images have alt text",
                "Add descriptive alt text to all images",
            ),
            when=lambda v: image_alt_counts(v.homepage_html)[0] > 0,
        ),
        check(
            lambda v: LANG_RE.search(v.homepage_html),
            info("HTML lang attribute set", 2),
            issue(
                MEDIUM,
                "Missing lang attribute on <html> tag",
                'Add lang="en" (or appropriate language) to the <html> tag',
            ),
        ),
        check(
            lambda v: ARIA_RE.search(v.homepage_html),
            info("ARIA attributes found for accessibility", 2),
            issue(
                LOW,
                "No ARIA roles or attributes found",
                "Add ARIA roles and labels to improve accessibility and semantic parsing",
            ),
        ),
    ),
    priority=PriorityBands(4, Priority.P3, Priority.P2),
)


# Tables and lists


def _header_tables(view: SiteView) -> int:
    return sum(1 for table in TABLE_BLOCK_RE.findall(view.combined_html) if has_tag(table, "th"))


TABLE_LIST_EXTRACTABILITY = CriterionSpec(
    id="table_list_extractability",
    label="Table & List Extractability",
    gates=(requires_homepage(Priority.P2),),
    rules=(
        tiers(
            _header_tables,
            [(1, info("{v} table(s) with <th> headers found", 3))],
        ),
        check(
            lambda v: count_tag(v.combined_html, "table"),
            issue(
                MEDIUM,
                "{v} table(s) found but without <th> header cells",
                "Add <th> header cells to tables for better AI extraction",
                delta=1,
            ),
            issue(
                LOW,
                "No HTML tables found",
                "Use comparison tables with <th> headers for structured data AI engines can extract",
            ),
            when=lambda v: _header_tables(v) == 0,
        ),
        tiers(
            _header_tables,
            [
                (2, info("Multiple well-structured tables present", 1)),
                (
                    1,
                    issue(
                        LOW,
                        "Only 1 table with headers found",
                        "Add more comparison or data tables with <th> headers to increase extractable structured content",
                    ),
                ),
            ],
        ),
        tiers(
            lambda v: count_tag(v.combined_html, "ol"),
            [(1, info("{v} ordered list(s) found - good for step-by-step content", 2))],
            otherwise=issue(
                LOW,
                "No ordered lists (<ol>) found",
                "Use <ol> for sequential content (steps, rankings, processes)",
            ),
        ),
        tiers(
            lambda v: count_tag(v.combined_html, "ul"),
            [(1, info("{v} unordered list(s) found", 2))],
            otherwise=issue(
                LOW,
                "No unordered lists (<ul>) found",
                "Use <ul> for feature lists, benefits, and bullet-point content",
            ),
        ),
        tiers(
            lambda v: count_tag(v.combined_html, "li"),
            [(10, info("{v} list items - substantial extractable content", 1))],
        ),
        tiers(
            lambda v: count_tag(v.combined_html, "dl"),
            [(1, info("{v} definition list(s) found", 1))],
            otherwise=issue(
                LOW,
                "No definition lists (<dl>) found",
                "Use <dl>/<dt>/<dd> for term-definition pairs to improve AI extractability",
            ),
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P2),
)


# Definition patterns


def _definition_elements(view: SiteView) -> list[str]:
    return [f"<{tag}>" for tag in ("dfn", "abbr") if has_tag(view.combined_html, tag)]


DEFINITION_PATTERNS = CriterionSpec(
    id="definition_patterns",
    label="Definition Patterns",
    gates=(requires_homepage(Priority.P2),),
    rules=(
        tiers(
            lambda v: count_definition_patterns(v.combined_text),
            [
                (3, info('{v} definition-style patterns found (e.g., "X is a...", "refers to", "defined as")', 5)),
                (
                    1,
                    issue(
                        LOW,
                        "Only {v} definition pattern(s) found",
                        'Start key descriptions with clear definition patterns like "X is a..." or "X refers to..."',
                        delta=3,
                    ),
                ),
            ],
            otherwise=issue(
                MEDIUM,
                "No definition patterns found",
                'Add clear definitions using patterns like "[Term] is [definition]" that AI engines can extract as snippets',
            ),
        ),
        check(
            lambda v: has_definition_pattern(v.combined_text[:EARLY_TEXT_CHARS]),
            info("Definition patterns appear early in page content - good for snippet extraction", 2),
            issue(
                LOW,
                "No definition patterns in the first 2000 characters of content",
                "Place key definitions early on the page where AI engines prioritize extraction",
            ),
        ),
        check(
            _definition_elements,
            info(lambda found: f"Semantic definition elements found: {', '.join(found)}", 1),
            issue(
                LOW,
                "No <dfn> or <abbr> elements found",
                "Use <dfn> for term definitions and <abbr> for abbreviations to help AI parse terminology",
            ),
        ),
        check(
            lambda v: has_tag(v.combined_html, "dl") or GLOSSARY_RE.search(v.combined_html),
            info("Glossary or definition list structure detected", 2),
            issue(
                LOW,
                "No glossary or definition list found",
                "Add a glossary section using <dl>/<dt>/<dd> for key industry terms",
            ),
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P2),
)


# Direct answers

DIRECT_ANSWER_DENSITY = CriterionSpec(
    id="direct_answer_density",
    label="Direct Answer Paragraphs",
    gates=(requires_homepage(Priority.P1),),
    rules=(
        tiers(
            lambda v: len(QA_PAIR_RE.findall(v.combined_html)),
            [
                (3, info("{v} question-answer pairs found (question heading + direct answer paragraph)", 6)),
                (
                    1,
                    issue(
                        LOW,
                        "{v} question-answer pair(s) found",
                        "Add more question headings (H2/H3) immediately followed by concise answer paragraphs",
                        delta=3,
                    ),
                ),
            ],
            otherwise=issue(
                HIGH,
                "No direct question-answer pairs found",
                'Structure content with question headings (e.g., "What is X?") immediately followed by a concise answer paragraph',
            ),
        ),
        tiers(
            lambda v: snippet_paragraph_count(v.combined_html),
            [
                (3, info("{v} paragraphs in snippet zone (40-150 words) - ideal for AI extraction", 2)),
                (
                    1,
                    issue(
                        LOW,
                        "Only {v} paragraph(s) in optimal snippet length",
                        "Write more paragraphs in the 40-150 word range for AI snippet extraction",
                        delta=1,
                    ),
                ),
            ],
            otherwise=issue(
                MEDIUM,
                "No paragraphs in the optimal snippet zone (40-150 words)",
                "Write self-contained paragraphs of 40-150 words that directly answer common questions",
            ),
        ),
        tiers(
            lambda v: len(DIRECT_OPENER_RE.findall(v.homepage_text)),
            [(2, info('Direct answer openers found (e.g., "Yes,", "In short,")', 2))],
            otherwise=issue(
                LOW,
                "Few or no direct answer openers found",
                'Start answers with direct phrases like "Yes,", "No,", "In short," to signal definitive answers to AI engines',
            ),
        ),
    ),
    priority=PriorityBands(7, Priority.P2, Priority.P1),
)

STRUCTURE_CRITERIA = (
    QA_CONTENT_FORMAT,
    FAQ_SECTION,
    INTERNAL_LINKING,
    SEMANTIC_HTML,
    TABLE_LIST_EXTRACTABILITY,
    DEFINITION_PATTERNS,
    DIRECT_ANSWER_DENSITY,
)
