"""Authority criteria: entity signals, original data, freshness, facts and licensing."""

import re

from aeorank.extraction.signals import (
    ADDRESS_RE,
    ATTRIBUTION_RE,
    CASE_STUDY_RE,
    CONTENT_LINK_RE,
    EXPERT_RE,
    LD_JSON_MARKER_RE,
    ORG_SCHEMA_RE,
    RESEARCH_CONTEXT_RE,
    SOCIAL_RE,
    STATISTIC_RE,
    UNIT_RE,
    YEAR_RE,
    count_tag,
    data_point_count,
    has_case_study_with_metric,
    validated_phone_numbers,
)
from aeorank.models import Priority
from aeorank.scoring.context import SiteView
from aeorank.scoring.rules import (
    HIGH,
    LOW,
    MEDIUM,
    CriterionSpec,
    PriorityBands,
    check,
    info,
    issue,
    requires_homepage,
    tiers,
)

DATE_PUBLISHED_RE = re.compile(r"datePublished|dateCreated", re.IGNORECASE)
DATE_MODIFIED_RE = re.compile(r"dateModified", re.IGNORECASE)
ARTICLE_META_RE = re.compile(r"article:published_time|article:modified_time", re.IGNORECASE)
POLICY_LANGUAGE_RE = re.compile(
    r"content\s+policy|terms\s+of\s+use|usage\s+rights|permission|copyright\s+policy|licensing|creative\s+commons",
    re.IGNORECASE,
)
LICENSE_SCHEMA_RE = re.compile(r"license|copyrightHolder|copyrightYear", re.IGNORECASE)
TDM_RE = re.compile(
    r"tdm|text\s+and\s+data\s+mining|creative\s+commons|CC\s+BY|creativecommons\.org", re.IGNORECASE
)
AI_TXT_MIN_CHARS = 20


# Entity authority

ENTITY_CONSISTENCY = CriterionSpec(
    id="entity_consistency",
    label="Entity Authority & E-E-A-T",
    gates=(requires_homepage(Priority.P1),),
    rules=(
        tiers(
            lambda v: len(validated_phone_numbers(v.homepage_html, v.homepage_text)),
            [
                (
                    2,
                    issue(
                        MEDIUM,
                        "Multiple phone numbers found ({v})",
                        "Use one primary phone number consistently across all pages",
                        delta=1,
                    ),
                ),
                (1, info("Single consistent phone number found", 3)),
            ],
            otherwise=issue(LOW, "No phone number found on homepage", delta=1),
        ),
        check(lambda v: ADDRESS_RE.search(v.homepage_text), info("Physical address found on page", 2)),
        check(
            lambda v: ORG_SCHEMA_RE.search(v.homepage_html),
            info("Organization/LocalBusiness schema reinforces entity identity", 3),
            issue(
                HIGH,
                "No Organization schema to reinforce entity identity",
                "Add Organization JSON-LD with consistent name, address, phone, and social links",
            ),
        ),
        check(
            lambda v: SOCIAL_RE.search(v.homepage_html),
            info("Social media / sameAs references found", 2),
            issue(LOW, "No social media links or sameAs found", "Add sameAs links in Organization schema to social profiles"),
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P1),
)


# Original data


def _expert_text(view: SiteView) -> str:
    if not view.has_samples:
        return view.homepage_text
    return f"{view.homepage_text} {view.blog_text}"


ORIGINAL_DATA = CriterionSpec(
    id="original_data",
    label="Original Data & Expert Content",
    gates=(requires_homepage(Priority.P2),),
    rules=(
        check(
            lambda v: RESEARCH_CONTEXT_RE.search(v.homepage_text),
            info("Proprietary statistics with research context found on homepage", 3),
            issue(
                LOW,
                'Statistics found but without research context (e.g., "500+ clients")',
                'Add context about your methodology: "Our analysis of X found..." or "We surveyed Y..."',
                delta=1,
            ),
            when=lambda v: STATISTIC_RE.search(v.homepage_text) is not None,
        ),
        check(
            lambda v: STATISTIC_RE.search(v.homepage_text) is None,
            issue(
                MEDIUM,
                "No proprietary data or statistics found",
                "Add unique statistics, case study results, or industry data that LLMs would cite as authoritative",
            ),
        ),
        check(
            lambda v: has_case_study_with_metric(v.homepage_text),
            info("Case studies or testimonials with specific metrics found", 3),
            issue(
                LOW,
                "Case studies or testimonials mentioned but without specific metrics",
                'Add measurable outcomes to case studies (e.g., "increased traffic by 45%")',
                delta=1,
            ),
            when=lambda v: CASE_STUDY_RE.search(v.homepage_text) is not None,
        ),
        check(
            lambda v: CASE_STUDY_RE.search(v.homepage_text) is None,
            issue(MEDIUM, "No case studies or testimonials found", "Add case studies with specific outcomes and metrics"),
        ),
        check(
            lambda v: EXPERT_RE.search(_expert_text(v)),
            info("Expert attribution or credentials found", 2),
            issue(LOW, "No expert attribution or credentials visible", "Add author bios with credentials to establish E-E-A-T signals"),
        ),
        check(
            lambda v: CONTENT_LINK_RE.search(v.homepage_html),
            info("Links to blog/articles section found on site", 2),
            issue(
                MEDIUM,
                "No links to blog or articles section found",
                "Create a content section with expert articles and link to it from your homepage",
            ),
        ),
        check(
            lambda v: CASE_STUDY_RE.search(v.blog_text),
            info("Case studies or testimonials found on blog posts", 1),
            when=lambda v: v.has_samples and CASE_STUDY_RE.search(v.homepage_text) is None,
        ),
    ),
    priority=PriorityBands(0, Priority.P2, Priority.P2),
)


# Freshness


def _date_properties(view: SiteView) -> list[str]:
    found = []
    if DATE_PUBLISHED_RE.search(view.homepage_html):
        found.append("datePublished")
    if DATE_MODIFIED_RE.search(view.homepage_html):
        found.append("dateModified")
    return found


def _recent_year_reference(view: SiteView) -> tuple[int, int] | None:
    years = (view.now.year, view.now.year - 1)
    if any(str(year) in view.homepage_html for year in years):
        return years
    return None


CONTENT_FRESHNESS = CriterionSpec(
    id="content_freshness",
    label="Content Freshness Signals",
    gates=(requires_homepage(Priority.P2),),
    rules=(
        check(
            _date_properties,
            info(lambda found: f"JSON-LD date properties found: {', '.join(found)}", 3),
            issue(
                HIGH,
                "No JSON-LD date properties (datePublished/dateModified) found",
                "Add datePublished and dateModified to Article or WebPage schema",
            ),
        ),
        tiers(
            lambda v: count_tag(v.homepage_html, "time"),
            [
                (2, info("{v} <time> elements found", 3)),
                (
                    1,
                    issue(
                        LOW,
                        "Only 1 <time> element found",
                        'Use <time datetime="..."> for all dates to help AI parsers',
                        delta=1,
                    ),
                ),
            ],
            otherwise=issue(
                MEDIUM,
                "No <time> elements found",
                'Wrap publication and modification dates in <time datetime="..."> elements',
            ),
        ),
        check(
            lambda v: ARTICLE_META_RE.search(v.homepage_html),
            info("Open Graph article date meta tags found", 2),
            issue(
                LOW,
                "No article:published_time or article:modified_time meta tags",
                "Add Open Graph article date meta tags",
            ),
        ),
        check(
            _recent_year_reference,
            info(lambda years: f"References to {years[0]} or {years[1]} found, suggesting recent content", 2),
            issue(LOW, "No references to recent years found on homepage"),
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P2),
)


# Fact density

FACT_DENSITY = CriterionSpec(
    id="fact_density",
    label="Fact & Data Density",
    gates=(requires_homepage(Priority.P2),),
    rules=(
        tiers(
            lambda v: data_point_count(v.homepage_text),
            [
                (6, info("{v} quantitative data points found on homepage", 5)),
                (3, info("{v} quantitative data points found", 3)),
                (
                    1,
                    issue(
                        LOW,
                        "Only {v} quantitative data point(s) found",
                        "Add more specific numbers, percentages, and metrics to strengthen credibility",
                        delta=1,
                    ),
                ),
            ],
            otherwise=issue(
                HIGH,
                "No quantitative data points found",
                "Add specific statistics (percentages, counts, comparisons) that AI engines can cite",
            ),
        ),
        tiers(
            lambda v: len(set(YEAR_RE.findall(v.homepage_text))),
            [
                (2, info("{v} different year references found - suggests dated, verifiable claims", 2)),
                (
                    1,
                    issue(
                        LOW,
                        "Only 1 year reference found on page",
                        "Add more dated references and timestamps to demonstrate current, verifiable information",
                        delta=1,
                    ),
                ),
            ],
            otherwise=issue(
                LOW,
                "No year references found on page",
                "Include specific years and dates to provide verifiable, time-anchored facts",
            ),
        ),
        tiers(
            lambda v: len(ATTRIBUTION_RE.findall(v.homepage_text)),
            [(1, info('{v} source attribution(s) found (e.g., "according to", "study by")', 2))],
            otherwise=issue(
                LOW,
                "No source attributions found",
                'Add citations like "According to [source]" or "Research from [org] shows" for credibility',
            ),
        ),
        tiers(
            lambda v: len(UNIT_RE.findall(v.homepage_text)),
            [(2, info("{v} measurement units found (hours, miles, etc.) - adds factual precision", 1))],
            otherwise=issue(
                LOW,
                "Few or no units of measurement found",
                "Include specific measurements (hours, miles, sq ft, etc.) to add factual precision AI engines can extract",
            ),
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P2),
)


# Licensing


def _ai_txt_length(view: SiteView) -> int:
    text = view.ai_txt
    return len(text) if text is not None and len(text) > AI_TXT_MIN_CHARS else 0


def _ai_txt_raw(view: SiteView) -> str:
    document = view.snapshot.ai_txt
    return document.text if document else ""


CONTENT_LICENSING = CriterionSpec(
    id="content_licensing",
    label="Content Licensing & AI Permissions",
    rules=(
        check(
            _ai_txt_length,
            info("ai.txt file found ({v} characters)", 4),
            issue(
                HIGH,
                "No ai.txt file found",
                "Create /ai.txt to declare your AI usage policy and content permissions for AI crawlers",
            ),
        ),
        check(
            lambda v: POLICY_LANGUAGE_RE.search(v.homepage_text),
            info("Content policy or licensing language found on page", 2),
            issue(
                LOW,
                "No content policy or licensing language visible",
                "Add clear content usage terms or licensing information",
            ),
        ),
        check(
            lambda v: LICENSE_SCHEMA_RE.search(v.homepage_html) and LD_JSON_MARKER_RE.search(v.homepage_html),
            info("License or copyright properties found in schema markup", 2),
            issue(
                LOW,
                "No license or copyright properties in schema",
                "Add license, copyrightHolder, and copyrightYear to your schema markup",
            ),
        ),
        check(
            lambda v: TDM_RE.search(v.homepage_html + _ai_txt_raw(v)),
            info("TDM or Creative Commons licensing references found", 2),
            issue(
                LOW,
                "No TDM or Creative Commons licensing references found",
                "Add Text and Data Mining (TDM) permissions or Creative Commons licensing to signal AI-friendly content use",
            ),
        ),
    ),
    priority=PriorityBands(4, Priority.P3, Priority.P2),
)

AUTHORITY_CRITERIA = (
    ENTITY_CONSISTENCY,
    ORIGINAL_DATA,
    CONTENT_FRESHNESS,
    FACT_DENSITY,
    CONTENT_LICENSING,
)
