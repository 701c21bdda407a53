"""Structured data criteria: JSON-LD presence, depth, speakable and author markup."""

import re

from aeorank.extraction.signals import (
    ARTICLE_PROPERTIES,
    EXTENDED_SCHEMA_TYPES,
    ORGANIZATION_PROPERTIES,
    PERSON_SCHEMA_RE,
    SPEAKABLE_RE,
    has_tag,
    schema_properties_in,
    schema_types_in,
    unique_schema_properties,
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

SCHEMA_ID_RE = re.compile(r'"@id"\s*:', re.IGNORECASE)
FAQ_SCHEMA_RE = re.compile(r"faqpage", re.IGNORECASE)
CSS_SELECTOR_RE = re.compile(r'"cssselector"', re.IGNORECASE)
XPATH_RE = re.compile(r'"xpath"', re.IGNORECASE)
CREDENTIAL_RE = re.compile(r"jobTitle|knowsAbout|expertise|hasCredential", re.IGNORECASE)
SAME_AS_RE = re.compile(r"sameAs", re.IGNORECASE)
BYLINE_TEXT_RE = re.compile(r"written\s+by|authored?\s+by|by\s+[A-Z][a-z]+\s+[A-Z]", re.IGNORECASE)
BYLINE_MARKUP_RE = re.compile(r'class="[^"]*author[^"]*"|rel="author"', re.IGNORECASE)


# Schema.org structured data


def _homepage_types(view: SiteView) -> list[str]:
    return schema_types_in(view.homepage_schema)


def _has_org_type(view: SiteView) -> bool:
    types = _homepage_types(view)
    return "organization" in types or "localbusiness" in types


def _blog_extra_types(view: SiteView) -> list[str]:
    seen = _homepage_types(view)
    return [t for t in schema_types_in(view.blog_schema) if t not in seen]


def _blog_faq_schema(view: SiteView) -> bool:
    return "faqpage" not in _homepage_types(view) and bool(FAQ_SCHEMA_RE.search(" ".join(view.blog_schema)))


SCHEMA_MARKUP = CriterionSpec(
    id="schema_markup",
    label="Schema.org Structured Data",
    gates=(
        requires_homepage(Priority.P1, "Could not fetch homepage to check schema markup"),
        Gate(
            blocked=lambda v: not v.homepage_schema,
            score=0,
            finding=issue(
                CRITICAL,
                "No JSON-LD structured data found on homepage",
                'Add Organization, LocalBusiness, or WebSite schema in a <script type="application/ld+json"> tag',
            ),
            priority=Priority.P1,
        ),
    ),
    rules=(
        check(lambda v: len(v.homepage_schema), info("Found {v} JSON-LD block(s) on homepage", 3)),
        check(
            _homepage_types,
            info(lambda types: f"Schema types found: {', '.join(types)}", lambda types: min(4, len(types) * 2)),
        ),
        check(
            _has_org_type,
            info("Organization or LocalBusiness schema found", 2),
            issue(
                HIGH,
                "Missing Organization or LocalBusiness schema",
                "Add Organization schema with name, url, logo, contactPoint, and sameAs properties",
            ),
        ),
        check(
            lambda v: "faqpage" in _homepage_types(v),
            info("FAQPage schema markup present", 1),
            issue(MEDIUM, "No FAQPage schema found", "Add FAQPage schema on pages with FAQ content"),
        ),
        check(
            _blog_extra_types,
            info(
                lambda types: f"Additional schema types found on blog pages: {', '.join(types)}",
                lambda types: min(2, len(types)),
            ),
            when=lambda v: bool(v.blog_schema),
        ),
        check(
            _blog_faq_schema,
            info("FAQPage schema found on blog posts", 1),
            when=lambda v: bool(v.blog_schema),
        ),
    ),
    priority=PriorityBands(7, Priority.P2, Priority.P1),
)


# Schema coverage and depth

SCHEMA_COVERAGE = CriterionSpec(
    id="schema_coverage",
    label="Schema Coverage & Depth",
    gates=(
        requires_homepage(Priority.P2),
        Gate(
            blocked=lambda v: not v.combined_schema,
            score=0,
            finding=issue(
                CRITICAL,
                "No JSON-LD found - cannot assess schema coverage",
                "Add JSON-LD schema markup to improve AI engine understanding",
            ),
            priority=Priority.P1,
        ),
    ),
    rules=(
        tiers(
            lambda v: len(unique_schema_properties(v.combined_schema)),
            [
                (15, info("{v} unique schema properties used - rich schema depth", 2)),
                (5, info("{v} unique schema properties found", 2)),
            ],
            otherwise=issue(
                LOW,
                "Only {v} schema properties",
                "Add more properties to your schema types for richer AI understanding",
                delta=1,
            ),
        ),
        tiers(
            lambda v: len(schema_properties_in(v.combined_schema, ORGANIZATION_PROPERTIES)),
            [
                (5, info(f"Organization schema has {{v}}/{len(ORGANIZATION_PROPERTIES)} key properties", 2)),
                (
                    3,
                    issue(
                        LOW,
                        f"Organization schema has only {{v}}/{len(ORGANIZATION_PROPERTIES)} key properties",
                        "Add more Organization properties: logo, contactPoint, sameAs, address",
                        delta=1,
                    ),
                ),
            ],
            otherwise=issue(
                MEDIUM,
                "Organization schema has only {v} key properties",
                "Add essential Organization properties: name, url, logo, contactPoint, sameAs, address, telephone",
            ),
        ),
        tiers(
            lambda v: len(schema_properties_in(v.combined_schema, ARTICLE_PROPERTIES)),
            [
                (4, info(f"Article schema has {{v}}/{len(ARTICLE_PROPERTIES)} key properties", 2)),
                (
                    2,
                    issue(
                        LOW,
                        f"Article schema has only {{v}}/{len(ARTICLE_PROPERTIES)} key properties",
                        "Add headline, datePublished, dateModified, author, image, and publisher to Article schema",
                        delta=1,
                    ),
                ),
            ],
            otherwise=issue(
                MEDIUM,
                "Article schema missing or has fewer than 2 key properties",
                "Add Article schema with headline, datePublished, author, and publisher properties",
            ),
        ),
        check(
            lambda v: SCHEMA_ID_RE.search(" ".join(v.combined_schema)),
            info("@id linking found - schema types are connected in a graph", 2),
            issue(
                LOW,
                "No @id linking between schema types",
                "Use @id references to connect schema types (e.g., article.publisher -> organization)",
            ),
        ),
        tiers(
            lambda v: schema_types_in(v.combined_schema, EXTENDED_SCHEMA_TYPES),
            [
                (3, info(lambda types: f"{len(types)} distinct schema types used: {', '.join(types)}", 2)),
                (
                    2,
                    issue(
                        LOW,
                        lambda types: f"Only {len(types)} distinct schema types used",
                        "Add more schema types (FAQPage, BreadcrumbList, Service) for comprehensive AI understanding",
                        delta=1,
                    ),
                ),
            ],
            otherwise=issue(
                MEDIUM,
                lambda types: f"Only {len(types)} schema type(s) found - limited coverage",
                "Add multiple schema types (Organization, WebSite, FAQPage, BreadcrumbList) for comprehensive AI understanding",
            ),
            key=len,
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P1),
)


# Speakable


def _has_speakable(view: SiteView) -> bool:
    return bool(SPEAKABLE_RE.search(" ".join(view.combined_schema)))


def _speakable_targeting(view: SiteView) -> str | None:
    schema = " ".join(view.combined_schema)
    css = CSS_SELECTOR_RE.search(schema) is not None
    xpath = XPATH_RE.search(schema) is not None
    if css and xpath:
        return "cssSelector and xpath"
    if css:
        return "cssSelector"
    if xpath:
        return "xpath"
    return None


SPEAKABLE_SCHEMA = CriterionSpec(
    id="speakable_schema",
    label="Speakable Schema",
    gates=(
        requires_homepage(Priority.P2),
        Gate(
            blocked=lambda v: not v.combined_schema,
            score=0,
            finding=issue(
                CRITICAL,
                "No JSON-LD found - cannot assess speakable schema",
                "Add JSON-LD schema markup with SpeakableSpecification to indicate voice-readable content sections",
            ),
            priority=Priority.P2,
        ),
        Gate(
            blocked=lambda v: not _has_speakable(v),
            score=0,
            finding=issue(
                MEDIUM,
                "No SpeakableSpecification schema found - voice assistants cannot identify readable sections",
                "Add SpeakableSpecification schema with cssSelector or xpath targeting key content sections "
                "(headlines, summaries, FAQ answers)",
            ),
            priority=Priority.P2,
        ),
    ),
    base=4,
    rules=(
        check(
            lambda v: True,
            info("SpeakableSpecification schema detected - voice assistants can identify readable content"),
        ),
        check(
            _speakable_targeting,
            info("Speakable uses {v} targeting for precise content selection", 3),
            issue(
                LOW,
                "Speakable schema lacks cssSelector or xpath targeting",
                'Add cssSelector (e.g., ".article-headline, .article-summary") or xpath to precisely target speakable sections',
            ),
        ),
        check(
            lambda v: SPEAKABLE_RE.search(v.blog_html),
            info("Speakable schema also found in blog/content pages - comprehensive voice coverage", 3),
            issue(
                LOW,
                "Speakable schema only on homepage, not found in blog/content pages",
                "Add SpeakableSpecification to article pages to make blog content voice-assistant readable",
            ),
            when=lambda v: v.has_samples,
        ),
        check(
            lambda v: True,
            info("No blog pages sampled - blog speakable coverage not assessed"),
            when=lambda v: not v.has_samples,
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P2),
)


# Author and expert markup


def _has_person_schema(view: SiteView) -> bool:
    return PERSON_SCHEMA_RE.search(view.combined_html) is not None


def _has_byline(view: SiteView) -> bool:
    return bool(BYLINE_TEXT_RE.search(view.combined_text) or BYLINE_MARKUP_RE.search(view.homepage_html))


AUTHOR_SCHEMA_DEPTH = CriterionSpec(
    id="author_schema_depth",
    label="Author & Expert Schema",
    gates=(requires_homepage(Priority.P2),),
    rules=(
        check(
            _has_person_schema,
            info("Person schema found in JSON-LD", 3),
            issue(
                MEDIUM,
                "No Person schema found",
                "Add Person schema for authors with name, jobTitle, knowsAbout, and sameAs properties",
            ),
        ),
        check(
            lambda v: CREDENTIAL_RE.search(v.combined_html),
            info("Author credential properties found (jobTitle/knowsAbout)", 2),
            issue(
                LOW,
                "No jobTitle or knowsAbout in author schema",
                "Add jobTitle and knowsAbout to Person schema to establish expertise",
            ),
        ),
        check(
            lambda v: _has_person_schema(v) and SAME_AS_RE.search(v.combined_html),
            info("Author sameAs social profile links found", 2),
            issue(
                LOW,
                "No sameAs links to author social profiles",
                "Add sameAs URLs (LinkedIn, GitHub) to Person schema to strengthen entity connections",
            ),
        ),
        check(
            _has_byline,
            info("Visible author byline or attribution found", 2),
            issue(MEDIUM, "No visible author byline found", "Add visible author names with credentials to establish E-E-A-T"),
        ),
        check(
            lambda v: has_tag(v.combined_html, "address"),
            info("<address> element found for contact information", 1),
            issue(
                LOW,
                "No <address> element found for contact information",
                "Add an <address> element with contact details to reinforce entity identity",
            ),
        ),
    ),
    priority=PriorityBands(7, Priority.P3, Priority.P2),
)

SCHEMA_CRITERIA = (
    SCHEMA_MARKUP,
    SCHEMA_COVERAGE,
    SPEAKABLE_SCHEMA,
    AUTHOR_SCHEMA_DEPTH,
)
