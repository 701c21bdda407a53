"""Flattened raw-data summary of a snapshot for downstream consumers."""

import re
from datetime import datetime

from pydantic import BaseModel, Field

from aeorank.crawler.sitemap import count_locations
from aeorank.extraction.signals import (
    ADDRESS_RE,
    ARIA_RE,
    BREADCRUMB_RE,
    CASE_STUDY_RE,
    CONTENT_LINK_RE,
    EXPERT_RE,
    EXPLICIT_DEFINITION_RE,
    LANG_RE,
    LD_JSON_MARKER_RE,
    META_DESCRIPTION_RE,
    ORG_SCHEMA_RE,
    PERSON_SCHEMA_RE,
    PHONE_CONTEXT_RE,
    PHONE_RE,
    SCHEMA_TYPES,
    SOCIAL_RE,
    SPEAKABLE_RE,
    STATISTIC_RE,
    TITLE_RE,
    blocked_ai_crawlers,
    count_tag,
    external_link_hrefs,
    has_global_phone_context,
    has_tag,
    image_alt_counts,
    internal_link_hrefs,
    mentioned_ai_crawlers,
    question_headings,
    schema_types_in,
)
from aeorank.models import DomainSnapshot, FetchedDocument
from aeorank.scoring.context import SiteView

SUMMARY_SEMANTIC_ELEMENTS = ("main", "article", "nav", "header", "footer", "section", "time")
BLOG_SCHEMA_TYPES = [*SCHEMA_TYPES, "person"]
ROBOTS_SNIPPET_CHARS = 500
SUMMARY_DATA_POINT_RE = re.compile(r"\d+(?:\.\d+)?(?:\s*%|\s*\$|\s*USD)")
CANONICAL_REL_RE = re.compile(r'<link[^>]*rel="canonical"', re.IGNORECASE)
LICENSE_PROPERTY_RE = re.compile(r"license|copyrightHolder", re.IGNORECASE)
SELECTOR_RE = re.compile(r'"cssselector"|"xpath"', re.IGNORECASE)
FAQ_SCHEMA_RE = re.compile(r"faqpage", re.IGNORECASE)


class RawDataSummary(BaseModel):
    """Raw measurements behind the criterion scores."""

    domain: str
    protocol: str | None = None
    homepage_length: int = 0
    homepage_text_length: int = 0
    has_https: bool = False

    llms_txt_status: int | None = None
    llms_txt_length: int = 0
    robots_txt_status: int | None = None
    robots_txt_snippet: str = ""
    robots_txt_ai_crawlers: list[str] = Field(default_factory=list)
    robots_txt_blocked_crawlers: list[str] = Field(default_factory=list)
    schema_types_found: list[str] = Field(default_factory=list)
    schema_block_count: int = 0
    faq_page_status: int | None = None
    faq_page_length: int = 0
    sitemap_status: int | None = None

    internal_link_count: int = 0
    external_link_count: int = 0
    question_headings_count: int = 0
    h1_count: int = 0
    has_meta_description: bool = False
    has_title: bool = False

    has_phone: bool = False
    has_address: bool = False
    has_org_schema: bool = False
    has_social_links: bool = False
    semantic_elements_found: list[str] = Field(default_factory=list)
    img_count: int = 0
    img_with_alt_count: int = 0
    has_lang_attr: bool = False
    has_aria: bool = False
    has_breadcrumbs: bool = False
    has_nav: bool = False
    has_footer: bool = False
    has_case_studies: bool = False
    has_statistics: bool = False
    has_expert_attribution: bool = False
    has_blog_section: bool = False

    has_date_modified_schema: bool = False
    time_element_count: int = 0
    sitemap_url_count: int = 0
    has_rss_feed: bool = False
    table_count: int = 0
    ordered_list_count: int = 0
    unordered_list_count: int = 0
    definition_pattern_count: int = 0
    has_ai_txt: bool = False
    has_person_schema: bool = False
    fact_data_point_count: int = 0
    has_canonical: bool = False
    has_license_schema: bool = False
    sitemap_recent_lastmod_count: int = 0

    has_speakable_schema: bool = False
    speakable_selector_count: int = 0

    blog_sample_count: int = 0
    blog_sample_urls: list[str] = Field(default_factory=list)
    blog_sample_schema_types: list[str] = Field(default_factory=list)
    blog_sample_question_headings: int = 0
    blog_sample_faq_schema_found: bool = False

    rendered_with_headless: bool = False


def _status(document: FetchedDocument | None) -> int | None:
    """Status of a text resource, hiding HTML catch-alls."""
    if document is None or document.is_html_catch_all:
        return None
    return document.status


def _is_real_text_file(document: FetchedDocument | None) -> bool:
    return document is not None and document.status == 200 and not document.is_html_catch_all


def _has_phone(view: SiteView) -> bool:
    text = view.homepage_text
    if not PHONE_RE.search(text):
        return False
    return has_global_phone_context(view.homepage_html) or PHONE_CONTEXT_RE.search(text) is not None


def extract_raw_data_summary(
    snapshot: DomainSnapshot,
    rendered_with_headless: bool = False,
    now: datetime | None = None,
) -> RawDataSummary:
    """
    Summarise the homepage, text resources and sampled pages of a snapshot.

    Homepage-level fields read the homepage only; the ``blog_sample_*``
    fields describe the sampled pages.
    """
    view = SiteView(snapshot, now=now)
    html = view.homepage_html
    text = view.homepage_text
    schema_text = " ".join(view.homepage_schema)
    robots = snapshot.robots_txt.text if snapshot.robots_txt else ""
    images, images_with_alt = image_alt_counts(html)
    faq = snapshot.faq_page

    return RawDataSummary(
        domain=snapshot.domain,
        protocol=snapshot.protocol,
        homepage_length=len(html),
        homepage_text_length=len(text),
        has_https=view.is_https,
        llms_txt_status=_status(snapshot.llms_txt),
        llms_txt_length=len(snapshot.llms_txt.text) if _is_real_text_file(snapshot.llms_txt) else 0,
        robots_txt_status=_status(snapshot.robots_txt),
        robots_txt_snippet=robots[:ROBOTS_SNIPPET_CHARS],
        robots_txt_ai_crawlers=mentioned_ai_crawlers(robots),
        robots_txt_blocked_crawlers=blocked_ai_crawlers(robots),
        schema_types_found=schema_types_in(view.homepage_schema),
        schema_block_count=len(view.homepage_schema),
        faq_page_status=faq.status if faq else None,
        faq_page_length=len(faq.text) if faq and faq.status == 200 else 0,
        sitemap_status=snapshot.sitemap_xml.status if snapshot.sitemap_xml else None,
        internal_link_count=len(internal_link_hrefs(html, snapshot.domain)),
        external_link_count=len(external_link_hrefs(html, snapshot.domain)),
        question_headings_count=len(question_headings(html)) if html else 0,
        h1_count=count_tag(html, "h1"),
        has_meta_description=bool(META_DESCRIPTION_RE.search(html)),
        has_title=bool(TITLE_RE.search(html)),
        has_phone=_has_phone(view),
        has_address=bool(ADDRESS_RE.search(text)),
        has_org_schema=bool(ORG_SCHEMA_RE.search(html)),
        has_social_links=bool(SOCIAL_RE.search(html)),
        semantic_elements_found=[tag for tag in SUMMARY_SEMANTIC_ELEMENTS if has_tag(html, tag)],
        img_count=images,
        img_with_alt_count=images_with_alt,
        has_lang_attr=bool(LANG_RE.search(html)),
        has_aria=bool(ARIA_RE.search(html)),
        has_breadcrumbs=bool(BREADCRUMB_RE.search(html)),
        has_nav=has_tag(html, "nav"),
        has_footer=has_tag(html, "footer"),
        has_case_studies=bool(CASE_STUDY_RE.search(text)),
        has_statistics=bool(STATISTIC_RE.search(text)),
        has_expert_attribution=bool(EXPERT_RE.search(text)),
        has_blog_section=bool(CONTENT_LINK_RE.search(html)),
        has_date_modified_schema="datemodified" in html.lower(),
        time_element_count=count_tag(html, "time"),
        sitemap_url_count=count_locations(snapshot.sitemap_xml.text) if snapshot.sitemap_xml else 0,
        has_rss_feed=_is_real_text_file(snapshot.rss_feed),
        table_count=count_tag(html, "table"),
        ordered_list_count=count_tag(html, "ol"),
        unordered_list_count=count_tag(html, "ul"),
        definition_pattern_count=len(EXPLICIT_DEFINITION_RE.findall(text)),
        has_ai_txt=_is_real_text_file(snapshot.ai_txt),
        has_person_schema=bool(PERSON_SCHEMA_RE.search(html)),
        fact_data_point_count=len(SUMMARY_DATA_POINT_RE.findall(text)),
        has_canonical=bool(CANONICAL_REL_RE.search(html)),
        has_license_schema=bool(LICENSE_PROPERTY_RE.search(html) and LD_JSON_MARKER_RE.search(html)),
        sitemap_recent_lastmod_count=view.sitemap_dates.effective_recent_count,
        has_speakable_schema=bool(SPEAKABLE_RE.search(schema_text)),
        speakable_selector_count=len(SELECTOR_RE.findall(schema_text)),
        blog_sample_count=len(snapshot.pages),
        blog_sample_urls=[page.final_url for page in snapshot.pages if page.final_url],
        blog_sample_schema_types=schema_types_in(view.blog_schema, BLOG_SCHEMA_TYPES),
        blog_sample_question_headings=sum(len(question_headings(page)) for page in view.page_htmls),
        blog_sample_faq_schema_found=bool(
            view.blog_html and FAQ_SCHEMA_RE.search(view.blog_html) and LD_JSON_MARKER_RE.search(view.blog_html)
        ),
        rendered_with_headless=rendered_with_headless,
    )
