"""Read-only, lazily derived views over a DomainSnapshot for evaluators."""

from datetime import UTC, datetime
from functools import cached_property

from aeorank.config import Settings, get_settings
from aeorank.crawler.sitemap import SitemapDateAnalysis, analyze_lastmod_dates
from aeorank.extraction.html import json_ld_blocks, tag_text
from aeorank.extraction.signals import question_headings
from aeorank.models import DomainSnapshot, FetchedDocument


def _usable_text_file(document: FetchedDocument | None) -> str | None:
    """Body of a plain-text resource, or None when missing or an HTML catch-all."""
    if document is None or document.status != 200 or document.is_html_catch_all:
        return None
    return document.text


class SiteView:
    """
    Derived data shared by the criterion evaluators.

    "Combined" views join the homepage with every sampled page; "blog"
    views cover the sampled pages only. Every property is computed once.
    """

    def __init__(
        self,
        snapshot: DomainSnapshot,
        now: datetime | None = None,
        settings: Settings | None = None,
    ):
        self.snapshot = snapshot
        self.now = now or datetime.now(UTC)
        self.settings = settings or get_settings()

    @property
    def domain(self) -> str:
        return self.snapshot.domain

    @property
    def protocol(self) -> str | None:
        return self.snapshot.protocol

    @property
    def is_https(self) -> bool:
        return self.snapshot.protocol == "https"

    @property
    def has_homepage(self) -> bool:
        return self.snapshot.homepage is not None

    @property
    def has_samples(self) -> bool:
        return bool(self.snapshot.pages)

    @cached_property
    def homepage_html(self) -> str:
        return self.snapshot.homepage.text if self.snapshot.homepage else ""

    @cached_property
    def page_htmls(self) -> list[str]:
        return [page.text for page in self.snapshot.pages]

    @cached_property
    def combined_html(self) -> str:
        return "\n".join([self.homepage_html, *self.page_htmls])

    @cached_property
    def blog_html(self) -> str:
        return "\n".join(self.page_htmls)

    @cached_property
    def homepage_text(self) -> str:
        return tag_text(self.homepage_html)

    @cached_property
    def combined_text(self) -> str:
        return tag_text(self.combined_html)

    @cached_property
    def blog_text(self) -> str:
        return " ".join(tag_text(html) for html in self.page_htmls)

    @cached_property
    def homepage_schema(self) -> list[str]:
        return json_ld_blocks(self.homepage_html) if self.homepage_html else []

    @cached_property
    def blog_schema(self) -> list[str]:
        return [block for html in self.page_htmls for block in json_ld_blocks(html)]

    @cached_property
    def combined_schema(self) -> list[str]:
        return self.homepage_schema + self.blog_schema

    @cached_property
    def combined_question_headings(self) -> list[str]:
        return [h for html in [self.homepage_html, *self.page_htmls] for h in question_headings(html)]

    @cached_property
    def llms_txt(self) -> str | None:
        return _usable_text_file(self.snapshot.llms_txt)

    @cached_property
    def robots_txt(self) -> str | None:
        return _usable_text_file(self.snapshot.robots_txt)

    @cached_property
    def ai_txt(self) -> str | None:
        return _usable_text_file(self.snapshot.ai_txt)

    @cached_property
    def sitemap_text(self) -> str | None:
        sitemap = self.snapshot.sitemap_xml
        if sitemap is None or sitemap.status != 200:
            return None
        return sitemap.text

    @cached_property
    def sitemap_dates(self) -> SitemapDateAnalysis:
        return analyze_lastmod_dates(
            self.sitemap_text or "",
            now=self.now,
            window_days=self.settings.velocity_window_days,
            min_sample=self.settings.uniform_lastmod_min_sample,
            max_day_share=self.settings.uniform_lastmod_share,
        )
