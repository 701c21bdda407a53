"""Programmatic audit pipeline.

Runs acquisition, optional headless re-rendering, multi-page discovery,
criterion scoring, aggregation, the raw data summary, the scorecard and page
reviews for a single domain.
"""

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from aeorank.config import Settings, get_settings
from aeorank.crawler.discovery import discover_pages
from aeorank.crawler.fetcher import Fetcher
from aeorank.crawler.orchestrator import Renderer, acquire_snapshot, apply_headless_rendering
from aeorank.crawler.render import HeadlessRenderer, RendererConfig
from aeorank.crawler.url import extract_domain
from aeorank.exceptions import HijackedDomainError, ParkedDomainError, UnreachableDomainError
from aeorank.extraction.page_review import PageReview, analyze_all_pages
from aeorank.models import CriterionResult, DomainSnapshot
from aeorank.reports.scorecard import (
    CriterionDetail,
    ScorecardItem,
    build_detailed_findings,
    build_scorecard,
)
from aeorank.reports.summary import RawDataSummary, extract_raw_data_summary
from aeorank.scoring.calculator import calculate_overall_score
from aeorank.scoring.registry import evaluate_all

logger = structlog.get_logger(__name__)


@dataclass
class AuditOptions:
    """Per-run switches; None falls back to settings."""

    headless: bool | None = None
    multi_page: bool | None = None
    timeout: float | None = None  # seconds, acquisition fetches


@dataclass
class AuditResult:
    """Everything produced by one audit."""

    site: str
    audit_date: str
    overall_score: int
    criteria: list[CriterionResult]
    raw_data: RawDataSummary
    scorecard: list[ScorecardItem] = field(default_factory=list)
    detailed_findings: list[CriterionDetail] = field(default_factory=list)
    pages_reviewed: list[PageReview] = field(default_factory=list)
    rendered_with_headless: bool = False
    elapsed: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "site": self.site,
            "audit_date": self.audit_date,
            "overall_score": self.overall_score,
            "criteria": [c.to_dict() for c in self.criteria],
            "scorecard": [s.to_dict() for s in self.scorecard],
            "detailed_findings": [d.to_dict() for d in self.detailed_findings],
            "raw_data": self.raw_data.model_dump(),
            "pages_reviewed": [p.to_dict() for p in self.pages_reviewed],
            "rendered_with_headless": self.rendered_with_headless,
            "elapsed": self.elapsed,
        }


def _raise_if_aborted(snapshot: DomainSnapshot) -> None:
    if not snapshot.protocol:
        raise UnreachableDomainError(snapshot.domain)
    if snapshot.redirected_to:
        raise HijackedDomainError(snapshot.domain, snapshot.redirected_to)
    if snapshot.parked_reason:
        raise ParkedDomainError(snapshot.domain, snapshot.parked_reason)


async def _collect(
    domain: str,
    fetcher: Fetcher,
    renderer: Renderer | None,
    multi_page: bool,
    settings: Settings,
) -> tuple[DomainSnapshot, bool]:
    snapshot = await acquire_snapshot(domain, fetcher, settings)
    _raise_if_aborted(snapshot)

    rendered = False
    if renderer is not None and getattr(renderer, "available", True):
        rendered = await apply_headless_rendering(snapshot, renderer, settings)

    if multi_page:
        await discover_pages(snapshot, fetcher, settings)

    return snapshot, rendered


async def audit(
    domain: str,
    options: AuditOptions | None = None,
    *,
    fetcher: Fetcher | None = None,
    renderer: Renderer | None = None,
    settings: Settings | None = None,
) -> AuditResult:
    """
    Run a complete audit of a domain.

    Args:
        domain: Domain or URL to audit
        options: Per-run switches
        fetcher: HTTP fetcher; one is built from settings when omitted
        renderer: Headless renderer; a Playwright renderer is used when
            omitted and headless rendering is enabled
        settings: Defaults for every tunable

    Returns:
        AuditResult with the 23 criterion results and derived data

    Raises:
        UnreachableDomainError: Neither HTTPS nor HTTP answered
        HijackedDomainError: The homepage redirects to another domain
        ParkedDomainError: The homepage is a parked placeholder
    """
    settings = settings or get_settings()
    options = options or AuditOptions()
    headless = settings.headless_enabled if options.headless is None else options.headless
    multi_page = settings.multi_page_enabled if options.multi_page is None else options.multi_page

    site = extract_domain(domain)
    log = logger.bind(domain=site)
    started = time.perf_counter()
    log.info("audit_started", headless=headless, multi_page=multi_page)

    if headless and renderer is None:
        renderer = HeadlessRenderer(RendererConfig.from_settings(settings))
    if not headless:
        renderer = None

    if fetcher is None:
        fetcher = Fetcher.from_settings(settings)
        if options.timeout is not None:
            fetcher.timeout = options.timeout
        async with fetcher:
            snapshot, rendered = await _collect(site, fetcher, renderer, multi_page, settings)
    else:
        snapshot, rendered = await _collect(site, fetcher, renderer, multi_page, settings)

    now = datetime.now(UTC)
    criteria = evaluate_all(snapshot, now=now, settings=settings)
    overall_score = calculate_overall_score(criteria)
    raw_data = extract_raw_data_summary(snapshot, rendered_with_headless=rendered, now=now)
    pages_reviewed = analyze_all_pages(snapshot)
    elapsed = round(time.perf_counter() - started, 1)

    log.info(
        "audit_complete",
        overall_score=overall_score,
        pages=len(snapshot.pages),
        rendered_with_headless=rendered,
        elapsed=elapsed,
    )
    return AuditResult(
        site=site,
        audit_date=now.date().isoformat(),
        overall_score=overall_score,
        criteria=criteria,
        raw_data=raw_data,
        scorecard=build_scorecard(criteria),
        detailed_findings=build_detailed_findings(criteria),
        pages_reviewed=pages_reviewed,
        rendered_with_headless=rendered,
        elapsed=elapsed,
    )
