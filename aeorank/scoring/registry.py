"""Ordered registry of the 23 criteria and the entry point that evaluates them."""

from datetime import datetime

import structlog

from aeorank.config import Settings
from aeorank.models import AuditStatus, CriterionResult, DomainSnapshot
from aeorank.scoring import authority, schema, structure, technical
from aeorank.scoring.context import SiteView
from aeorank.scoring.rules import CriterionSpec, run_criterion

logger = structlog.get_logger(__name__)

# Report order; downstream consumers rely on it
CRITERIA: tuple[CriterionSpec, ...] = (
    technical.LLMS_TXT,
    schema.SCHEMA_MARKUP,
    structure.QA_CONTENT_FORMAT,
    technical.CLEAN_HTML,
    authority.ENTITY_CONSISTENCY,
    technical.ROBOTS_TXT,
    structure.FAQ_SECTION,
    authority.ORIGINAL_DATA,
    structure.INTERNAL_LINKING,
    structure.SEMANTIC_HTML,
    authority.CONTENT_FRESHNESS,
    technical.SITEMAP_COMPLETENESS,
    technical.RSS_FEED,
    structure.TABLE_LIST_EXTRACTABILITY,
    structure.DEFINITION_PATTERNS,
    structure.DIRECT_ANSWER_DENSITY,
    authority.CONTENT_LICENSING,
    schema.AUTHOR_SCHEMA_DEPTH,
    authority.FACT_DENSITY,
    technical.CANONICAL_URL,
    technical.CONTENT_VELOCITY,
    schema.SCHEMA_COVERAGE,
    schema.SPEAKABLE_SCHEMA,
)

CRITERION_LABELS: dict[str, str] = {spec.id: spec.label for spec in CRITERIA}


def get_criterion(criterion_id: str) -> CriterionSpec | None:
    return next((spec for spec in CRITERIA if spec.id == criterion_id), None)


def evaluate_all(
    snapshot: DomainSnapshot,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> list[CriterionResult]:
    """
    Score every criterion against a snapshot.

    Args:
        snapshot: Acquired (and optionally enriched) site data
        now: Reference time for freshness checks, defaults to the current time
        settings: Thresholds for lastmod analysis

    Returns:
        One result per criterion, in report order
    """
    view = SiteView(snapshot, now=now, settings=settings)
    results = [run_criterion(spec, view) for spec in CRITERIA]
    logger.debug(
        "criteria_evaluated",
        domain=snapshot.domain,
        passed=sum(1 for r in results if r.status == AuditStatus.PASS),
        total=len(results),
    )
    return results
