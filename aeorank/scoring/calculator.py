"""Weighted aggregate of criterion scores on a 0-100 scale."""

import math
from collections.abc import Iterable

from aeorank.models import CriterionResult

# Weights need not sum to 1; the total is renormalised over the criteria present.
WEIGHTS: dict[str, float] = {
    "llms_txt": 0.10,
    "schema_markup": 0.15,
    "qa_content_format": 0.15,
    "clean_html": 0.10,
    "entity_consistency": 0.10,
    "robots_txt": 0.05,
    "faq_section": 0.10,
    "original_data": 0.10,
    "internal_linking": 0.10,
    "semantic_html": 0.05,
    "content_freshness": 0.07,
    "sitemap_completeness": 0.05,
    "rss_feed": 0.03,
    "table_list_extractability": 0.07,
    "definition_patterns": 0.04,
    "direct_answer_density": 0.07,
    "content_licensing": 0.04,
    "author_schema_depth": 0.04,
    "fact_density": 0.05,
    "canonical_url": 0.04,
    "content_velocity": 0.03,
    "schema_coverage": 0.03,
    "speakable_schema": 0.03,
}

# Applied to criteria missing from the table
DEFAULT_WEIGHT = 0.10


def weight_for(criterion_id: str) -> float | None:
    return WEIGHTS.get(criterion_id)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_overall_score(results: Iterable[CriterionResult]) -> int:
    """
    Combine criterion scores into an overall 0-100 score.

    Each score is scaled to a percentage and weighted; the weighted sum is
    divided by the total weight actually used, so unknown or missing
    criteria never skew the scale.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for result in results:
        weight = weight_for(result.criterion) or DEFAULT_WEIGHT
        weighted_sum += (result.score / 10) * weight * 100
        total_weight += weight

    if total_weight == 0:
        return 0
    return round_half_up(weighted_sum / total_weight)
