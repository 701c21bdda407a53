"""Scoring package for the 23 AEO criteria."""

# Lazy imports to avoid circular dependencies
# Use explicit imports when needed:
# from aeorank.scoring.registry import CRITERIA, evaluate_all
# from aeorank.scoring.calculator import calculate_overall_score

__all__ = [
    "CRITERIA",
    "CRITERION_LABELS",
    "get_criterion",
    "evaluate_all",
    "WEIGHTS",
    "weight_for",
    "calculate_overall_score",
    "SiteView",
]
