"""Report package for audit summaries and scorecards."""

# from aeorank.reports.summary import RawDataSummary, extract_raw_data_summary
# from aeorank.reports.scorecard import build_scorecard, build_detailed_findings

__all__ = [
    "RawDataSummary",
    "extract_raw_data_summary",
    "ScorecardItem",
    "CriterionDetail",
    "build_scorecard",
    "build_detailed_findings",
]
