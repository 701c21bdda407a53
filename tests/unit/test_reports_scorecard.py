"""Tests for scorecard and detailed findings."""

import pytest

from aeorank.models import AuditStatus, CriterionResult, Finding, FindingSeverity
from aeorank.reports.scorecard import (
    FindingType,
    ReportSeverity,
    ScoreStatus,
    build_detailed_findings,
    build_scorecard,
    map_finding_severity,
    map_finding_type,
    score_to_status,
)


def _result(
    label: str = "llms.txt File",
    score: int = 5,
    findings: list[Finding] | None = None,
) -> CriterionResult:
    return CriterionResult(
        criterion="llms_txt",
        criterion_label=label,
        score=score,
        status=AuditStatus.PARTIAL,
        findings=findings or [],
    )


class TestScoreToStatus:
    """Tests for score_to_status."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, ScoreStatus.MISSING),
            (1, ScoreStatus.NEARLY_EMPTY),
            (2, ScoreStatus.POOR),
            (3, ScoreStatus.WEAK),
            (4, ScoreStatus.PARTIAL),
            (5, ScoreStatus.PARTIAL),
            (6, ScoreStatus.MODERATE),
            (7, ScoreStatus.GOOD),
            (8, ScoreStatus.STRONG),
            (10, ScoreStatus.STRONG),
        ],
    )
    def test_bands(self, score: int, expected: ScoreStatus) -> None:
        """Test every score maps to its word band."""
        assert score_to_status(score) == expected


class TestFindingMapping:
    """Tests for severity and type mapping."""

    def test_severity(self) -> None:
        """Test engine severities map to report wording."""
        assert map_finding_severity(FindingSeverity.CRITICAL) == ReportSeverity.CRITICAL
        assert map_finding_severity(FindingSeverity.HIGH) == ReportSeverity.MISSING
        assert map_finding_severity(FindingSeverity.MEDIUM) == ReportSeverity.ADD
        assert map_finding_severity(FindingSeverity.LOW) == ReportSeverity.PARTIAL
        assert map_finding_severity(FindingSeverity.INFO) == ReportSeverity.WORKING

    def test_type(self) -> None:
        """Test finding types depend on severity and fix presence."""
        assert map_finding_type(FindingSeverity.INFO, has_fix=True) == FindingType.GOOD
        assert map_finding_type(FindingSeverity.CRITICAL, has_fix=False) == FindingType.CRITICAL
        assert map_finding_type(FindingSeverity.HIGH, has_fix=True) == FindingType.MISSING
        assert map_finding_type(FindingSeverity.MEDIUM, has_fix=True) == FindingType.ISSUE
        assert map_finding_type(FindingSeverity.LOW, has_fix=False) == FindingType.NOTE


class TestBuildScorecard:
    """Tests for build_scorecard."""

    def test_rows_numbered_in_order(self) -> None:
        """Test ids start at 1 and follow result order."""
        rows = build_scorecard([_result(score=0), _result(label="Speakable Schema", score=9)])

        assert [row.id for row in rows] == [1, 2]
        assert rows[0].status == ScoreStatus.MISSING
        assert rows[1].criterion == "Speakable Schema"
        assert rows[1].status == ScoreStatus.STRONG

    def test_display_name_mapping(self) -> None:
        """Test labels with report wording are renamed."""
        rows = build_scorecard([_result(label="Entity Authority & E-E-A-T")])

        assert rows[0].criterion == "Entity Authority & NAP Consistency"

    def test_key_findings_first_three(self) -> None:
        """Test key findings join the first three details and end with a period."""
        findings = [Finding(FindingSeverity.INFO, f"Detail {i}") for i in range(5)]
        rows = build_scorecard([_result(findings=findings)])

        assert rows[0].key_findings == "Detail 0. Detail 1. Detail 2."

    def test_key_findings_keep_existing_period(self) -> None:
        """Test no extra period is added."""
        rows = build_scorecard([_result(findings=[Finding(FindingSeverity.INFO, "Done.")])])

        assert rows[0].key_findings == "Done."

    def test_no_findings(self) -> None:
        """Test a criterion without findings has empty key findings."""
        assert build_scorecard([_result()])[0].key_findings == ""

    def test_to_dict(self) -> None:
        """Test rows serialise with string enums."""
        data = build_scorecard([_result(score=7)])[0].to_dict()

        assert data == {
            "id": 1,
            "criterion": "llms.txt File",
            "score": 7,
            "status": "GOOD",
            "key_findings": "",
        }


class TestBuildDetailedFindings:
    """Tests for build_detailed_findings."""

    def test_fix_appended_to_description(self) -> None:
        """Test findings with a fix carry it in the description."""
        findings = [
            Finding(FindingSeverity.HIGH, "No llms.txt file found", fix="Create /llms.txt"),
            Finding(FindingSeverity.INFO, "Site is reachable"),
        ]
        detail = build_detailed_findings([_result(findings=findings)])[0]

        assert detail.id == 1
        assert detail.name == "llms.txt File"
        assert detail.findings[0].description == "No llms.txt file found. Create /llms.txt"
        assert detail.findings[0].type == FindingType.MISSING
        assert detail.findings[0].severity == ReportSeverity.MISSING
        assert detail.findings[1].type == FindingType.GOOD
        assert len(detail.findings) == 2

    def test_duplicates_dropped(self) -> None:
        """Test repeated descriptions appear once."""
        findings = [Finding(FindingSeverity.LOW, "Thin content")] * 3
        detail = build_detailed_findings([_result(findings=findings)])[0]

        descriptions = [f.description for f in detail.findings]
        assert descriptions.count("Thin content") == 1

    def test_fallback_for_low_score(self) -> None:
        """Test a sparse low-scoring criterion gets an improvement note."""
        detail = build_detailed_findings([_result(score=3)])[0]

        assert len(detail.findings) == 1
        assert detail.findings[0].type == FindingType.NOTE
        assert detail.findings[0].severity == ReportSeverity.PARTIAL
        assert "needs improvement" in detail.findings[0].description

    def test_fallback_for_high_score(self) -> None:
        """Test a sparse high-scoring criterion gets a positive line."""
        findings = [Finding(FindingSeverity.INFO, "Valid llms.txt found")]
        detail = build_detailed_findings([_result(score=9, findings=findings)])[0]

        assert len(detail.findings) == 2
        assert detail.findings[1].description == "llms.txt File is well-implemented for AI engine visibility."
        assert detail.findings[1].severity == ReportSeverity.WORKING
