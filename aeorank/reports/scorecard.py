"""Scorecard and per-criterion finding lists built from criterion results.

Both views are deterministic reshapes of the 23 results: display names,
word-valued score bands and audit-style severities, ready for report
renderers and narrative generators.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from aeorank.models import CriterionResult, FindingSeverity

# Display names where the report wording differs from the criterion label
DISPLAY_NAMES: dict[str, str] = {
    "Entity Authority & E-E-A-T": "Entity Authority & NAP Consistency",
    "Comprehensive FAQ Sections": "Comprehensive FAQ Section",
    "Original Data & Expert Content": "Original Data & Expert Analysis",
    "Internal Linking Architecture": "Internal Linking Structure",
}

KEY_FINDINGS_LIMIT = 3
MIN_DETAILED_FINDINGS = 2
GOOD_SCORE = 7


class ScoreStatus(str, Enum):
    """Word band for a 0-10 criterion score."""

    MISSING = "MISSING"
    NEARLY_EMPTY = "NEARLY EMPTY"
    POOR = "POOR"
    WEAK = "WEAK"
    PARTIAL = "PARTIAL"
    MODERATE = "MODERATE"
    GOOD = "GOOD"
    STRONG = "STRONG"


class FindingType(str, Enum):
    GOOD = "Good"
    CRITICAL = "Critical"
    MISSING = "Missing"
    ISSUE = "Issue"
    NOTE = "Note"


class ReportSeverity(str, Enum):
    """Severity wording used in detailed findings."""

    CRITICAL = "CRITICAL"
    MISSING = "MISSING"
    ADD = "ADD"
    PARTIAL = "PARTIAL"
    WORKING = "WORKING"


SEVERITY_MAP: dict[FindingSeverity, ReportSeverity] = {
    FindingSeverity.CRITICAL: ReportSeverity.CRITICAL,
    FindingSeverity.HIGH: ReportSeverity.MISSING,
    FindingSeverity.MEDIUM: ReportSeverity.ADD,
    FindingSeverity.LOW: ReportSeverity.PARTIAL,
    FindingSeverity.INFO: ReportSeverity.WORKING,
}


@dataclass
class ScorecardItem:
    """One scorecard row."""

    id: int
    criterion: str
    score: int
    status: ScoreStatus
    key_findings: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "criterion": self.criterion,
            "score": self.score,
            "status": self.status.value,
            "key_findings": self.key_findings,
        }


@dataclass
class DetailedFinding:
    type: FindingType
    description: str
    severity: ReportSeverity

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "description": self.description,
            "severity": self.severity.value,
        }


@dataclass
class CriterionDetail:
    """All findings for one criterion, deduplicated."""

    id: int
    name: str
    findings: list[DetailedFinding] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "findings": [f.to_dict() for f in self.findings],
        }


def display_name(label: str) -> str:
    return DISPLAY_NAMES.get(label, label)


def score_to_status(score: int) -> ScoreStatus:
    """Map a 0-10 score to its word band."""
    if score <= 0:
        return ScoreStatus.MISSING
    if score == 1:
        return ScoreStatus.NEARLY_EMPTY
    if score == 2:
        return ScoreStatus.POOR
    if score == 3:
        return ScoreStatus.WEAK
    if score <= 5:
        return ScoreStatus.PARTIAL
    if score == 6:
        return ScoreStatus.MODERATE
    if score == 7:
        return ScoreStatus.GOOD
    return ScoreStatus.STRONG


def map_finding_severity(severity: FindingSeverity) -> ReportSeverity:
    return SEVERITY_MAP.get(severity, ReportSeverity.PARTIAL)


def map_finding_type(severity: FindingSeverity, has_fix: bool) -> FindingType:
    if severity == FindingSeverity.INFO:
        return FindingType.GOOD
    if severity == FindingSeverity.CRITICAL:
        return FindingType.CRITICAL
    if severity == FindingSeverity.HIGH:
        return FindingType.MISSING
    return FindingType.ISSUE if has_fix else FindingType.NOTE


def _key_findings(result: CriterionResult) -> str:
    parts = [f.detail for f in result.findings[:KEY_FINDINGS_LIMIT]]
    if not parts:
        return ""
    text = ". ".join(parts)
    return text if text.endswith(".") else text + "."


def build_scorecard(results: Iterable[CriterionResult]) -> list[ScorecardItem]:
    """
    One row per criterion, numbered from 1 in result order.

    Key findings join the first three finding details into sentences.
    """
    return [
        ScorecardItem(
            id=index,
            criterion=display_name(result.criterion_label),
            score=result.score,
            status=score_to_status(result.score),
            key_findings=_key_findings(result),
        )
        for index, result in enumerate(results, start=1)
    ]


def build_detailed_findings(results: Iterable[CriterionResult]) -> list[CriterionDetail]:
    """
    Every finding of every criterion in report wording.

    Findings with a fix carry it in the description. Duplicate descriptions
    are dropped, and a criterion left with fewer than two findings gets one
    generic line matching its score.
    """
    details = []
    for index, result in enumerate(results, start=1):
        name = display_name(result.criterion_label)
        findings: list[DetailedFinding] = []
        seen: set[str] = set()
        for finding in result.findings:
            description = f"{finding.detail}. {finding.fix}" if finding.fix else finding.detail
            if description in seen:
                continue
            seen.add(description)
            findings.append(
                DetailedFinding(
                    type=map_finding_type(finding.severity, bool(finding.fix)),
                    description=description,
                    severity=map_finding_severity(finding.severity),
                )
            )

        if len(findings) < MIN_DETAILED_FINDINGS:
            if result.score >= GOOD_SCORE:
                findings.append(
                    DetailedFinding(
                        type=FindingType.GOOD,
                        description=f"{name} is well-implemented for AI engine visibility.",
                        severity=ReportSeverity.WORKING,
                    )
                )
            else:
                findings.append(
                    DetailedFinding(
                        type=FindingType.NOTE,
                        description=f"{name} needs improvement - review specific issues above.",
                        severity=ReportSeverity.PARTIAL,
                    )
                )

        details.append(CriterionDetail(id=index, name=name, findings=findings))
    return details
