"""Rule engine shared by every criterion evaluator.

A criterion is declared as data: gates that end evaluation early when input
is missing, then an ordered list of rules. Each rule measures one signal
from the SiteView and maps it to an Outcome (score delta plus an optional
finding). The engine sums deltas, applies an optional cap, clamps to
[0, 10] and derives status and fix priority from the final score.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from aeorank.models import AuditStatus, CriterionResult, Finding, FindingSeverity, Priority
from aeorank.scoring.context import SiteView

logger = structlog.get_logger(__name__)

Measure = Callable[[SiteView], Any]
Predicate = Callable[[SiteView], bool]
Detail = str | Callable[[Any], str]

# Status bands
PASS_THRESHOLD = 7
PARTIAL_THRESHOLD = 4

MISSING_HOMEPAGE_DETAIL = "Could not fetch homepage"


def status_for_score(score: int) -> AuditStatus:
    if score >= PASS_THRESHOLD:
        return AuditStatus.PASS
    if score >= PARTIAL_THRESHOLD:
        return AuditStatus.PARTIAL
    return AuditStatus.FAIL


@dataclass(frozen=True)
class Outcome:
    """Score change and finding produced by one branch of a rule.

    ``delta`` and ``detail`` may be callables of the measured value; string
    details are formatted with ``{v}`` bound to it.
    """

    delta: int | Callable[[Any], int] = 0
    severity: FindingSeverity | None = None
    detail: Detail | None = None
    fix: str | None = None

    def score(self, value: Any) -> int:
        return self.delta(value) if callable(self.delta) else self.delta

    def finding(self, value: Any) -> Finding | None:
        if self.severity is None or self.detail is None:
            return None
        detail = self.detail(value) if callable(self.detail) else self.detail.format(v=value)
        return Finding(severity=self.severity, detail=detail, fix=self.fix)


CRITICAL = FindingSeverity.CRITICAL
HIGH = FindingSeverity.HIGH
MEDIUM = FindingSeverity.MEDIUM
LOW = FindingSeverity.LOW


def info(detail: Detail, delta: int | Callable[[Any], int] = 0) -> Outcome:
    return Outcome(delta=delta, severity=FindingSeverity.INFO, detail=detail)


def issue(
    severity: FindingSeverity,
    detail: Detail,
    fix: str | None = None,
    delta: int | Callable[[Any], int] = 0,
) -> Outcome:
    return Outcome(delta=delta, severity=severity, detail=detail, fix=fix)


class Rule:
    """Base rule: evaluate against a view, returning (delta, findings)."""

    when: Predicate | None = None

    def apply(self, view: SiteView) -> tuple[int, list[Finding]]:
        raise NotImplementedError


@dataclass(frozen=True)
class Check(Rule):
    """Boolean signal: ``hit`` when the measured value is truthy, else ``miss``."""

    measure: Measure
    hit: Outcome
    miss: Outcome | None = None
    when: Predicate | None = None

    def apply(self, view: SiteView) -> tuple[int, list[Finding]]:
        value = self.measure(view)
        outcome = self.hit if value else self.miss
        if outcome is None:
            return 0, []
        finding = outcome.finding(value)
        return outcome.score(value), [finding] if finding else []


@dataclass(frozen=True)
class Tiers(Rule):
    """Numeric signal: the first band whose minimum the value reaches wins."""

    measure: Measure
    bands: Sequence[tuple[float, Outcome]]
    otherwise: Outcome | None = None
    when: Predicate | None = None
    key: Callable[[Any], float] | None = None

    def apply(self, view: SiteView) -> tuple[int, list[Finding]]:
        value = self.measure(view)
        amount = self.key(value) if self.key else value
        outcome = next((o for minimum, o in self.bands if amount >= minimum), self.otherwise)
        if outcome is None:
            return 0, []
        finding = outcome.finding(value)
        return outcome.score(value), [finding] if finding else []


@dataclass(frozen=True)
class Custom(Rule):
    """Escape hatch for signals that emit several findings at once."""

    evaluate: Callable[[SiteView], tuple[int, list[Finding]]]
    when: Predicate | None = None

    def apply(self, view: SiteView) -> tuple[int, list[Finding]]:
        return self.evaluate(view)


def check(measure: Measure, hit: Outcome, miss: Outcome | None = None, when: Predicate | None = None) -> Check:
    return Check(measure=measure, hit=hit, miss=miss, when=when)


def tiers(
    measure: Measure,
    bands: Sequence[tuple[float, Outcome]],
    otherwise: Outcome | None = None,
    when: Predicate | None = None,
    key: Callable[[Any], float] | None = None,
) -> Tiers:
    return Tiers(measure=measure, bands=tuple(bands), otherwise=otherwise, when=when, key=key)


@dataclass(frozen=True)
class Gate:
    """Early exit: when ``blocked`` holds, return a fixed score and finding.

    The finding detail is formatted with the SiteView as its value.
    """

    blocked: Predicate
    score: int
    finding: Outcome
    priority: Priority
    status: AuditStatus | None = None  # default: derived from score


@dataclass(frozen=True)
class PriorityBands:
    """``at_or_above`` when score >= threshold, else ``below``."""

    threshold: int
    at_or_above: Priority
    below: Priority

    def for_score(self, score: int) -> Priority:
        return self.at_or_above if score >= self.threshold else self.below


@dataclass(frozen=True)
class CriterionSpec:
    """Declarative description of one criterion."""

    id: str
    label: str
    rules: Sequence[Rule]
    priority: PriorityBands
    base: int = 0
    gates: Sequence[Gate] = field(default_factory=tuple)
    cap: Callable[[SiteView], int | None] | None = None


def requires_homepage(priority: Priority, detail: str = MISSING_HOMEPAGE_DETAIL) -> Gate:
    """Gate reporting ``not_found`` when the homepage could not be fetched."""
    return Gate(
        blocked=lambda view: not view.has_homepage,
        score=0,
        finding=issue(FindingSeverity.CRITICAL, detail),
        priority=priority,
        status=AuditStatus.NOT_FOUND,
    )


def run_criterion(spec: CriterionSpec, view: SiteView) -> CriterionResult:
    """Evaluate a criterion against a site view."""
    for gate in spec.gates:
        if gate.blocked(view):
            finding = gate.finding.finding(view)
            return CriterionResult(
                criterion=spec.id,
                criterion_label=spec.label,
                score=gate.score,
                status=gate.status or status_for_score(gate.score),
                findings=[finding] if finding else [],
                fix_priority=gate.priority,
            )

    score = spec.base
    findings: list[Finding] = []
    for rule in spec.rules:
        if rule.when is not None and not rule.when(view):
            continue
        delta, produced = rule.apply(view)
        score += delta
        findings.extend(produced)

    if spec.cap is not None:
        limit = spec.cap(view)
        if limit is not None:
            score = min(score, limit)

    score = max(0, min(10, score))
    return CriterionResult(
        criterion=spec.id,
        criterion_label=spec.label,
        score=score,
        status=status_for_score(score),
        findings=findings,
        fix_priority=spec.priority.for_score(score),
    )
