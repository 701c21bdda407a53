"""Shared data types for the acquisition and scoring engine."""

from dataclasses import dataclass, field, replace
from enum import Enum

from aeorank.extraction.html import is_html_response


class PageCategory(str, Enum):
    """What a fetched page represents within the site."""

    HOMEPAGE = "homepage"
    BLOG = "blog"
    ABOUT = "about"
    PRICING = "pricing"
    SERVICES = "services"
    CONTACT = "contact"
    TEAM = "team"
    RESOURCES = "resources"
    DOCS = "docs"
    CASES = "cases"
    CONTENT = "content"


class AuditStatus(str, Enum):
    """Status band of a criterion score."""

    PASS = "pass"
    PARTIAL = "partial"
    FAIL = "fail"
    NOT_FOUND = "not_found"


class FindingSeverity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class Priority(str, Enum):
    """Fix priority, P0 most urgent."""

    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


@dataclass
class FetchedDocument:
    """A fetched resource body with its HTTP status."""

    text: str
    status: int
    final_url: str | None = None
    category: PageCategory | None = None

    @property
    def ok(self) -> bool:
        return self.status == 200

    @property
    def is_html_catch_all(self) -> bool:
        """A 200 whose body is an HTML page (soft 404 / catch-all route)."""
        return self.status == 200 and is_html_response(self.text)

    def tagged(self, category: PageCategory) -> "FetchedDocument":
        return replace(self, category=category)

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "final_url": self.final_url,
            "category": self.category.value if self.category else None,
            "length": len(self.text),
        }


@dataclass
class DomainSnapshot:
    """Everything fetched for one audited domain.

    When ``redirected_to`` or ``parked_reason`` is set, no secondary
    documents are fetched and ``pages`` stays empty. After acquisition only
    ``pages`` is appended to (by multi-page discovery).
    """

    domain: str
    protocol: str | None = None
    homepage: FetchedDocument | None = None
    llms_txt: FetchedDocument | None = None
    robots_txt: FetchedDocument | None = None
    ai_txt: FetchedDocument | None = None
    sitemap_xml: FetchedDocument | None = None
    rss_feed: FetchedDocument | None = None
    faq_page: FetchedDocument | None = None
    redirected_to: str | None = None
    parked_reason: str | None = None
    pages: list[FetchedDocument] = field(default_factory=list)

    @property
    def base_url(self) -> str | None:
        if not self.protocol:
            return None
        return f"{self.protocol}://{self.domain}"

    @property
    def is_aborted(self) -> bool:
        return self.redirected_to is not None or self.parked_reason is not None

    def to_dict(self) -> dict:
        def _doc(doc: FetchedDocument | None) -> dict | None:
            return doc.to_dict() if doc else None

        return {
            "domain": self.domain,
            "protocol": self.protocol,
            "homepage": _doc(self.homepage),
            "llms_txt": _doc(self.llms_txt),
            "robots_txt": _doc(self.robots_txt),
            "ai_txt": _doc(self.ai_txt),
            "sitemap_xml": _doc(self.sitemap_xml),
            "rss_feed": _doc(self.rss_feed),
            "faq_page": _doc(self.faq_page),
            "redirected_to": self.redirected_to,
            "parked_reason": self.parked_reason,
            "pages": [p.to_dict() for p in self.pages],
        }


@dataclass
class Finding:
    """A single observation attached to a criterion result."""

    severity: FindingSeverity
    detail: str
    fix: str | None = None

    def to_dict(self) -> dict:
        data = {"severity": self.severity.value, "detail": self.detail}
        if self.fix:
            data["fix"] = self.fix
        return data


@dataclass
class CriterionResult:
    """Score and findings for one criterion."""

    criterion: str
    criterion_label: str
    score: int  # 0-10
    status: AuditStatus
    findings: list[Finding] = field(default_factory=list)
    fix_priority: Priority = Priority.P2

    def __post_init__(self) -> None:
        self.score = max(0, min(10, int(self.score)))

    def to_dict(self) -> dict:
        return {
            "criterion": self.criterion,
            "criterion_label": self.criterion_label,
            "score": self.score,
            "status": self.status.value,
            "findings": [f.to_dict() for f in self.findings],
            "fix_priority": self.fix_priority.value,
        }
