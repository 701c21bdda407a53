"""Audit exceptions.

Only outcomes that make an audit meaningless are raised. Missing or broken
secondary resources are represented as absent documents and scored, never
raised.
"""

from typing import Any


class AeoRankError(Exception):
    """Base exception for AEORank."""

    def __init__(
        self,
        message: str,
        code: str = "error",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class AuditAbortedError(AeoRankError):
    """The target cannot be audited."""


class UnreachableDomainError(AuditAbortedError):
    """Neither HTTPS nor HTTP returned a usable homepage."""

    def __init__(self, domain: str):
        super().__init__(
            message=f"Could not reach {domain} via HTTPS or HTTP",
            code="unreachable",
            details={"domain": domain},
        )
        self.domain = domain


class HijackedDomainError(AuditAbortedError):
    """The homepage redirects to an unrelated domain."""

    def __init__(self, domain: str, redirected_to: str):
        super().__init__(
            message=f"{domain} redirects to {redirected_to}",
            code="hijacked",
            details={"domain": domain, "redirected_to": redirected_to},
        )
        self.domain = domain
        self.redirected_to = redirected_to


class ParkedDomainError(AuditAbortedError):
    """The homepage is a parked or for-sale placeholder."""

    def __init__(self, domain: str, reason: str):
        super().__init__(
            message=f"{domain} appears to be parked ({reason})",
            code="parked",
            details={"domain": domain, "reason": reason},
        )
        self.domain = domain
        self.reason = reason
