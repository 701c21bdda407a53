"""Tests for audit exceptions."""

import pytest

from aeorank.exceptions import (
    AeoRankError,
    AuditAbortedError,
    HijackedDomainError,
    ParkedDomainError,
    UnreachableDomainError,
)


def test_base_error() -> None:
    """Test base AeoRankError."""
    error = AeoRankError(message="Test error", code="test_error")
    assert error.message == "Test error"
    assert error.code == "test_error"
    assert error.details == {}
    assert str(error) == "Test error"


def test_unreachable_error() -> None:
    """Test UnreachableDomainError."""
    error = UnreachableDomainError("example.com")
    assert error.code == "unreachable"
    assert error.domain == "example.com"
    assert "example.com" in error.message


def test_hijacked_error() -> None:
    """Test HijackedDomainError."""
    error = HijackedDomainError("example.com", "spam.net")
    assert error.code == "hijacked"
    assert error.message == "example.com redirects to spam.net"
    assert error.details == {"domain": "example.com", "redirected_to": "spam.net"}


def test_parked_error() -> None:
    """Test ParkedDomainError."""
    error = ParkedDomainError("example.com", "parking service: sedoparking.com")
    assert error.code == "parked"
    assert error.reason == "parking service: sedoparking.com"


def test_to_dict() -> None:
    """Test error serialisation."""
    assert ParkedDomainError("example.com", "parked").to_dict() == {
        "error": "parked",
        "message": "example.com appears to be parked (parked)",
        "details": {"domain": "example.com", "reason": "parked"},
    }


@pytest.mark.parametrize(
    "error",
    [
        UnreachableDomainError("example.com"),
        HijackedDomainError("example.com", "spam.net"),
        ParkedDomainError("example.com", "parked"),
    ],
)
def test_aborted_hierarchy(error: AeoRankError) -> None:
    """Test every abort reason is an AuditAbortedError."""
    assert isinstance(error, AuditAbortedError)
    assert isinstance(error, AeoRankError)
