"""Hijacked and parked domain detection.

Pure classification of raw homepage HTML. A domain that redirects to an
unrelated brand, or that serves a for-sale placeholder, is not worth auditing.
"""

import re
from dataclasses import dataclass

from aeorank.crawler.url import extract_domain, is_same_brand

# Only the start of the homepage is inspected
SNIPPET_CHARS = 8192

PARKING_PATHS = frozenset(["/lander", "/parking", "/park", "/sedoparking"])

# Hostnames of parking/for-sale services found in page scripts, iframes or links
PARKING_SERVICE_DOMAINS = [
    "sedoparking.com",
    "parkingcrew.net",
    "bodis.com",
    "dsparking.com",
    "hugedomains.com",
    "afternic.com",
    "dan.com",
    "undeveloped.com",
    "domainmarket.com",
    "sav.com",
    "domaincontrol.com",
    "above.com",
    "domainlore.com",
    "domainnamesales.com",
    "brandbucket.com",
    "squadhelp.com",
    "godaddy.com/domainsearch",
]

PARKING_TEXT_PATTERNS = [
    re.compile(r"\bbuy this domain\b", re.IGNORECASE),
    re.compile(r"\bdomain is for sale\b", re.IGNORECASE),
    re.compile(r"\bthis domain may be for sale\b", re.IGNORECASE),
    re.compile(r"\bdomain for sale\b", re.IGNORECASE),
    re.compile(r"\bthis domain name is available\b", re.IGNORECASE),
    re.compile(r"\bparked by", re.IGNORECASE),
    re.compile(r"\bthis page is parked", re.IGNORECASE),
    re.compile(r"\bdomain has expired", re.IGNORECASE),
    re.compile(r"\bthis domain has been registered", re.IGNORECASE),
    re.compile(r"\bmake an offer on this domain\b", re.IGNORECASE),
    re.compile(r"\bget this domain\b", re.IGNORECASE),
    re.compile(r"\bacquire this domain\b", re.IGNORECASE),
]

_RELATIVE_JS_REDIRECT_RE = re.compile(
    r"window\.location\.(replace|assign|href)\s*[=(]\s*['\"](/[^'\"]*)['\"]", re.IGNORECASE
)
_ABSOLUTE_JS_REDIRECT_RE = re.compile(
    r"window\.location\.(replace|assign|href)\s*[=(]\s*['\"]https?://([^'\"]+)['\"]",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ParkedDomainResult:
    is_parked: bool
    reason: str | None = None


def detect_cross_domain_redirect(domain: str, final_url: str | None) -> str | None:
    """Return the foreign domain an HTTP redirect chain ended on, if any."""
    if not final_url:
        return None
    final_domain = extract_domain(final_url)
    if is_same_brand(final_domain, domain):
        return None
    return final_domain


def detect_js_redirect(html: str, domain: str) -> str | None:
    """Return the foreign domain a ``window.location`` redirect points to, if any."""
    match = _ABSOLUTE_JS_REDIRECT_RE.search(html[:SNIPPET_CHARS])
    if not match:
        return None
    target = extract_domain("https://" + match.group(2))
    if is_same_brand(target, domain):
        return None
    return target


def detect_hijack(domain: str, html: str, final_url: str | None) -> str | None:
    """Cross-domain redirect target, HTTP redirects taking precedence over JS ones."""
    return detect_cross_domain_redirect(domain, final_url) or detect_js_redirect(html, domain)


def _parking_redirect(snippet: str) -> str | None:
    match = _RELATIVE_JS_REDIRECT_RE.search(snippet)
    if not match:
        return None
    path = re.sub(r"[?#].*", "", match.group(2).lower())
    if path in PARKING_PATHS:
        return f"js-redirect to {match.group(2)}"
    return None


def _parking_service(snippet: str) -> str | None:
    lower = snippet.lower()
    for service in PARKING_SERVICE_DOMAINS:
        if service in lower:
            return f"parking service: {service}"
    return None


def _parking_text(snippet: str) -> str | None:
    for pattern in PARKING_TEXT_PATTERNS:
        match = pattern.search(snippet)
        if match:
            return f"parking text: {match.group(0)}"
    return None


def detect_parked_domain(html: str) -> ParkedDomainResult:
    """Classify a homepage as parked or for sale. The first matching signal wins."""
    snippet = html[:SNIPPET_CHARS]
    for detector in (_parking_redirect, _parking_service, _parking_text):
        reason = detector(snippet)
        if reason:
            return ParkedDomainResult(is_parked=True, reason=reason)
    return ParkedDomainResult(is_parked=False)
