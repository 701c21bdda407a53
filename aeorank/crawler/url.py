"""URL and host helpers shared by acquisition and discovery."""

import re
from urllib.parse import urlparse

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_PORT_RE = re.compile(r":[0-9]+$")

# Second-level registries treated as part of the TLD when deriving a brand
TWO_PART_TLDS = frozenset(["co.uk", "com.au", "co.jp", "com.br", "co.nz", "co.in"])


def strip_www(host: str) -> str:
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def extract_domain(url: str) -> str:
    """Bare host of a URL: no scheme, path, port or ``www.``, lowercased."""
    host = _SCHEME_RE.sub("", url.strip())
    host = re.split(r"[/?#]", host, maxsplit=1)[0]
    host = _PORT_RE.sub("", host)
    return strip_www(host)


def extract_brand_name(domain: str) -> str:
    """Domain without its TLD (``acme.co.uk`` and ``acme.com`` are both ``acme``)."""
    parts = domain.split(".")
    if ".".join(parts[-2:]) in TWO_PART_TLDS and len(parts) > 2:
        return ".".join(parts[:-2])
    return ".".join(parts[:-1]) if len(parts) > 1 else domain


def is_same_brand(candidate: str, domain: str) -> bool:
    """Check whether ``candidate`` is the audited domain or a sibling of its brand."""
    original = strip_www(domain)
    return (
        candidate == original
        or candidate == f"www.{original}"
        or extract_brand_name(candidate) == extract_brand_name(original)
    )


def site_path(url: str, domain: str) -> str | None:
    """Path of ``url`` when it belongs to ``domain`` and is not the root, else None."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.hostname or strip_www(parsed.hostname) != strip_www(domain):
        return None
    if parsed.path in ("", "/"):
        return None
    return parsed.path


def path_depth(path: str) -> int:
    """Number of non-empty path segments."""
    return len([segment for segment in path.split("/") if segment])
