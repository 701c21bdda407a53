"""Single-page-application shell detection.

A client-rendered page ships an empty mount point and a bundle; crawlers
that do not execute JavaScript see almost no text. These checks decide
whether a page should be re-rendered in a headless browser.
"""

import re
from dataclasses import dataclass

from aeorank.extraction.html import visible_text

# Visible text at or above this length means the page is never a shell
MIN_VISIBLE_TEXT_LENGTH = 500

_EMPTY_MOUNT_RE = re.compile(
    r"<div\s+id=[\"'](root|app|__next|__nuxt|__vue)[\"'][^>]*(?:/>|>\s*</div>)", re.I
)
_CRA_BUNDLE_RE = re.compile(r"src=[\"'][^\"']*/static/js/main\.[a-f0-9]+\.js[\"']", re.I)
_VITE_BUNDLE_RE = re.compile(r"src=[\"'][^\"']*/assets/index-[a-f0-9]+\.js[\"']", re.I)

SPA_INDICATORS: list[re.Pattern[str]] = [
    _EMPTY_MOUNT_RE,
    re.compile(r"__NEXT_DATA__"),
    re.compile(r"__NUXT__"),
    _CRA_BUNDLE_RE,
    _VITE_BUNDLE_RE,
    re.compile(r"data-reactroot", re.I),
    re.compile(r"ng-version", re.I),
    re.compile(
        r"<noscript>[^<]*(?:javascript|enable\s+js|requires?\s+javascript)[^<]*</noscript>", re.I
    ),
]

# (framework, marker) in precedence order
FRAMEWORK_MARKERS: list[tuple[str, re.Pattern[str]]] = [
    ("next", re.compile(r"__NEXT_DATA__")),
    ("nuxt", re.compile(r"__NUXT__")),
    ("vue", re.compile(r"<div\s+id=[\"']__vue[\"']", re.I)),
    ("angular", re.compile(r"ng-version", re.I)),
    ("react", re.compile(r"data-reactroot", re.I)),
    ("react", re.compile(r"<div\s+id=[\"'](?:root|app)[\"'][^>]*(?:/>|>\s*</div>)", re.I)),
    ("react", _CRA_BUNDLE_RE),
    ("vite", _VITE_BUNDLE_RE),
]


@dataclass(frozen=True)
class RenderingClassification:
    """How a page is rendered and by which framework, when recognisable."""

    method: str  # server, client-spa
    framework: str | None = None

    def to_dict(self) -> dict:
        return {"method": self.method, "framework": self.framework}


def is_spa_shell(html: str, min_text_length: int = MIN_VISIBLE_TEXT_LENGTH) -> bool:
    """Check whether a page is a JavaScript shell with little readable text."""
    if len(visible_text(html)) >= min_text_length:
        return False
    return any(pattern.search(html) for pattern in SPA_INDICATORS)


def classify_rendering(html: str) -> RenderingClassification:
    """Classify a raw page as server rendered or a client shell, naming the framework."""
    if not is_spa_shell(html):
        return RenderingClassification(method="server")
    for framework, marker in FRAMEWORK_MARKERS:
        if marker.search(html):
            return RenderingClassification(method="client-spa", framework=framework)
    return RenderingClassification(method="client-spa")
