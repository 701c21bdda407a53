"""HTML text helpers shared by the classifier, evaluators and reviews."""

import re
from functools import lru_cache

from bs4 import BeautifulSoup

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")
_HEAD_RE = re.compile(r"<head[\s>]")

# Leading slice inspected when deciding whether a body is an HTML page
CATCH_ALL_PREFIX_CHARS = 200


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def is_html_response(text: str) -> bool:
    """Check whether a body looks like an HTML document.

    Servers with catch-all routes answer ``/llms.txt`` and friends with their
    HTML shell and status 200; such bodies must not count as the resource.
    """
    head = text.lstrip()[:CATCH_ALL_PREFIX_CHARS].lower()
    return (
        head.startswith("<!doctype html")
        or head.startswith("<html")
        or _HEAD_RE.search(head) is not None
    )


@lru_cache(maxsize=64)
def tag_text(html: str) -> str:
    """Strip tags with a regex, keeping script and style contents."""
    return collapse_whitespace(_TAG_RE.sub(" ", html))


@lru_cache(maxsize=16)
def visible_text(html: str) -> str:
    """Text a reader would see: scripts and styles dropped, whitespace collapsed."""
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    return collapse_whitespace(soup.get_text(" "))


@lru_cache(maxsize=16)
def parse_html(html: str) -> BeautifulSoup:
    """Parse HTML once for read-only queries."""
    return BeautifulSoup(html, "html.parser")


def json_ld_blocks(html: str) -> list[str]:
    """Raw bodies of every ``application/ld+json`` script block."""
    soup = parse_html(html)
    blocks = []
    for script in soup.find_all("script", attrs={"type": re.compile(r"application/ld\+json", re.I)}):
        body = script.string if script.string is not None else script.get_text()
        blocks.append(body.strip())
    return blocks


def heading_texts(html: str, levels: str = "1-6") -> list[str]:
    """Text of every heading of the given levels, in document order.

    Inner tags are removed without a separator and whitespace is kept as
    served, so ``<h2>How<br>it works</h2>`` reads "Howit works".
    """
    pattern = re.compile(rf"<h[{levels}][^>]*>([\s\S]*?)</h[{levels}]>", re.I)
    return [_TAG_RE.sub("", inner) for inner in pattern.findall(html)]


def stripped_text(html: str) -> str:
    """Strip tags without inserting separators, as a naive text extractor would."""
    return collapse_whitespace(_TAG_RE.sub("", html))
