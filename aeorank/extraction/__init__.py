"""Extraction package for HTML text, signals, and page reviews."""

# Lazy imports to avoid requiring all dependencies at import time
# Use explicit imports when needed:
# from aeorank.extraction.html import visible_text, json_ld_blocks
# from aeorank.extraction.spa import is_spa_shell, classify_rendering
# from aeorank.extraction.page_review import analyze_page, analyze_all_pages

__all__ = [
    "visible_text",
    "json_ld_blocks",
    "heading_texts",
    "is_spa_shell",
    "classify_rendering",
    "RenderingClassification",
    "PageIssue",
    "PageReview",
    "analyze_page",
    "analyze_all_pages",
]
