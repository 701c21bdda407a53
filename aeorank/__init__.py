"""AEORank: answer-engine-optimization audits for websites."""

__version__ = "1.0.0"

# Lazy imports to avoid pulling in the crawler stack at import time
# Use explicit imports when needed:
# from aeorank.audit import audit, AuditOptions, AuditResult

__all__ = ["__version__"]
