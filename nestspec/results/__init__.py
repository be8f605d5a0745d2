"""Canonical result tree for repeated spec executions.

Exports the collector that folds executed runs into one deduplicated tree,
the per-spec result node, and the failure-message merge helper.
"""

from __future__ import annotations

from .collector import ResultCollector, ResultVisitor, SpecResult
from .merge import merge_errors

__all__ = [
    # Collector
    "ResultCollector",
    "ResultVisitor",
    "SpecResult",
    # Helpers
    "merge_errors",
]
