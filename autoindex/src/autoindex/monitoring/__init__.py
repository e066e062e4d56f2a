"""Monitoring infrastructure for metrics."""

from autoindex.monitoring.metrics import IndexingMetrics

__all__ = [
    "IndexingMetrics",
]
