"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from admission_queue.observability.logging import lane_context, setup_logging
from admission_queue.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from admission_queue.observability.tracing import create_span, get_tracer, setup_tracing

__all__ = [
    "setup_logging",
    "lane_context",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
    "create_span",
]
