"""Monitoring infrastructure - Prometheus metrics."""

from forum_engine.infrastructure.monitoring.forum_metrics import (
    METRICS_CONTENT_TYPE,
    PrometheusForumMetrics,
    generate_metrics,
    get_forum_metrics,
    reset_forum_metrics,
)

__all__ = [
    "METRICS_CONTENT_TYPE",
    "PrometheusForumMetrics",
    "generate_metrics",
    "get_forum_metrics",
    "reset_forum_metrics",
]
