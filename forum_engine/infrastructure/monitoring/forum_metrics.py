"""Prometheus metrics for the forum engine.

Implements ForumMetricsProtocol. Pass a private CollectorRegistry in
tests to keep metric state isolated between cases.
"""

import os
import threading

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

from forum_engine.application.ports.forum_metrics import ForumMetricsProtocol

# Content type for Prometheus metrics endpoint
METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

# Thread lock for singleton initialization
_collector_lock = threading.Lock()

# Submission duration buckets (100ms to 2 minutes, retries included)
EXECUTION_DURATION_BUCKETS = (0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0)

# Label value used when a verdict has no result or reason
NONE_LABEL = "none"


class PrometheusForumMetrics(ForumMetricsProtocol):
    """Collects forum engine metrics in a Prometheus registry.

    Attributes:
        votes_total: Votes recorded, by choice.
        verdicts_total: Quorum evaluations, by result and reason.
        proposal_transitions_total: Proposal status changes, by target status.
        discussion_decisions_total: Scheduling decisions, by reason.
        execution_attempts_total: Capability invocations, by action kind.
        execution_results_total: Final execution results, by action and status.
        execution_duration_seconds: Submission time including retries.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")

        self.votes_total = Counter(
            name="forum_votes_total",
            documentation="Votes recorded",
            labelnames=["environment", "choice"],
            registry=self._registry,
        )
        self.verdicts_total = Counter(
            name="forum_verdicts_total",
            documentation="Quorum evaluations by outcome",
            labelnames=["environment", "result", "reason"],
            registry=self._registry,
        )
        self.proposal_transitions_total = Counter(
            name="forum_proposal_transitions_total",
            documentation="Proposal status transitions by target status",
            labelnames=["environment", "status"],
            registry=self._registry,
        )
        self.discussion_decisions_total = Counter(
            name="forum_discussion_decisions_total",
            documentation="Discussion scheduling decisions by reason",
            labelnames=["environment", "reason"],
            registry=self._registry,
        )
        self.execution_attempts_total = Counter(
            name="forum_execution_attempts_total",
            documentation="Submission capability invocations",
            labelnames=["environment", "action"],
            registry=self._registry,
        )
        self.execution_results_total = Counter(
            name="forum_execution_results_total",
            documentation="Final execution results",
            labelnames=["environment", "action", "status"],
            registry=self._registry,
        )
        self.execution_duration_seconds = Histogram(
            name="forum_execution_duration_seconds",
            documentation="Execution duration in seconds, retries included",
            labelnames=["environment", "action"],
            buckets=EXECUTION_DURATION_BUCKETS,
            registry=self._registry,
        )

    def record_vote(self, choice: str) -> None:
        self.votes_total.labels(environment=self._environment, choice=choice).inc()

    def record_verdict(self, result: str | None, reason: str | None) -> None:
        self.verdicts_total.labels(
            environment=self._environment,
            result=result or NONE_LABEL,
            reason=reason or NONE_LABEL,
        ).inc()

    def record_proposal_transition(self, status: str) -> None:
        self.proposal_transitions_total.labels(
            environment=self._environment, status=status
        ).inc()

    def record_discussion_decision(self, reason: str) -> None:
        self.discussion_decisions_total.labels(
            environment=self._environment, reason=reason
        ).inc()

    def record_execution_attempt(self, action_kind: str) -> None:
        self.execution_attempts_total.labels(
            environment=self._environment, action=action_kind
        ).inc()

    def record_execution_result(
        self, action_kind: str, status: str, duration_seconds: float
    ) -> None:
        """Record a final execution result and its duration.

        Args:
            action_kind: Action kind value (swap, addLiquidity, ...).
            status: Final execution status value.
            duration_seconds: Time spent submitting, retries included.
        """
        self.execution_results_total.labels(
            environment=self._environment, action=action_kind, status=status
        ).inc()
        self.execution_duration_seconds.labels(
            environment=self._environment, action=action_kind
        ).observe(duration_seconds)

    def get_registry(self) -> CollectorRegistry:
        """Get the Prometheus registry for exposition."""
        return self._registry


# Global singleton instance
_forum_metrics: PrometheusForumMetrics | None = None


def get_forum_metrics() -> PrometheusForumMetrics:
    """Get or create the process-wide metrics instance (thread-safe)."""
    global _forum_metrics
    if _forum_metrics is None:
        with _collector_lock:
            # Double-checked locking
            if _forum_metrics is None:
                _forum_metrics = PrometheusForumMetrics()
    return _forum_metrics


def generate_metrics() -> bytes:
    """Generate Prometheus exposition output for the global instance."""
    return generate_latest(get_forum_metrics().get_registry())


def reset_forum_metrics() -> None:
    """Reset the global instance (for testing)."""
    global _forum_metrics
    with _collector_lock:
        _forum_metrics = None
