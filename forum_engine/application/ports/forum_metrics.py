"""Forum metrics port.

Services accept ``None`` for this port when metrics are not wanted.
"""

from __future__ import annotations

from typing import Protocol


class ForumMetricsProtocol(Protocol):
    """Protocol for recording engine metrics."""

    def record_vote(self, choice: str) -> None: ...

    def record_verdict(self, result: str | None, reason: str | None) -> None: ...

    def record_proposal_transition(self, status: str) -> None: ...

    def record_discussion_decision(self, reason: str) -> None: ...

    def record_execution_attempt(self, action_kind: str) -> None: ...

    def record_execution_result(
        self, action_kind: str, status: str, duration_seconds: float
    ) -> None: ...
