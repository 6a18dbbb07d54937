"""Application services - proposal lifecycle, discussion, execution."""

from forum_engine.application.services.discussion_scheduler_service import (
    DiscussionSchedulerService,
    SpeakDecision,
    SpeakReason,
    should_speak,
)
from forum_engine.application.services.execution_coordinator_service import (
    ExecutionCoordinatorService,
    ExecutionOutcome,
    summarize,
)
from forum_engine.application.services.proposal_lifecycle_service import (
    ProposalLifecycleService,
    VoteOutcome,
)

__all__ = [
    "DiscussionSchedulerService",
    "ExecutionCoordinatorService",
    "ExecutionOutcome",
    "ProposalLifecycleService",
    "SpeakDecision",
    "SpeakReason",
    "VoteOutcome",
    "should_speak",
    "summarize",
]
