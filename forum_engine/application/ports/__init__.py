"""Application ports - contracts for external collaborators."""

from forum_engine.application.ports.agent_directory import AgentDirectoryProtocol
from forum_engine.application.ports.execution_repository import (
    ExecutionRepositoryProtocol,
)
from forum_engine.application.ports.forum_metrics import ForumMetricsProtocol
from forum_engine.application.ports.forum_repository import ForumRepositoryProtocol
from forum_engine.application.ports.message_log import MessageLogProtocol
from forum_engine.application.ports.proposal_repository import (
    ProposalRepositoryProtocol,
)
from forum_engine.application.ports.submission_capability import (
    SubmissionCapabilityProtocol,
)
from forum_engine.application.ports.time_authority import TimeAuthorityProtocol
from forum_engine.application.ports.vote_store import VoteStoreProtocol

__all__ = [
    "AgentDirectoryProtocol",
    "ExecutionRepositoryProtocol",
    "ForumMetricsProtocol",
    "ForumRepositoryProtocol",
    "MessageLogProtocol",
    "ProposalRepositoryProtocol",
    "SubmissionCapabilityProtocol",
    "TimeAuthorityProtocol",
    "VoteStoreProtocol",
]
