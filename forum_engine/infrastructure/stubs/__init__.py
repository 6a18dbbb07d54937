"""In-memory stub adapters for development and testing."""

from forum_engine.infrastructure.stubs.agent_directory_stub import AgentDirectoryStub
from forum_engine.infrastructure.stubs.execution_repository_stub import (
    ExecutionRepositoryStub,
)
from forum_engine.infrastructure.stubs.forum_repository_stub import (
    ForumRepositoryStub,
)
from forum_engine.infrastructure.stubs.message_log_stub import MessageLogStub
from forum_engine.infrastructure.stubs.proposal_repository_stub import (
    ProposalRepositoryStub,
)
from forum_engine.infrastructure.stubs.submission_capability_stub import (
    ScriptedSubmissionCapability,
    SubmissionCall,
)
from forum_engine.infrastructure.stubs.vote_store_stub import VoteStoreStub

__all__ = [
    "AgentDirectoryStub",
    "ExecutionRepositoryStub",
    "ForumRepositoryStub",
    "MessageLogStub",
    "ProposalRepositoryStub",
    "ScriptedSubmissionCapability",
    "SubmissionCall",
    "VoteStoreStub",
]
