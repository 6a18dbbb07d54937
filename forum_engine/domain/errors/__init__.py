"""Domain errors for the forum engine.

Validation failures (duplicate votes, invalid transitions, expiry) are
raised synchronously and never retried. Verdict outcomes such as
insufficient participation are NOT errors; see
forum_engine.domain.models.consensus.
"""

from forum_engine.domain.errors.execution import (
    ExecutionError,
    NoExecutorError,
    UnknownActionError,
)
from forum_engine.domain.errors.forum import (
    ForumError,
    ForumNotActiveError,
    ForumNotFoundError,
    InvalidForumTransitionError,
    NotForumParticipantError,
)
from forum_engine.domain.errors.proposal import (
    InvalidProposalActionError,
    InvalidProposalStateError,
    ProposalAlreadyVotingError,
    ProposalError,
    ProposalExpiredError,
    ProposalNotFoundError,
)
from forum_engine.domain.errors.voting import DuplicateVoteError, VotingError

__all__ = [
    "DuplicateVoteError",
    "ExecutionError",
    "ForumError",
    "ForumNotActiveError",
    "ForumNotFoundError",
    "InvalidForumTransitionError",
    "InvalidProposalActionError",
    "InvalidProposalStateError",
    "NoExecutorError",
    "NotForumParticipantError",
    "ProposalAlreadyVotingError",
    "ProposalError",
    "ProposalExpiredError",
    "ProposalNotFoundError",
    "UnknownActionError",
    "VotingError",
]
