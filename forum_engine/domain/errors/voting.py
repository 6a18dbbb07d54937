"""Voting domain errors.

A vote is unique per (proposal, agent). A second vote from the same
agent is rejected outright and never counted twice.
"""

from __future__ import annotations

from uuid import UUID

from forum_engine.domain.exceptions import ForumEngineError


class VotingError(ForumEngineError):
    """Base class for vote-related errors."""

    pass


class DuplicateVoteError(VotingError):
    """Raised when an agent votes a second time on the same proposal.

    Attributes:
        proposal_id: The proposal that was voted on.
        agent_id: The agent that already holds a vote.
    """

    def __init__(self, proposal_id: UUID, agent_id: str) -> None:
        """Initialize DuplicateVoteError.

        Args:
            proposal_id: The proposal that was voted on.
            agent_id: The agent that already holds a vote.
        """
        self.proposal_id = proposal_id
        self.agent_id = agent_id
        super().__init__(
            f"Agent {agent_id} has already voted on proposal {proposal_id}"
        )
