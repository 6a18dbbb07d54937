"""Vote store port.

Votes are append-only. The store is the final arbiter of uniqueness per
(proposal, agent): ``append_vote`` must check and insert atomically.

The lifecycle appends a vote before it persists the proposal counters. If
that persist fails it calls ``retract_vote``, the only removal the store
needs to support.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from forum_engine.domain.models.vote import Vote


class VoteStoreProtocol(Protocol):
    """Protocol for vote persistence.

    Methods:
        append_vote: Atomically insert a vote unless the agent already voted
        has_voted: Check whether an agent holds a vote on a proposal
        list_votes: Votes for a proposal in append order
        retract_vote: Remove a vote whose counters were never persisted
    """

    async def append_vote(self, vote: Vote) -> Vote:
        """Append a vote.

        Args:
            vote: The vote to store.

        Returns:
            The stored vote.

        Raises:
            DuplicateVoteError: If (proposal_id, agent_id) already has a vote.
        """
        ...

    async def has_voted(self, proposal_id: UUID, agent_id: str) -> bool: ...

    async def list_votes(self, proposal_id: UUID) -> list[Vote]:
        """Return votes for a proposal in the order they were appended."""
        ...

    async def retract_vote(self, proposal_id: UUID, agent_id: str) -> bool:
        """Remove an agent's vote on a proposal.

        Returns:
            True if a vote was removed, False if none was stored.
        """
        ...
