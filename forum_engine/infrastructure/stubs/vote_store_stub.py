"""In-memory vote store.

Not suitable for production use. Uniqueness per (proposal, agent) is
enforced under a lock to mimic a database unique constraint.
"""

from __future__ import annotations

import asyncio
from uuid import UUID

from forum_engine.application.ports.vote_store import VoteStoreProtocol
from forum_engine.domain.errors import DuplicateVoteError
from forum_engine.domain.models.vote import Vote


class VoteStoreStub(VoteStoreProtocol):
    """In-memory implementation of VoteStoreProtocol.

    Attributes:
        _votes: Votes per proposal in append order.
    """

    def __init__(self) -> None:
        self._votes: dict[UUID, list[Vote]] = {}
        self._lock = asyncio.Lock()

    async def append_vote(self, vote: Vote) -> Vote:
        async with self._lock:
            existing = self._votes.setdefault(vote.proposal_id, [])
            if any(v.agent_id == vote.agent_id for v in existing):
                raise DuplicateVoteError(vote.proposal_id, vote.agent_id)
            existing.append(vote)
            return vote

    async def has_voted(self, proposal_id: UUID, agent_id: str) -> bool:
        return any(v.agent_id == agent_id for v in self._votes.get(proposal_id, []))

    async def list_votes(self, proposal_id: UUID) -> list[Vote]:
        return list(self._votes.get(proposal_id, []))

    async def retract_vote(self, proposal_id: UUID, agent_id: str) -> bool:
        async with self._lock:
            existing = self._votes.get(proposal_id, [])
            kept = [v for v in existing if v.agent_id != agent_id]
            if len(kept) == len(existing):
                return False
            self._votes[proposal_id] = kept
            return True

    def clear(self) -> None:
        """Clear all votes (for testing)."""
        self._votes.clear()
