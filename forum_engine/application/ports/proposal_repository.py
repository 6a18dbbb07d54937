"""Proposal repository port.

Proposals are created by the API layer. Once voting begins the engine
owns the write path for status, counters and resolution time.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from forum_engine.domain.models.proposal import Proposal, ProposalStatus


class ProposalRepositoryProtocol(Protocol):
    """Protocol for proposal persistence.

    Methods:
        save_proposal: Store a new proposal
        get_proposal: Retrieve a proposal by ID
        update_proposal_status: Persist status plus counters/resolution fields
        list_by_status: List proposals in a status
    """

    async def save_proposal(self, proposal: Proposal) -> None: ...

    async def get_proposal(self, proposal_id: UUID) -> Proposal | None:
        """Retrieve a proposal by ID.

        Returns:
            The proposal if found, None otherwise.
        """
        ...

    async def update_proposal_status(
        self,
        proposal_id: UUID,
        status: ProposalStatus,
        *,
        agree_count: int | None = None,
        disagree_count: int | None = None,
        resolved_at: datetime | None = None,
    ) -> Proposal:
        """Persist a status change and any accompanying fields.

        Fields left as None are not changed. The lifecycle calls this
        after appending a vote and retracts the vote if it raises.

        Returns:
            The stored proposal after the update.

        Raises:
            ProposalNotFoundError: If the proposal does not exist.
        """
        ...

    async def list_by_status(self, status: ProposalStatus) -> list[Proposal]:
        """List proposals in ``status`` ordered by creation time."""
        ...
