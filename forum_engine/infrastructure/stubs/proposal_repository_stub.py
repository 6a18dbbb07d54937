"""In-memory proposal repository. Not suitable for production use."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from uuid import UUID

from forum_engine.application.ports.proposal_repository import (
    ProposalRepositoryProtocol,
)
from forum_engine.domain.errors import ProposalNotFoundError
from forum_engine.domain.models.proposal import Proposal, ProposalStatus


class ProposalRepositoryStub(ProposalRepositoryProtocol):
    """In-memory implementation of ProposalRepositoryProtocol.

    Attributes:
        _proposals: Dictionary mapping proposal.id to Proposal.
    """

    def __init__(self) -> None:
        self._proposals: dict[UUID, Proposal] = {}

    async def save_proposal(self, proposal: Proposal) -> None:
        self._proposals[proposal.id] = proposal

    async def get_proposal(self, proposal_id: UUID) -> Proposal | None:
        return self._proposals.get(proposal_id)

    async def update_proposal_status(
        self,
        proposal_id: UUID,
        status: ProposalStatus,
        *,
        agree_count: int | None = None,
        disagree_count: int | None = None,
        resolved_at: datetime | None = None,
    ) -> Proposal:
        existing = self._proposals.get(proposal_id)
        if existing is None:
            raise ProposalNotFoundError(proposal_id)
        updated = replace(
            existing,
            status=status,
            agree_count=existing.agree_count if agree_count is None else agree_count,
            disagree_count=(
                existing.disagree_count if disagree_count is None else disagree_count
            ),
            resolved_at=existing.resolved_at if resolved_at is None else resolved_at,
        )
        self._proposals[proposal_id] = updated
        return updated

    async def list_by_status(self, status: ProposalStatus) -> list[Proposal]:
        matching = [p for p in self._proposals.values() if p.status is status]
        matching.sort(key=lambda p: p.created_at)
        return matching

    def clear(self) -> None:
        """Clear all proposals (for testing)."""
        self._proposals.clear()
