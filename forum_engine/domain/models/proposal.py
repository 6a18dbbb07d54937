"""Proposal domain model and lifecycle state machine.

State Machine:
    VOTING -> APPROVED (quorum reached)
    VOTING -> REJECTED (consensus impossible)
    VOTING -> EXPIRED (touched after expires_at)
    APPROVED -> EXECUTING (execution begins)
    EXECUTING -> EXECUTED (every designated execution succeeded)
    EXECUTING -> FAILED (at least one execution failed)

Terminal States:
    EXECUTED, FAILED, REJECTED, EXPIRED. Status never regresses and the
    agree/disagree counters only ever increase.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import ClassVar
from uuid import UUID, uuid4

from forum_engine.domain.errors.proposal import InvalidProposalStateError
from forum_engine.domain.models.proposal_action import (
    ActionKind,
    ProposalAction,
    ProposalHooks,
    action_kind,
)
from forum_engine.domain.models.vote import VoteChoice, VoteTally


class ProposalStatus(Enum):
    """Status in the proposal lifecycle."""

    VOTING = "voting"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"
    EXECUTING = "executing"
    EXECUTED = "executed"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Check if no further transitions are permitted from this status."""
        return self in TERMINAL_PROPOSAL_STATUSES

    def valid_transitions(self) -> frozenset[ProposalStatus]:
        """Get the statuses reachable from this one.

        Returns:
            Frozenset of target statuses. Empty for terminal statuses.
        """
        return PROPOSAL_TRANSITION_MATRIX.get(self, frozenset())


TERMINAL_PROPOSAL_STATUSES: frozenset[ProposalStatus] = frozenset(
    {
        ProposalStatus.EXECUTED,
        ProposalStatus.FAILED,
        ProposalStatus.REJECTED,
        ProposalStatus.EXPIRED,
    }
)

PROPOSAL_TRANSITION_MATRIX: dict[ProposalStatus, frozenset[ProposalStatus]] = {
    ProposalStatus.VOTING: frozenset(
        {
            ProposalStatus.APPROVED,
            ProposalStatus.REJECTED,
            ProposalStatus.EXPIRED,
        }
    ),
    ProposalStatus.APPROVED: frozenset({ProposalStatus.EXECUTING}),
    ProposalStatus.EXECUTING: frozenset(
        {ProposalStatus.EXECUTED, ProposalStatus.FAILED}
    ),
    ProposalStatus.REJECTED: frozenset(),
    ProposalStatus.EXPIRED: frozenset(),
    ProposalStatus.EXECUTED: frozenset(),
    ProposalStatus.FAILED: frozenset(),
}


@dataclass(frozen=True, eq=True)
class Proposal:
    """A concrete on-chain action put to a forum vote.

    Proposals are created by the API layer. The engine only evaluates and
    transitions them once voting begins.

    Attributes:
        forum_id: Owning forum.
        proposer_id: Agent that submitted the proposal.
        action: Typed action variant (swap, liquidity, limit order).
        created_at: Creation timestamp (UTC).
        expires_at: Voting deadline (UTC).
        hooks: Optional execution hook flags.
        description: Optional short rationale from the proposer.
        status: Current lifecycle status.
        agree_count: Number of AGREE votes counted.
        disagree_count: Number of DISAGREE votes counted.
        resolved_at: When the proposal left VOTING.
        id: Unique proposal identifier.
    """

    forum_id: UUID
    proposer_id: str
    action: ProposalAction
    created_at: datetime
    expires_at: datetime
    hooks: ProposalHooks | None = None
    description: str | None = None
    status: ProposalStatus = ProposalStatus.VOTING
    agree_count: int = 0
    disagree_count: int = 0
    resolved_at: datetime | None = None
    id: UUID = field(default_factory=uuid4)

    MAX_DESCRIPTION_LENGTH: ClassVar[int] = 500

    def __post_init__(self) -> None:
        """Validate proposal fields."""
        if self.agree_count < 0 or self.disagree_count < 0:
            raise ValueError("Vote counters cannot be negative")
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be after created_at")
        if (
            self.description is not None
            and len(self.description) > self.MAX_DESCRIPTION_LENGTH
        ):
            raise ValueError(
                f"Proposal description exceeds {self.MAX_DESCRIPTION_LENGTH} characters"
            )

    @property
    def action_kind(self) -> ActionKind:
        return action_kind(self.action)

    @property
    def tally(self) -> VoteTally:
        return VoteTally(agree=self.agree_count, disagree=self.disagree_count)

    def with_vote(self, choice: VoteChoice) -> Proposal:
        """Return a copy with one more vote counted for ``choice``."""
        tally = self.tally.with_choice(choice)
        return replace(self, agree_count=tally.agree, disagree_count=tally.disagree)

    def with_status(
        self,
        new_status: ProposalStatus,
        resolved_at: datetime | None = None,
    ) -> Proposal:
        """Return a copy moved to ``new_status``.

        Enforces the transition matrix. Leaving VOTING stamps
        ``resolved_at`` when one is supplied.

        Args:
            new_status: Target status.
            resolved_at: Resolution timestamp for the VOTING exit.

        Returns:
            New Proposal instance with the updated status.

        Raises:
            InvalidProposalStateError: If the transition is not permitted.
        """
        allowed = self.status.valid_transitions()
        if new_status not in allowed:
            raise InvalidProposalStateError(
                proposal_id=self.id,
                current=self.status,
                attempted=new_status,
                allowed=sorted(allowed, key=lambda s: s.value),
            )
        stamped = resolved_at if self.status is ProposalStatus.VOTING else None
        return replace(
            self,
            status=new_status,
            resolved_at=stamped or self.resolved_at,
        )
