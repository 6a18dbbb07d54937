"""Proposal lifecycle errors.

The proposal state machine only moves forward:
VOTING -> APPROVED | REJECTED | EXPIRED, APPROVED -> EXECUTING,
EXECUTING -> EXECUTED | FAILED. Anything else raises
InvalidProposalStateError.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from forum_engine.domain.exceptions import ForumEngineError

if TYPE_CHECKING:
    from forum_engine.domain.models.proposal import ProposalStatus


class ProposalError(ForumEngineError):
    """Base class for proposal-related errors."""

    pass


class ProposalNotFoundError(ProposalError):
    """Raised when a proposal cannot be loaded from the store.

    Attributes:
        proposal_id: The missing proposal's ID.
    """

    def __init__(self, proposal_id: UUID) -> None:
        self.proposal_id = proposal_id
        super().__init__(f"Proposal not found: {proposal_id}")


class InvalidProposalStateError(ProposalError):
    """Raised when an operation is not valid for the proposal's status.

    Attributes:
        proposal_id: The proposal being operated on.
        current: Status the proposal is in.
        attempted: Status the caller tried to move to.
        allowed: Statuses reachable from the current one.
    """

    def __init__(
        self,
        proposal_id: UUID,
        current: ProposalStatus,
        attempted: ProposalStatus,
        allowed: list[ProposalStatus] | None = None,
    ) -> None:
        """Initialize InvalidProposalStateError.

        Args:
            proposal_id: The proposal being operated on.
            current: Current proposal status.
            attempted: Attempted target status.
            allowed: Valid target statuses from current (optional).
        """
        self.proposal_id = proposal_id
        self.current = current
        self.attempted = attempted
        self.allowed = allowed or []

        allowed_str = (
            f" Valid transitions: {[s.value for s in self.allowed]}"
            if self.allowed
            else " Proposal is in a terminal status."
        )
        super().__init__(
            f"Invalid proposal transition for {proposal_id}: "
            f"{current.value} -> {attempted.value}.{allowed_str}"
        )


class ProposalExpiredError(ProposalError):
    """Raised when a vote arrives after the proposal's expiry.

    The proposal has already been moved to EXPIRED by the time this
    error reaches the caller.

    Attributes:
        proposal_id: The expired proposal.
        expires_at: When voting closed.
        now: When the late vote was evaluated.
    """

    def __init__(self, proposal_id: UUID, expires_at: datetime, now: datetime) -> None:
        self.proposal_id = proposal_id
        self.expires_at = expires_at
        self.now = now
        super().__init__(
            f"Proposal {proposal_id} expired at {expires_at.isoformat()} "
            f"(evaluated at {now.isoformat()})"
        )


class InvalidProposalActionError(ProposalError):
    """Raised when a proposal action payload fails validation.

    Attributes:
        errors: Flattened validation errors as (location, message) pairs.
    """

    def __init__(self, errors: list[tuple[str, str]]) -> None:
        self.errors = errors
        details = "; ".join(f"{loc}: {msg}" for loc, msg in errors)
        super().__init__(f"Invalid proposal action: {details}")


class ProposalAlreadyVotingError(ProposalError):
    """Raised when a forum already has a proposal open for voting.

    A forum votes on one proposal at a time.

    Attributes:
        forum_id: The forum receiving the new proposal.
        proposal_id: The proposal still in VOTING.
    """

    def __init__(self, forum_id: UUID, proposal_id: UUID) -> None:
        self.forum_id = forum_id
        self.proposal_id = proposal_id
        super().__init__(
            f"Forum {forum_id} already has proposal {proposal_id} in voting"
        )
