"""Proposal expiry helpers.

Expiry is pull-based: nothing in the engine runs a timer. Whoever touches
a proposal (a vote, or an external sweep) asks whether it has expired.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from forum_engine.domain.models.proposal import Proposal, ProposalStatus


def calculate_expiry(now: datetime, timeout_minutes: int) -> datetime:
    """Return the expiry for a proposal created at ``now``."""
    if timeout_minutes <= 0:
        raise ValueError(f"timeout_minutes must be positive, got {timeout_minutes}")
    return now + timedelta(minutes=timeout_minutes)


def is_expired(expires_at: datetime, now: datetime) -> bool:
    """True once ``now`` is strictly past ``expires_at``."""
    return now > expires_at


@dataclass(frozen=True)
class ExpiryCheck:
    """Result of checking one proposal for expiry.

    Attributes:
        proposal_id: The checked proposal.
        expired: True if the proposal should move to EXPIRED now.
        expires_at: The proposal's deadline.
        checked_at: When the check ran.
    """

    proposal_id: UUID
    expired: bool
    expires_at: datetime
    checked_at: datetime


def check_expiry(proposal: Proposal, now: datetime) -> ExpiryCheck:
    """Check whether a VOTING proposal has passed its deadline.

    Proposals outside VOTING never expire; their outcome is already
    settled or in execution.
    """
    expired = proposal.status is ProposalStatus.VOTING and is_expired(
        proposal.expires_at, now
    )
    return ExpiryCheck(
        proposal_id=proposal.id,
        expired=expired,
        expires_at=proposal.expires_at,
        checked_at=now,
    )
