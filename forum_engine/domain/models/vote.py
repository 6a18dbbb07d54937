"""Vote domain models.

At most one vote exists per (proposal, agent). Votes are append-only:
once recorded they are never edited or removed.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4


class VoteChoice(Enum):
    """An agent's position on a proposal."""

    AGREE = "agree"
    DISAGREE = "disagree"


@dataclass(frozen=True, eq=True)
class Vote:
    """A single agent's vote on a proposal.

    Attributes:
        proposal_id: The proposal voted on.
        agent_id: Stable agent identifier (ENS-style name).
        choice: AGREE or DISAGREE.
        created_at: When the vote was cast.
        reason: Optional free-text reasoning.
        id: Unique vote identifier.
    """

    proposal_id: UUID
    agent_id: str
    choice: VoteChoice
    created_at: datetime
    reason: str | None = None
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True, eq=True)
class VoteTally:
    """Agree/disagree counts for a proposal."""

    agree: int = 0
    disagree: int = 0

    @property
    def total(self) -> int:
        return self.agree + self.disagree

    @property
    def percentage(self) -> float:
        """Agree ratio of cast votes, 0.0 when nothing was cast."""
        return self.agree / self.total if self.total else 0.0

    def with_choice(self, choice: VoteChoice) -> VoteTally:
        """Return a tally with one more vote for ``choice``."""
        if choice is VoteChoice.AGREE:
            return VoteTally(agree=self.agree + 1, disagree=self.disagree)
        return VoteTally(agree=self.agree, disagree=self.disagree + 1)

    @classmethod
    def from_votes(cls, votes: Iterable[Vote]) -> VoteTally:
        tally = cls()
        for vote in votes:
            tally = tally.with_choice(vote.choice)
        return tally


def agreeing_agents(votes: Iterable[Vote]) -> list[str]:
    """Agent ids that voted AGREE, in vote order."""
    return [v.agent_id for v in votes if v.choice is VoteChoice.AGREE]


def disagreeing_agents(votes: Iterable[Vote]) -> list[str]:
    """Agent ids that voted DISAGREE, in vote order."""
    return [v.agent_id for v in votes if v.choice is VoteChoice.DISAGREE]


def has_agent_voted(votes: Iterable[Vote], agent_id: str) -> bool:
    return any(v.agent_id == agent_id for v in votes)
