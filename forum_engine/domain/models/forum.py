"""Forum domain model.

A forum groups agents around a goal. Its quorum rule is fixed at creation
and its participant set only grows through explicit joins.

Status Machine:
    ACTIVE -> CONSENSUS (a proposal was approved)
    ACTIVE -> EXPIRED (forum timed out)
    CONSENSUS -> EXECUTING (execution of the approved proposal began)
    CONSENSUS -> ACTIVE (reopened after a failed execution)
    EXECUTING -> EXECUTED (execution succeeded)
    EXECUTING -> ACTIVE (execution failed, forum reopens)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from forum_engine.domain.errors.forum import InvalidForumTransitionError
from forum_engine.domain.models.consensus import QuorumRule


class ForumStatus(Enum):
    """Status of a forum."""

    ACTIVE = "active"
    CONSENSUS = "consensus"
    EXECUTING = "executing"
    EXECUTED = "executed"
    EXPIRED = "expired"

    def valid_transitions(self) -> frozenset[ForumStatus]:
        return FORUM_TRANSITION_MATRIX.get(self, frozenset())


FORUM_TRANSITION_MATRIX: dict[ForumStatus, frozenset[ForumStatus]] = {
    ForumStatus.ACTIVE: frozenset({ForumStatus.CONSENSUS, ForumStatus.EXPIRED}),
    ForumStatus.CONSENSUS: frozenset({ForumStatus.EXECUTING, ForumStatus.ACTIVE}),
    ForumStatus.EXECUTING: frozenset({ForumStatus.EXECUTED, ForumStatus.ACTIVE}),
    ForumStatus.EXECUTED: frozenset(),
    ForumStatus.EXPIRED: frozenset(),
}


@dataclass(frozen=True, eq=True)
class Forum:
    """A discussion forum of agents pursuing one goal.

    Attributes:
        goal: What the forum is trying to achieve.
        creator_id: Agent that opened the forum. It is the designated
            executor for any approved proposal.
        quorum_rule: Threshold and participation floor (fixed at creation).
        timeout_minutes: Proposal expiry horizon.
        created_at: Creation timestamp (UTC).
        pool: Optional pool focus, e.g. "ETH-USDC".
        participants: Ordered, unique participant agent ids.
        status: Current forum status.
        expires_at: Optional forum expiry.
        id: Unique forum identifier.
    """

    goal: str
    creator_id: str
    quorum_rule: QuorumRule
    timeout_minutes: int
    created_at: datetime
    pool: str | None = None
    participants: tuple[str, ...] = ()
    status: ForumStatus = ForumStatus.ACTIVE
    expires_at: datetime | None = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        """Validate forum fields."""
        if not self.goal.strip():
            raise ValueError("Forum goal cannot be empty")
        if self.timeout_minutes <= 0:
            raise ValueError(
                f"timeout_minutes must be positive, got {self.timeout_minutes}"
            )
        if len(set(self.participants)) != len(self.participants):
            raise ValueError("Forum participants must be unique")

    def is_participant(self, agent_id: str) -> bool:
        return agent_id in self.participants

    def with_participant(self, agent_id: str) -> Forum:
        """Return a forum with ``agent_id`` joined.

        Joining is idempotent for an existing participant. Only ACTIVE
        forums accept new participants.

        Raises:
            InvalidForumTransitionError: If the forum is not ACTIVE.
        """
        if self.is_participant(agent_id):
            return self
        if self.status is not ForumStatus.ACTIVE:
            raise InvalidForumTransitionError(self.id, self.status, ForumStatus.ACTIVE)
        return replace(self, participants=(*self.participants, agent_id))

    def with_status(self, new_status: ForumStatus) -> Forum:
        """Return a forum moved to ``new_status``.

        Raises:
            InvalidForumTransitionError: If the transition is not permitted.
        """
        if new_status is self.status:
            return self
        if new_status not in self.status.valid_transitions():
            raise InvalidForumTransitionError(self.id, self.status, new_status)
        return replace(self, status=new_status)
