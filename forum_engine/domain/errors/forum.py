"""Forum domain errors."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from forum_engine.domain.exceptions import ForumEngineError

if TYPE_CHECKING:
    from forum_engine.domain.models.forum import ForumStatus


class ForumError(ForumEngineError):
    """Base class for forum-related errors."""

    pass


class ForumNotFoundError(ForumError):
    """Raised when a forum cannot be loaded from the store."""

    def __init__(self, forum_id: UUID) -> None:
        self.forum_id = forum_id
        super().__init__(f"Forum not found: {forum_id}")


class NotForumParticipantError(ForumError):
    """Raised when a non-member tries to act inside a forum.

    Attributes:
        forum_id: The forum being acted on.
        agent_id: The agent that is not a participant.
    """

    def __init__(self, forum_id: UUID, agent_id: str) -> None:
        self.forum_id = forum_id
        self.agent_id = agent_id
        super().__init__(f"Agent {agent_id} is not a participant in forum {forum_id}")


class InvalidForumTransitionError(ForumError):
    """Raised when a forum status change is not in the transition matrix.

    Attributes:
        forum_id: The forum being transitioned.
        current: Current forum status.
        attempted: Attempted target status.
    """

    def __init__(
        self, forum_id: UUID, current: ForumStatus, attempted: ForumStatus
    ) -> None:
        self.forum_id = forum_id
        self.current = current
        self.attempted = attempted
        super().__init__(
            f"Invalid forum transition for {forum_id}: "
            f"{current.value} -> {attempted.value}"
        )


class ForumNotActiveError(ForumError):
    """Raised when a proposal is submitted to a forum that is not ACTIVE.

    Attributes:
        forum_id: The forum that refused the proposal.
        status: The forum's current status.
    """

    def __init__(self, forum_id: UUID, status: ForumStatus) -> None:
        self.forum_id = forum_id
        self.status = status
        super().__init__(f"Forum {forum_id} is not active (status: {status.value})")
