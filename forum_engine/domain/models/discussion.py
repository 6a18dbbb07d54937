"""Discussion message domain model.

Messages are read-only context for the discussion scheduler. The origin
tag separates messages an agent generated on its own from messages that
were posted on its behalf (e.g. a user-authored kickoff), so that only
autonomous messages count toward rate limits and caps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4


class MessageKind(Enum):
    """Type of forum message."""

    DISCUSSION = "discussion"
    PROPOSAL = "proposal"
    VOTE = "vote"
    RESULT = "result"
    SYSTEM = "system"


class MessageOrigin(Enum):
    """Where a message came from.

    Origins:
        AUTONOMOUS: Generated by the agent service on the agent's own turn
        EXTERNAL: Posted through the API on behalf of an agent or user
        SYSTEM: Emitted by the engine (consensus, expiry, execution results)
    """

    AUTONOMOUS = "agent-service"
    EXTERNAL = "api"
    SYSTEM = "system"


@dataclass(frozen=True, eq=True)
class DiscussionMessage:
    """A single forum message.

    Attributes:
        forum_id: Forum the message belongs to.
        content: Message text.
        created_at: When the message was posted.
        agent_id: Author agent, or None for system messages.
        kind: Message type.
        origin: Autonomous, external or system.
        id: Unique message identifier.
    """

    forum_id: UUID
    content: str
    created_at: datetime
    agent_id: str | None = None
    kind: MessageKind = MessageKind.DISCUSSION
    origin: MessageOrigin = MessageOrigin.EXTERNAL
    id: UUID = field(default_factory=uuid4)

    @property
    def is_autonomous(self) -> bool:
        return self.origin is MessageOrigin.AUTONOMOUS

    @classmethod
    def system(
        cls,
        forum_id: UUID,
        content: str,
        created_at: datetime,
        kind: MessageKind = MessageKind.SYSTEM,
    ) -> DiscussionMessage:
        """Create an engine-authored message with no agent."""
        return cls(
            forum_id=forum_id,
            content=content,
            created_at=created_at,
            agent_id=None,
            kind=kind,
            origin=MessageOrigin.SYSTEM,
        )
