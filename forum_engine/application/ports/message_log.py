"""Message log port.

The discussion scheduler only reads the log. The lifecycle appends
engine-authored system messages on consensus, expiry and execution.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from forum_engine.domain.models.discussion import DiscussionMessage


class MessageLogProtocol(Protocol):
    """Protocol for forum message storage."""

    async def list_recent_messages(
        self, forum_id: UUID, limit: int
    ) -> list[DiscussionMessage]:
        """Return up to ``limit`` most recent messages of a forum.

        Callers must not rely on the order of the returned list.
        """
        ...

    async def append_message(self, message: DiscussionMessage) -> None: ...
