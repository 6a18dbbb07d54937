"""In-memory forum message log. Not suitable for production use."""

from __future__ import annotations

from uuid import UUID

from forum_engine.application.ports.message_log import MessageLogProtocol
from forum_engine.domain.models.discussion import DiscussionMessage, MessageOrigin


class MessageLogStub(MessageLogProtocol):
    """In-memory implementation of MessageLogProtocol.

    ``list_recent_messages`` returns newest first, the way the production
    store orders its query.
    """

    def __init__(self) -> None:
        self._messages: dict[UUID, list[DiscussionMessage]] = {}

    async def list_recent_messages(
        self, forum_id: UUID, limit: int
    ) -> list[DiscussionMessage]:
        messages = sorted(
            self._messages.get(forum_id, []),
            key=lambda m: m.created_at,
            reverse=True,
        )
        return messages[:limit]

    async def append_message(self, message: DiscussionMessage) -> None:
        self._messages.setdefault(message.forum_id, []).append(message)

    def messages_for(
        self, forum_id: UUID, origin: MessageOrigin | None = None
    ) -> list[DiscussionMessage]:
        """Return stored messages in append order (for testing)."""
        messages = self._messages.get(forum_id, [])
        if origin is None:
            return list(messages)
        return [m for m in messages if m.origin is origin]

    def clear(self) -> None:
        """Clear all messages (for testing)."""
        self._messages.clear()
