"""In-memory forum repository. Not suitable for production use."""

from __future__ import annotations

from uuid import UUID

from forum_engine.application.ports.forum_repository import ForumRepositoryProtocol
from forum_engine.domain.models.forum import Forum


class ForumRepositoryStub(ForumRepositoryProtocol):
    """In-memory implementation of ForumRepositoryProtocol."""

    def __init__(self) -> None:
        self._forums: dict[UUID, Forum] = {}

    async def save_forum(self, forum: Forum) -> None:
        self._forums[forum.id] = forum

    async def get_forum(self, forum_id: UUID) -> Forum | None:
        return self._forums.get(forum_id)

    def clear(self) -> None:
        """Clear all forums (for testing)."""
        self._forums.clear()
