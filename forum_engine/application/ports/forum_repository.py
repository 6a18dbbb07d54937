"""Forum repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from forum_engine.domain.models.forum import Forum


class ForumRepositoryProtocol(Protocol):
    """Protocol for forum persistence.

    Methods:
        save_forum: Store or replace a forum
        get_forum: Retrieve a forum by ID
    """

    async def save_forum(self, forum: Forum) -> None: ...

    async def get_forum(self, forum_id: UUID) -> Forum | None:
        """Retrieve a forum by ID.

        Returns:
            The forum if found, None otherwise.
        """
        ...
