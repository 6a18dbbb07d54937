"""Agent directory port."""

from __future__ import annotations

from typing import Protocol

from forum_engine.domain.models.agent import AgentProfile


class AgentDirectoryProtocol(Protocol):
    """Protocol for looking up agent profiles by identifier."""

    async def get_agent(self, agent_id: str) -> AgentProfile | None:
        """Return the profile for ``agent_id``, or None if unknown."""
        ...
