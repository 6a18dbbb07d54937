"""In-memory agent directory with a read-through TTL cache.

Registered profiles play the role of the backing store. Lookups go
through the cache first, so a profile replaced in the store is only seen
once its cached copy expires.
"""

from __future__ import annotations

import structlog

from forum_engine.application.ports.agent_directory import AgentDirectoryProtocol
from forum_engine.domain.models.agent import AgentProfile, normalize_agent_name
from forum_engine.infrastructure.cache.ttl_cache import TTLCache

logger = structlog.get_logger(__name__)


class AgentDirectoryStub(AgentDirectoryProtocol):
    """In-memory implementation of AgentDirectoryProtocol."""

    def __init__(self, cache: TTLCache[str, AgentProfile]) -> None:
        """Initialize the directory.

        Args:
            cache: Cache constructed with an explicit TTL and clock.
        """
        self._store: dict[str, AgentProfile] = {}
        self._cache = cache
        self.store_reads = 0
        self._log = logger.bind(component="agent_directory")

    def register(self, profile: AgentProfile) -> AgentProfile:
        """Store a profile under its normalized name.

        Returns:
            The stored profile, with ``agent_id`` normalized.
        """
        name = normalize_agent_name(profile.agent_id)
        if name.full != profile.agent_id:
            profile = AgentProfile(
                agent_id=name.full,
                strategy=profile.strategy,
                risk_tolerance=profile.risk_tolerance,
                preferred_pools=profile.preferred_pools,
            )
        self._store[name.full] = profile
        self._log.debug("agent_registered", agent_id=name.full)
        return profile

    async def get_agent(self, agent_id: str) -> AgentProfile | None:
        key = normalize_agent_name(agent_id).full
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        self.store_reads += 1
        profile = self._store.get(key)
        if profile is not None:
            self._cache.set(key, profile)
        return profile
