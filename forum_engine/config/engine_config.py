"""Top-level engine configuration.

Environment Variables:
- ENVIRONMENT: "production" selects JSON logs (default: development)
- AGENT_CACHE_TTL_SECONDS: Agent directory cache lifetime (default: 60, min: 0, max: 3600)
- plus everything read by ConsensusConfig, DiscussionPolicy and ExecutionPolicy
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from forum_engine.config._env import clamp, get_int_env
from forum_engine.config.consensus_config import (
    TEST_CONSENSUS_CONFIG,
    ConsensusConfig,
)
from forum_engine.config.discussion_config import (
    TEST_DISCUSSION_POLICY,
    DiscussionPolicy,
)
from forum_engine.config.execution_config import (
    TEST_EXECUTION_POLICY,
    ExecutionPolicy,
)

DEFAULT_ENVIRONMENT = "development"
DEFAULT_AGENT_CACHE_TTL_SECONDS = 60
MAX_AGENT_CACHE_TTL_SECONDS = 3600


@dataclass(frozen=True)
class EngineConfig:
    """Aggregate configuration for assembling the engine.

    Attributes:
        environment: Deployment environment name.
        consensus: Quorum and expiry defaults.
        discussion: Discussion throttling.
        execution: Submission policy.
        agent_cache_ttl_seconds: Agent directory cache lifetime.
    """

    environment: str = DEFAULT_ENVIRONMENT
    consensus: ConsensusConfig = field(default_factory=ConsensusConfig)
    discussion: DiscussionPolicy = field(default_factory=DiscussionPolicy)
    execution: ExecutionPolicy = field(default_factory=ExecutionPolicy)
    agent_cache_ttl_seconds: int = DEFAULT_AGENT_CACHE_TTL_SECONDS

    def __post_init__(self) -> None:
        if self.agent_cache_ttl_seconds < 0:
            raise ValueError(
                "agent_cache_ttl_seconds must be >= 0, "
                f"got {self.agent_cache_ttl_seconds}"
            )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_environment(cls) -> EngineConfig:
        """Create the full configuration from environment variables."""
        ttl = get_int_env("AGENT_CACHE_TTL_SECONDS", DEFAULT_AGENT_CACHE_TTL_SECONDS)
        return cls(
            environment=os.environ.get("ENVIRONMENT", DEFAULT_ENVIRONMENT),
            consensus=ConsensusConfig.from_environment(),
            discussion=DiscussionPolicy.from_environment(),
            execution=ExecutionPolicy.from_environment(),
            agent_cache_ttl_seconds=int(clamp(ttl, 0, MAX_AGENT_CACHE_TTL_SECONDS)),
        )


DEFAULT_ENGINE_CONFIG = EngineConfig()

TEST_ENGINE_CONFIG = EngineConfig(
    environment="test",
    consensus=TEST_CONSENSUS_CONFIG,
    discussion=TEST_DISCUSSION_POLICY,
    execution=TEST_EXECUTION_POLICY,
    agent_cache_ttl_seconds=0,
)
