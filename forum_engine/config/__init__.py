"""Configuration module for the forum engine.

Available Configurations:
- ConsensusConfig: Quorum threshold, participation floor, proposal timeout
- DiscussionPolicy: Autonomous message interval and cap
- ExecutionPolicy: Chain, sequencing and retry settings
- EngineConfig: Aggregate of the above plus environment and cache TTL
"""

from forum_engine.config.consensus_config import (
    DEFAULT_CONSENSUS_CONFIG,
    TEST_CONSENSUS_CONFIG,
    ConsensusConfig,
)
from forum_engine.config.discussion_config import (
    DEFAULT_DISCUSSION_POLICY,
    TEST_DISCUSSION_POLICY,
    DiscussionPolicy,
)
from forum_engine.config.engine_config import (
    DEFAULT_ENGINE_CONFIG,
    TEST_ENGINE_CONFIG,
    EngineConfig,
)
from forum_engine.config.execution_config import (
    DEFAULT_EXECUTION_POLICY,
    TEST_EXECUTION_POLICY,
    ExecutionPolicy,
)

__all__ = [
    "ConsensusConfig",
    "DEFAULT_CONSENSUS_CONFIG",
    "TEST_CONSENSUS_CONFIG",
    "DiscussionPolicy",
    "DEFAULT_DISCUSSION_POLICY",
    "TEST_DISCUSSION_POLICY",
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    "TEST_ENGINE_CONFIG",
    "ExecutionPolicy",
    "DEFAULT_EXECUTION_POLICY",
    "TEST_EXECUTION_POLICY",
]
