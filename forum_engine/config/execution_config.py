"""Execution policy.

Environment Variables:
- EXECUTION_CHAIN_ID: Target chain (default: 1301)
- EXECUTION_PARALLEL: Submit for all executors concurrently (default: false)
- EXECUTION_DELAY_BETWEEN_MS: Gap between sequential executions
  (default: 1000, min: 0, max: 60000)
- EXECUTION_MAX_RETRIES: Total submission attempts (default: 3, min: 1, max: 10)
- EXECUTION_BACKOFF_BASE_MS: Base backoff delay (default: 1000, min: 0, max: 60000)
- EXECUTION_BACKOFF_JITTER_MS: Random extra delay per backoff (default: 0)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from forum_engine.config._env import clamp, get_bool_env, get_int_env
from forum_engine.domain.models.execution import DEFAULT_CHAIN_ID
from forum_engine.domain.models.retry_policy import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    RetryPolicy,
)

DEFAULT_DELAY_BETWEEN_MS = 1000
MAX_DELAY_MS = 60_000

MIN_ATTEMPTS = 1
MAX_ATTEMPTS = 10


@dataclass(frozen=True)
class ExecutionPolicy:
    """How the coordinator submits an approved proposal.

    Attributes:
        chain_id: Target chain id.
        parallel: Submit for all executors concurrently.
        delay_between_ms: Gap awaited between sequential executions.
        retry: Backoff settings for thrown submission errors.
    """

    chain_id: int = DEFAULT_CHAIN_ID
    parallel: bool = False
    delay_between_ms: int = DEFAULT_DELAY_BETWEEN_MS
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self) -> None:
        """Validate policy values."""
        if self.chain_id <= 0:
            raise ValueError(f"chain_id must be positive, got {self.chain_id}")
        if self.delay_between_ms < 0:
            raise ValueError(
                f"delay_between_ms must be >= 0, got {self.delay_between_ms}"
            )

    @property
    def delay_between_seconds(self) -> float:
        return self.delay_between_ms / 1000

    @classmethod
    def from_environment(cls) -> ExecutionPolicy:
        """Create policy from environment variables with defaults.

        Returns:
            ExecutionPolicy with values from environment or defaults.
        """
        chain_id = get_int_env("EXECUTION_CHAIN_ID", DEFAULT_CHAIN_ID)
        if chain_id <= 0:
            chain_id = DEFAULT_CHAIN_ID

        delay = get_int_env("EXECUTION_DELAY_BETWEEN_MS", DEFAULT_DELAY_BETWEEN_MS)
        delay = clamp(delay, 0, MAX_DELAY_MS)

        attempts = get_int_env("EXECUTION_MAX_RETRIES", DEFAULT_MAX_ATTEMPTS)
        attempts = clamp(attempts, MIN_ATTEMPTS, MAX_ATTEMPTS)

        base_delay = get_int_env("EXECUTION_BACKOFF_BASE_MS", DEFAULT_BASE_DELAY_MS)
        base_delay = clamp(base_delay, 0, MAX_DELAY_MS)

        jitter = get_int_env("EXECUTION_BACKOFF_JITTER_MS", 0)
        jitter = clamp(jitter, 0, MAX_DELAY_MS)

        return cls(
            chain_id=chain_id,
            parallel=get_bool_env("EXECUTION_PARALLEL", False),
            delay_between_ms=int(delay),
            retry=RetryPolicy(
                max_attempts=int(attempts),
                base_delay_ms=int(base_delay),
                jitter_ms=int(jitter),
            ),
        )


# Default policy
DEFAULT_EXECUTION_POLICY = ExecutionPolicy()

# No waiting between executions or retries, for fast tests
TEST_EXECUTION_POLICY = ExecutionPolicy(
    delay_between_ms=0,
    retry=RetryPolicy(max_attempts=3, base_delay_ms=0),
)
