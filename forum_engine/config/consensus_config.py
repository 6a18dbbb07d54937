"""Consensus configuration.

Defaults applied when a forum is opened without explicit quorum settings.
The resulting QuorumRule is fixed on the forum at creation.

Environment Variables:
- FORUM_QUORUM_THRESHOLD: Agree fraction needed (default: 0.6, min: 0.5, max: 1.0)
- FORUM_MIN_PARTICIPANTS: Votes needed before any verdict (default: 3, min: 1, max: 100)
- FORUM_TIMEOUT_MINUTES: Proposal expiry horizon (default: 30, min: 5, max: 1440)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from forum_engine.config._env import clamp, get_float_env, get_int_env
from forum_engine.domain.models.consensus import (
    DEFAULT_MIN_PARTICIPANTS,
    DEFAULT_QUORUM_THRESHOLD,
    MAX_QUORUM_THRESHOLD,
    MIN_QUORUM_THRESHOLD,
    QuorumRule,
)

MIN_PARTICIPANTS_FLOOR = 1
MAX_PARTICIPANTS_CEILING = 100

DEFAULT_TIMEOUT_MINUTES = 30
MIN_TIMEOUT_MINUTES = 5
# 24 hours
MAX_TIMEOUT_MINUTES = 1440


@dataclass(frozen=True)
class ConsensusConfig:
    """Quorum and expiry defaults for new forums.

    Attributes:
        quorum_threshold: Agree fraction needed for approval.
                          Default: 0.6. Range: 0.5-1.0.
        min_participants: Votes needed before any verdict.
                          Default: 3. Range: 1-100.
        timeout_minutes: Minutes from proposal creation to expiry.
                         Default: 30. Range: 5-1440.
    """

    quorum_threshold: float = DEFAULT_QUORUM_THRESHOLD
    min_participants: int = DEFAULT_MIN_PARTICIPANTS
    timeout_minutes: int = DEFAULT_TIMEOUT_MINUTES

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not MIN_QUORUM_THRESHOLD <= self.quorum_threshold <= MAX_QUORUM_THRESHOLD:
            raise ValueError(
                f"quorum_threshold must be between {MIN_QUORUM_THRESHOLD} "
                f"and {MAX_QUORUM_THRESHOLD}, got {self.quorum_threshold}"
            )
        if not MIN_PARTICIPANTS_FLOOR <= self.min_participants <= MAX_PARTICIPANTS_CEILING:
            raise ValueError(
                f"min_participants must be between {MIN_PARTICIPANTS_FLOOR} "
                f"and {MAX_PARTICIPANTS_CEILING}, got {self.min_participants}"
            )
        if not MIN_TIMEOUT_MINUTES <= self.timeout_minutes <= MAX_TIMEOUT_MINUTES:
            raise ValueError(
                f"timeout_minutes must be between {MIN_TIMEOUT_MINUTES} "
                f"and {MAX_TIMEOUT_MINUTES}, got {self.timeout_minutes}"
            )

    @property
    def quorum_rule(self) -> QuorumRule:
        return QuorumRule(
            quorum_threshold=self.quorum_threshold,
            min_participants=self.min_participants,
        )

    @property
    def timeout_timedelta(self) -> timedelta:
        return timedelta(minutes=self.timeout_minutes)

    @classmethod
    def from_environment(cls) -> ConsensusConfig:
        """Create config from environment variables with defaults.

        Out-of-range values are clamped into range rather than rejected.

        Returns:
            ConsensusConfig with values from environment or defaults.
        """
        threshold = get_float_env("FORUM_QUORUM_THRESHOLD", DEFAULT_QUORUM_THRESHOLD)
        # Clamp to valid range
        threshold = clamp(threshold, MIN_QUORUM_THRESHOLD, MAX_QUORUM_THRESHOLD)

        min_participants = get_int_env(
            "FORUM_MIN_PARTICIPANTS", DEFAULT_MIN_PARTICIPANTS
        )
        min_participants = clamp(
            min_participants, MIN_PARTICIPANTS_FLOOR, MAX_PARTICIPANTS_CEILING
        )

        timeout = get_int_env("FORUM_TIMEOUT_MINUTES", DEFAULT_TIMEOUT_MINUTES)
        timeout = clamp(timeout, MIN_TIMEOUT_MINUTES, MAX_TIMEOUT_MINUTES)

        return cls(
            quorum_threshold=float(threshold),
            min_participants=int(min_participants),
            timeout_minutes=int(timeout),
        )


# Default configuration
DEFAULT_CONSENSUS_CONFIG = ConsensusConfig()

# Unanimous two-vote forums with the shortest timeout, for fast tests
TEST_CONSENSUS_CONFIG = ConsensusConfig(
    quorum_threshold=1.0,
    min_participants=2,
    timeout_minutes=MIN_TIMEOUT_MINUTES,
)
