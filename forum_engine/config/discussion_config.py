"""Discussion throttling policy.

Environment Variables:
- DISCUSSION_MIN_INTERVAL_MS: Minimum gap between an agent's autonomous
  messages (default: 30000, min: 250)
- DISCUSSION_MAX_AUTO_MESSAGES: Autonomous messages per agent per forum
  (default: 3, min: 1, max: 50)
- DISCUSSION_RECENT_MESSAGE_LIMIT: Size of the message window the
  scheduler evaluates (default: 20, min: 1, max: 200)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from forum_engine.config._env import clamp, get_int_env

DEFAULT_MIN_INTERVAL_MS = 30_000
# Floor applied even to explicit configuration
MIN_INTERVAL_FLOOR_MS = 250

DEFAULT_MAX_AUTO_MESSAGES = 3
MIN_AUTO_MESSAGES = 1
MAX_AUTO_MESSAGES = 50

DEFAULT_RECENT_MESSAGE_LIMIT = 20
MIN_RECENT_MESSAGE_LIMIT = 1
MAX_RECENT_MESSAGE_LIMIT = 200


@dataclass(frozen=True)
class DiscussionPolicy:
    """Throttling applied to autonomous discussion messages.

    ``min_interval_ms`` below the 250 ms floor is raised to the floor
    rather than rejected, matching how agents pass ad-hoc options.

    Attributes:
        min_interval_ms: Minimum gap between an agent's autonomous messages.
        max_auto_messages: Hard cap on autonomous messages per agent.
        recent_message_limit: Size of the evaluated message window.
    """

    min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS
    max_auto_messages: int = DEFAULT_MAX_AUTO_MESSAGES
    recent_message_limit: int = DEFAULT_RECENT_MESSAGE_LIMIT

    def __post_init__(self) -> None:
        """Validate policy values."""
        if self.max_auto_messages < MIN_AUTO_MESSAGES:
            raise ValueError(
                f"max_auto_messages must be >= {MIN_AUTO_MESSAGES}, "
                f"got {self.max_auto_messages}"
            )
        if self.recent_message_limit < MIN_RECENT_MESSAGE_LIMIT:
            raise ValueError(
                f"recent_message_limit must be >= {MIN_RECENT_MESSAGE_LIMIT}, "
                f"got {self.recent_message_limit}"
            )

    @property
    def effective_min_interval(self) -> timedelta:
        """Minimum interval with the floor applied."""
        return timedelta(milliseconds=max(MIN_INTERVAL_FLOOR_MS, self.min_interval_ms))

    @classmethod
    def from_environment(cls) -> DiscussionPolicy:
        """Create policy from environment variables with defaults.

        Returns:
            DiscussionPolicy with values from environment or defaults.
        """
        min_interval = get_int_env("DISCUSSION_MIN_INTERVAL_MS", DEFAULT_MIN_INTERVAL_MS)
        min_interval = max(MIN_INTERVAL_FLOOR_MS, min_interval)

        max_auto = get_int_env("DISCUSSION_MAX_AUTO_MESSAGES", DEFAULT_MAX_AUTO_MESSAGES)
        max_auto = clamp(max_auto, MIN_AUTO_MESSAGES, MAX_AUTO_MESSAGES)

        window = get_int_env(
            "DISCUSSION_RECENT_MESSAGE_LIMIT", DEFAULT_RECENT_MESSAGE_LIMIT
        )
        window = clamp(window, MIN_RECENT_MESSAGE_LIMIT, MAX_RECENT_MESSAGE_LIMIT)

        return cls(
            min_interval_ms=min_interval,
            max_auto_messages=int(max_auto),
            recent_message_limit=int(window),
        )


# Default policy
DEFAULT_DISCUSSION_POLICY = DiscussionPolicy()

# Floor interval for tests that step a fake clock in small increments
TEST_DISCUSSION_POLICY = DiscussionPolicy(min_interval_ms=MIN_INTERVAL_FLOOR_MS)
