"""Retry policy value for execution submissions."""

from __future__ import annotations

import random
from dataclasses import dataclass

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_MS = 1000


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff settings.

    ``max_attempts`` counts total capability invocations, so the default
    of 3 allows at most two backoff sleeps. The sleep after attempt ``n``
    (zero-based) is ``base_delay_ms * 2**n`` plus up to ``jitter_ms``.

    Attributes:
        max_attempts: Total invocations before giving up (>= 1).
        base_delay_ms: Base backoff delay in milliseconds.
        jitter_ms: Upper bound of random delay added to each sleep.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    jitter_ms: int = 0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must be >= 0, got {self.base_delay_ms}")
        if self.jitter_ms < 0:
            raise ValueError(f"jitter_ms must be >= 0, got {self.jitter_ms}")

    def delay_for(self, attempt: int) -> float:
        """Backoff in seconds to wait after zero-based ``attempt`` failed."""
        delay_ms = self.base_delay_ms * (2**attempt)
        if self.jitter_ms:
            delay_ms += random.uniform(0, self.jitter_ms)
        return delay_ms / 1000

    def should_retry(self, attempt: int) -> bool:
        """True if another invocation may follow zero-based ``attempt``."""
        return attempt + 1 < self.max_attempts
