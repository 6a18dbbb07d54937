"""Consensus verdict domain models.

A Verdict is the outcome of applying a forum's quorum rule to the current
agree/disagree tally of a proposal. Verdicts are values, not errors:
"insufficient participation" and "voting in progress" are ordinary
outcomes the caller branches on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Quorum threshold bounds (fraction of cast votes that must agree)
MIN_QUORUM_THRESHOLD = 0.5
MAX_QUORUM_THRESHOLD = 1.0

# Default quorum settings
DEFAULT_QUORUM_THRESHOLD = 0.6
DEFAULT_MIN_PARTICIPANTS = 3


class VerdictResult(Enum):
    """Final result carried by a reached verdict."""

    APPROVED = "approved"
    REJECTED = "rejected"


class VerdictReason(Enum):
    """Why a verdict is (or is not yet) reached.

    Reasons:
        INSUFFICIENT_PARTICIPATION: Fewer votes than the participation floor
        VOTING_IN_PROGRESS: Neither approval nor rejection is settled yet
        CONSENSUS_IMPOSSIBLE: Disagreement already exceeds 1 - threshold
    """

    INSUFFICIENT_PARTICIPATION = "insufficient_participation"
    VOTING_IN_PROGRESS = "voting_in_progress"
    CONSENSUS_IMPOSSIBLE = "consensus_impossible"


@dataclass(frozen=True)
class QuorumRule:
    """Quorum settings fixed on a forum at creation.

    Attributes:
        quorum_threshold: Fraction of cast votes that must agree (0.5-1.0).
        min_participants: Minimum number of cast votes before any verdict.
    """

    quorum_threshold: float = DEFAULT_QUORUM_THRESHOLD
    min_participants: int = DEFAULT_MIN_PARTICIPANTS

    def __post_init__(self) -> None:
        """Validate quorum settings."""
        if not MIN_QUORUM_THRESHOLD <= self.quorum_threshold <= MAX_QUORUM_THRESHOLD:
            raise ValueError(
                f"quorum_threshold must be between {MIN_QUORUM_THRESHOLD} "
                f"and {MAX_QUORUM_THRESHOLD}, got {self.quorum_threshold}"
            )
        if self.min_participants < 1:
            raise ValueError(
                f"min_participants must be >= 1, got {self.min_participants}"
            )


@dataclass(frozen=True, eq=True)
class Verdict:
    """Outcome of a quorum evaluation.

    Attributes:
        reached: True once the proposal's outcome is settled.
        result: APPROVED or REJECTED when reached, else None.
        reason: Explanation for unreached verdicts and impossible consensus.
        percentage: Agree ratio of cast votes (None when nothing was counted).
    """

    reached: bool
    result: VerdictResult | None = None
    reason: VerdictReason | None = None
    percentage: float | None = None

    @classmethod
    def insufficient_participation(cls) -> Verdict:
        return cls(reached=False, reason=VerdictReason.INSUFFICIENT_PARTICIPATION)

    @classmethod
    def approved(cls, percentage: float) -> Verdict:
        return cls(reached=True, result=VerdictResult.APPROVED, percentage=percentage)

    @classmethod
    def rejected(cls, percentage: float) -> Verdict:
        return cls(
            reached=True,
            result=VerdictResult.REJECTED,
            reason=VerdictReason.CONSENSUS_IMPOSSIBLE,
            percentage=percentage,
        )

    @classmethod
    def in_progress(cls, percentage: float) -> Verdict:
        return cls(
            reached=False,
            reason=VerdictReason.VOTING_IN_PROGRESS,
            percentage=percentage,
        )

    @property
    def is_approved(self) -> bool:
        return self.reached and self.result == VerdictResult.APPROVED

    @property
    def is_rejected(self) -> bool:
        return self.reached and self.result == VerdictResult.REJECTED

    def to_dict(self) -> dict[str, object]:
        """Serialize for logging and system messages."""
        return {
            "reached": self.reached,
            "result": self.result.value if self.result else None,
            "reason": self.reason.value if self.reason else None,
            "percentage": self.percentage,
        }
