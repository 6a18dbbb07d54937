"""Quorum evaluation.

Applies a forum's quorum rule to a proposal's agree/disagree counts.
Evaluation is pure and idempotent, so it is safe to call after every
appended vote.

Rules, first match wins:
    1. total < min_participants -> not reached (insufficient_participation)
    2. agree / total >= threshold -> approved
    3. disagree / total > 1 - threshold -> rejected (consensus_impossible)
    4. otherwise -> not reached (voting_in_progress)
"""

from __future__ import annotations

from forum_engine.domain.models.consensus import QuorumRule, Verdict

DEFAULT_QUORUM_RULE = QuorumRule()


def evaluate(
    agree_count: int,
    disagree_count: int,
    rule: QuorumRule = DEFAULT_QUORUM_RULE,
) -> Verdict:
    """Evaluate a vote tally against a quorum rule.

    Args:
        agree_count: Number of AGREE votes (>= 0).
        disagree_count: Number of DISAGREE votes (>= 0).
        rule: Threshold and participation floor.

    Returns:
        The verdict for the tally.

    Raises:
        ValueError: If either count is negative.
    """
    if agree_count < 0 or disagree_count < 0:
        raise ValueError(
            f"Vote counts must be non-negative, got {agree_count}/{disagree_count}"
        )

    total = agree_count + disagree_count
    # min_participants >= 1, so this also guards total == 0
    if total < rule.min_participants:
        return Verdict.insufficient_participation()

    agree_ratio = agree_count / total
    if agree_ratio >= rule.quorum_threshold:
        return Verdict.approved(agree_ratio)

    if disagree_count / total > 1 - rule.quorum_threshold:
        return Verdict.rejected(agree_ratio)

    return Verdict.in_progress(agree_ratio)
