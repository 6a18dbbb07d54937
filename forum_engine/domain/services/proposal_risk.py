"""Rule-based proposal pre-evaluation.

Agents run these rules before asking a language model how to vote. When
a rule fires its decision is used directly. ``None`` means no rule
applies and the caller should fall back to its own reasoning.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import structlog

from forum_engine.domain.models.agent import AgentProfile, AgentStrategy
from forum_engine.domain.models.proposal_action import (
    ActionKind,
    ProposalAction,
    ProposalHooks,
    action_amount,
    action_kind,
    action_pool,
)
from forum_engine.domain.models.vote import VoteChoice

logger = structlog.get_logger(__name__)

BASE_RISK = 0.5

# Risk adjustments per action kind
ACTION_RISK: dict[ActionKind, float] = {
    ActionKind.SWAP: 0.0,
    ActionKind.ADD_LIQUIDITY: 0.1,  # impermanent loss
    ActionKind.REMOVE_LIQUIDITY: -0.1,
    ActionKind.LIMIT_ORDER: 0.15,  # fill uncertainty
}

ANTI_SANDWICH_DISCOUNT = 0.1

CONSERVATIVE_RISK_CEILING = 0.6
AGGRESSIVE_RISK_CEILING = 0.7


@dataclass(frozen=True)
class VoteRecommendation:
    """A rule-based vote decision.

    Attributes:
        choice: AGREE or DISAGREE.
        confidence: 0.0 to 1.0.
        reasoning: Short human-readable justification.
    """

    choice: VoteChoice
    confidence: float
    reasoning: str


def calculate_proposal_risk(
    action: ProposalAction, hooks: ProposalHooks | None = None
) -> float:
    """Score how risky an action is, from 0.0 (safe) to 1.0 (risky)."""
    risk = BASE_RISK

    amount = action_amount(action)
    if amount is not None:
        if amount > Decimal(1):
            risk += 0.1
        if amount > Decimal(10):
            risk += 0.2

    risk += ACTION_RISK[action_kind(action)]

    if hooks is not None and hooks.anti_sandwich_enabled:
        risk -= ANTI_SANDWICH_DISCOUNT

    return max(0.0, min(1.0, risk))


def _matches_preferred_pool(pool: str, preferred: tuple[str, ...]) -> bool:
    return any(pool in p or p in pool for p in preferred)


def evaluate_proposal_rules(
    action: ProposalAction,
    profile: AgentProfile,
    hooks: ProposalHooks | None = None,
) -> VoteRecommendation | None:
    """Apply strategy and pool rules to decide a vote without a model.

    Rules, first match wins:
        - conservative agents disagree when risk > 0.6
        - aggressive agents agree when risk < 0.7
        - any agent agrees when the action targets a preferred pool

    Args:
        action: The proposed action.
        profile: The voting agent's profile.
        hooks: The proposal's execution hooks, if any.

    Returns:
        A recommendation, or None when no rule applies.
    """
    risk = calculate_proposal_risk(action, hooks)
    risk_pct = f"{risk * 100:.0f}%"

    if profile.strategy is AgentStrategy.CONSERVATIVE and risk > CONSERVATIVE_RISK_CEILING:
        return VoteRecommendation(
            choice=VoteChoice.DISAGREE,
            confidence=0.8,
            reasoning=f"Risk score ({risk_pct}) exceeds conservative threshold",
        )

    if profile.strategy is AgentStrategy.AGGRESSIVE and risk < AGGRESSIVE_RISK_CEILING:
        return VoteRecommendation(
            choice=VoteChoice.AGREE,
            confidence=0.7,
            reasoning=f"Risk score ({risk_pct}) is within aggressive tolerance",
        )

    pool = action_pool(action)
    if pool and _matches_preferred_pool(pool, profile.preferred_pools):
        return VoteRecommendation(
            choice=VoteChoice.AGREE,
            confidence=0.6,
            reasoning=f"Proposal involves preferred pool: {pool}",
        )

    logger.debug(
        "no_rule_matched",
        agent_id=profile.agent_id,
        action=action_kind(action).value,
        risk=risk,
    )
    return None
