"""Pure domain services: quorum, expiry and proposal risk."""

from forum_engine.domain.services.expiry import (
    ExpiryCheck,
    calculate_expiry,
    check_expiry,
    is_expired,
)
from forum_engine.domain.services.proposal_risk import (
    VoteRecommendation,
    calculate_proposal_risk,
    evaluate_proposal_rules,
)
from forum_engine.domain.services.quorum import DEFAULT_QUORUM_RULE, evaluate

__all__ = [
    "DEFAULT_QUORUM_RULE",
    "ExpiryCheck",
    "VoteRecommendation",
    "calculate_expiry",
    "calculate_proposal_risk",
    "check_expiry",
    "evaluate",
    "evaluate_proposal_rules",
    "is_expired",
]
