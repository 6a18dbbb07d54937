"""Domain models for forums, proposals, votes and executions."""

from forum_engine.domain.models.agent import (
    PARENT_DOMAIN,
    AgentName,
    AgentProfile,
    AgentStrategy,
    normalize_agent_name,
)
from forum_engine.domain.models.consensus import (
    DEFAULT_MIN_PARTICIPANTS,
    DEFAULT_QUORUM_THRESHOLD,
    MAX_QUORUM_THRESHOLD,
    MIN_QUORUM_THRESHOLD,
    QuorumRule,
    Verdict,
    VerdictReason,
    VerdictResult,
)
from forum_engine.domain.models.discussion import (
    DiscussionMessage,
    MessageKind,
    MessageOrigin,
)
from forum_engine.domain.models.execution import (
    DEFAULT_CHAIN_ID,
    Execution,
    ExecutionPayload,
    ExecutionResult,
    ExecutionStatus,
    ExecutionSummary,
    SoleExecutor,
    SubmissionResult,
)
from forum_engine.domain.models.forum import (
    FORUM_TRANSITION_MATRIX,
    Forum,
    ForumStatus,
)
from forum_engine.domain.models.proposal import (
    PROPOSAL_TRANSITION_MATRIX,
    TERMINAL_PROPOSAL_STATUSES,
    Proposal,
    ProposalStatus,
)
from forum_engine.domain.models.proposal_action import (
    ActionKind,
    AddLiquidityAction,
    AddLiquidityParams,
    LimitOrderAction,
    LimitOrderParams,
    ProposalAction,
    ProposalHooks,
    RemoveLiquidityAction,
    RemoveLiquidityParams,
    SwapAction,
    SwapParams,
    action_amount,
    action_kind,
    action_pool,
    parse_proposal_action,
    parse_proposal_hooks,
)
from forum_engine.domain.models.retry_policy import RetryPolicy
from forum_engine.domain.models.vote import (
    Vote,
    VoteChoice,
    VoteTally,
    agreeing_agents,
    disagreeing_agents,
    has_agent_voted,
)

__all__ = [
    "DEFAULT_CHAIN_ID",
    "DEFAULT_MIN_PARTICIPANTS",
    "DEFAULT_QUORUM_THRESHOLD",
    "FORUM_TRANSITION_MATRIX",
    "MAX_QUORUM_THRESHOLD",
    "MIN_QUORUM_THRESHOLD",
    "PARENT_DOMAIN",
    "PROPOSAL_TRANSITION_MATRIX",
    "TERMINAL_PROPOSAL_STATUSES",
    "ActionKind",
    "AddLiquidityAction",
    "AddLiquidityParams",
    "AgentName",
    "AgentProfile",
    "AgentStrategy",
    "DiscussionMessage",
    "Execution",
    "ExecutionPayload",
    "ExecutionResult",
    "ExecutionStatus",
    "ExecutionSummary",
    "Forum",
    "ForumStatus",
    "LimitOrderAction",
    "LimitOrderParams",
    "MessageKind",
    "MessageOrigin",
    "Proposal",
    "ProposalAction",
    "ProposalHooks",
    "ProposalStatus",
    "QuorumRule",
    "RemoveLiquidityAction",
    "RemoveLiquidityParams",
    "RetryPolicy",
    "SoleExecutor",
    "SubmissionResult",
    "SwapAction",
    "SwapParams",
    "Verdict",
    "VerdictReason",
    "VerdictResult",
    "Vote",
    "VoteChoice",
    "VoteTally",
    "action_amount",
    "action_kind",
    "action_pool",
    "agreeing_agents",
    "disagreeing_agents",
    "has_agent_voted",
    "normalize_agent_name",
    "parse_proposal_action",
    "parse_proposal_hooks",
]
