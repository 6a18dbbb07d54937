"""Bootstrap wiring for an in-memory forum engine.

``build_engine`` assembles the three services over the in-memory stubs.
The returned ForumEngine also offers the small slice of API-layer
behaviour (opening forums, joining, submitting and executing proposals)
that callers need to drive the engine without a web front end.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

import structlog

from forum_engine.application.ports.forum_metrics import ForumMetricsProtocol
from forum_engine.application.ports.submission_capability import (
    SubmissionCapabilityProtocol,
)
from forum_engine.application.ports.time_authority import TimeAuthorityProtocol
from forum_engine.application.services.discussion_scheduler_service import (
    DiscussionSchedulerService,
)
from forum_engine.application.services.execution_coordinator_service import (
    ExecutionCoordinatorService,
    ExecutionOutcome,
    Sleeper,
)
from forum_engine.application.services.proposal_lifecycle_service import (
    ProposalLifecycleService,
)
from forum_engine.config.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from forum_engine.domain.errors import (
    ForumNotActiveError,
    ForumNotFoundError,
    NotForumParticipantError,
    ProposalAlreadyVotingError,
)
from forum_engine.domain.models.agent import AgentProfile, normalize_agent_name
from forum_engine.domain.models.execution import SoleExecutor
from forum_engine.domain.models.forum import Forum, ForumStatus
from forum_engine.domain.models.proposal import Proposal, ProposalStatus
from forum_engine.domain.models.proposal_action import (
    ActionKind,
    parse_proposal_action,
    parse_proposal_hooks,
)
from forum_engine.domain.services.expiry import calculate_expiry
from forum_engine.infrastructure.cache.ttl_cache import TTLCache
from forum_engine.infrastructure.stubs.agent_directory_stub import AgentDirectoryStub
from forum_engine.infrastructure.stubs.execution_repository_stub import (
    ExecutionRepositoryStub,
)
from forum_engine.infrastructure.stubs.forum_repository_stub import (
    ForumRepositoryStub,
)
from forum_engine.infrastructure.stubs.message_log_stub import MessageLogStub
from forum_engine.infrastructure.stubs.proposal_repository_stub import (
    ProposalRepositoryStub,
)
from forum_engine.infrastructure.stubs.submission_capability_stub import (
    ScriptedSubmissionCapability,
)
from forum_engine.infrastructure.stubs.vote_store_stub import VoteStoreStub
from forum_engine.infrastructure.time import SystemTimeAuthority

logger = structlog.get_logger(__name__)


@dataclass
class ForumEngine:
    """Assembled services plus the stores behind them."""

    config: EngineConfig
    time_authority: TimeAuthorityProtocol
    forums: ForumRepositoryStub
    proposals: ProposalRepositoryStub
    votes: VoteStoreStub
    messages: MessageLogStub
    executions: ExecutionRepositoryStub
    agents: AgentDirectoryStub
    lifecycle: ProposalLifecycleService
    scheduler: DiscussionSchedulerService
    coordinator: ExecutionCoordinatorService
    _submit_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def register_agent(self, profile: AgentProfile) -> AgentProfile:
        return self.agents.register(profile)

    async def open_forum(
        self, goal: str, creator_id: str, pool: str | None = None
    ) -> Forum:
        """Open a forum with the configured quorum rule.

        The creator joins as the first participant and is the forum's
        designated executor.
        """
        creator = normalize_agent_name(creator_id).full
        forum = Forum(
            goal=goal,
            creator_id=creator,
            quorum_rule=self.config.consensus.quorum_rule,
            timeout_minutes=self.config.consensus.timeout_minutes,
            created_at=self.time_authority.now(),
            pool=pool,
            participants=(creator,),
        )
        await self.forums.save_forum(forum)
        logger.info("forum_opened", forum_id=str(forum.id), creator=creator, pool=pool)
        return forum

    async def join_forum(self, forum_id: UUID, agent_id: str) -> Forum:
        """Add an agent to a forum's participants.

        Raises:
            ForumNotFoundError: Forum does not exist.
            InvalidForumTransitionError: Forum no longer accepts members.
        """
        forum = await self.forums.get_forum(forum_id)
        if forum is None:
            raise ForumNotFoundError(forum_id)
        joined = forum.with_participant(normalize_agent_name(agent_id).full)
        if joined is not forum:
            await self.forums.save_forum(joined)
        return joined

    async def submit_proposal(
        self,
        forum_id: UUID,
        proposer_id: str,
        action: Mapping[str, Any],
        hooks: Mapping[str, Any] | None = None,
        description: str | None = None,
    ) -> Proposal:
        """Validate and store a proposal in VOTING.

        A forum accepts proposals only while ACTIVE and votes on one
        proposal at a time.

        Raises:
            ForumNotFoundError: Forum does not exist.
            NotForumParticipantError: Proposer is not a participant.
            ForumNotActiveError: Forum is not ACTIVE.
            ProposalAlreadyVotingError: Forum has a proposal in VOTING.
            InvalidProposalActionError: Action or hooks payload is malformed.
        """
        parsed_action = parse_proposal_action(action)
        parsed_hooks = parse_proposal_hooks(hooks)
        proposer = normalize_agent_name(proposer_id).full

        async with self._submit_lock:
            forum = await self.forums.get_forum(forum_id)
            if forum is None:
                raise ForumNotFoundError(forum_id)
            if not forum.is_participant(proposer):
                raise NotForumParticipantError(forum_id, proposer)
            if forum.status is not ForumStatus.ACTIVE:
                raise ForumNotActiveError(forum_id, forum.status)
            for open_proposal in await self.proposals.list_by_status(
                ProposalStatus.VOTING
            ):
                if open_proposal.forum_id != forum_id:
                    continue
                # An overdue proposal no longer blocks the forum
                current = await self.lifecycle.check_expiry(open_proposal.id)
                if current.status is ProposalStatus.VOTING:
                    raise ProposalAlreadyVotingError(forum_id, open_proposal.id)

            now = self.time_authority.now()
            proposal = Proposal(
                forum_id=forum_id,
                proposer_id=proposer,
                action=parsed_action,
                hooks=parsed_hooks,
                description=description,
                created_at=now,
                expires_at=calculate_expiry(now, forum.timeout_minutes),
            )
            await self.proposals.save_proposal(proposal)
        logger.info(
            "proposal_submitted",
            proposal_id=str(proposal.id),
            forum_id=str(forum_id),
            action=proposal.action_kind.value,
        )
        return proposal

    async def execute_proposal(
        self, proposal_id: UUID, signer: Any = None
    ) -> ExecutionOutcome:
        """Execute an approved proposal as its forum's creator.

        Raises:
            ProposalNotFoundError: Proposal does not exist.
            ForumNotFoundError: Owning forum does not exist.
            InvalidProposalStateError: Proposal is not APPROVED.
            UnknownActionError: No capability for the action kind.
        """
        proposal = await self.lifecycle.get_proposal(proposal_id)
        forum = await self.forums.get_forum(proposal.forum_id)
        if forum is None:
            raise ForumNotFoundError(proposal.forum_id)
        return await self.coordinator.execute_proposal(
            proposal_id,
            SoleExecutor(agent_id=forum.creator_id, signer=signer),
            self.config.execution,
        )


def build_engine(
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    *,
    time_authority: TimeAuthorityProtocol | None = None,
    capabilities: Mapping[ActionKind, SubmissionCapabilityProtocol] | None = None,
    metrics: ForumMetricsProtocol | None = None,
    sleep: Sleeper = asyncio.sleep,
) -> ForumEngine:
    """Assemble an engine over in-memory stores.

    Args:
        config: Engine configuration.
        time_authority: Clock. Defaults to the system clock.
        capabilities: Submission capability per action kind. Defaults to
            a scripted capability that always succeeds, for every kind.
        metrics: Optional metrics sink.
        sleep: Sleep used for execution backoff and sequencing.

    Returns:
        The assembled engine.
    """
    clock = time_authority or SystemTimeAuthority()
    if capabilities is None:
        default_capability = ScriptedSubmissionCapability()
        capabilities = {kind: default_capability for kind in ActionKind}

    forums = ForumRepositoryStub()
    proposals = ProposalRepositoryStub()
    votes = VoteStoreStub()
    messages = MessageLogStub()
    executions = ExecutionRepositoryStub()
    agents = AgentDirectoryStub(
        TTLCache(config.agent_cache_ttl_seconds, clock, name="agents")
    )

    lifecycle = ProposalLifecycleService(
        proposals=proposals,
        forums=forums,
        votes=votes,
        messages=messages,
        time_authority=clock,
        metrics=metrics,
    )
    scheduler = DiscussionSchedulerService(
        messages=messages,
        time_authority=clock,
        policy=config.discussion,
        metrics=metrics,
    )
    coordinator = ExecutionCoordinatorService(
        capabilities=capabilities,
        executions=executions,
        lifecycle=lifecycle,
        time_authority=clock,
        metrics=metrics,
        sleep=sleep,
    )

    logger.info("forum_engine_built", environment=config.environment)
    return ForumEngine(
        config=config,
        time_authority=clock,
        forums=forums,
        proposals=proposals,
        votes=votes,
        messages=messages,
        executions=executions,
        agents=agents,
        lifecycle=lifecycle,
        scheduler=scheduler,
        coordinator=coordinator,
    )
