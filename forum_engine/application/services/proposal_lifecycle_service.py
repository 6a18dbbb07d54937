"""Proposal lifecycle service.

Owns the write path for a proposal's status once voting begins:

    VOTING -> APPROVED | REJECTED | EXPIRED
    APPROVED -> EXECUTING -> EXECUTED | FAILED

Every mutation of a proposal runs under a per-proposal asyncio.Lock, so
two near-simultaneous votes are evaluated one after the other against
fresh counters. The vote store's atomic append is the final guard on
vote uniqueness.

Expiry is pull-based. A proposal is checked whenever it is touched, and
an external scheduler may call ``sweep_expired`` periodically. Nothing
here starts a timer.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from uuid import UUID

import structlog

from forum_engine.application.ports.forum_metrics import ForumMetricsProtocol
from forum_engine.application.ports.forum_repository import ForumRepositoryProtocol
from forum_engine.application.ports.message_log import MessageLogProtocol
from forum_engine.application.ports.proposal_repository import (
    ProposalRepositoryProtocol,
)
from forum_engine.application.ports.time_authority import TimeAuthorityProtocol
from forum_engine.application.ports.vote_store import VoteStoreProtocol
from forum_engine.domain.errors import (
    DuplicateVoteError,
    ForumNotFoundError,
    InvalidProposalStateError,
    NotForumParticipantError,
    ProposalExpiredError,
    ProposalNotFoundError,
)
from forum_engine.domain.models.consensus import Verdict, VerdictResult
from forum_engine.domain.models.discussion import DiscussionMessage, MessageKind
from forum_engine.domain.models.forum import Forum, ForumStatus
from forum_engine.domain.models.proposal import Proposal, ProposalStatus
from forum_engine.domain.models.vote import Vote, VoteChoice
from forum_engine.domain.services.expiry import check_expiry, is_expired
from forum_engine.domain.services.quorum import evaluate

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class VoteOutcome:
    """Result of recording one vote.

    Attributes:
        vote: The stored vote.
        proposal: The proposal after counters and status were updated.
        verdict: Quorum verdict for the updated counters.
    """

    vote: Vote
    proposal: Proposal
    verdict: Verdict


class ProposalLifecycleService:
    """State machine for proposal voting and execution status.

    Example:
        >>> service = ProposalLifecycleService(
        ...     proposals=proposal_repo,
        ...     forums=forum_repo,
        ...     votes=vote_store,
        ...     messages=message_log,
        ...     time_authority=SystemTimeAuthority(),
        ... )
        >>> outcome = await service.record_vote(proposal_id, "alpha.uniforum.eth", VoteChoice.AGREE)
        >>> outcome.verdict.reached
        False
    """

    def __init__(
        self,
        proposals: ProposalRepositoryProtocol,
        forums: ForumRepositoryProtocol,
        votes: VoteStoreProtocol,
        messages: MessageLogProtocol,
        time_authority: TimeAuthorityProtocol,
        metrics: ForumMetricsProtocol | None = None,
    ) -> None:
        """Initialize the lifecycle service.

        Args:
            proposals: Proposal persistence.
            forums: Forum persistence.
            votes: Append-only vote store.
            messages: Forum message log for system messages.
            time_authority: Clock used for expiry and resolution stamps.
            metrics: Optional metrics sink.
        """
        self._proposals = proposals
        self._forums = forums
        self._votes = votes
        self._messages = messages
        self._time = time_authority
        self._metrics = metrics
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._settled: set[UUID] = set()
        self._log = logger.bind(component="proposal_lifecycle")

    def _lock_for(self, proposal_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(proposal_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[proposal_id] = lock
        return lock

    @asynccontextmanager
    async def _guard(self, proposal_id: UUID) -> AsyncIterator[None]:
        """Hold the proposal's lock. Drop it on exit once the proposal is terminal or missing."""
        try:
            async with self._lock_for(proposal_id):
                yield
        finally:
            if proposal_id in self._settled:
                self._settled.discard(proposal_id)
                self._locks.pop(proposal_id, None)

    # =========================================================================
    # Voting
    # =========================================================================

    async def record_vote(
        self,
        proposal_id: UUID,
        agent_id: str,
        choice: VoteChoice,
        reason: str | None = None,
    ) -> VoteOutcome:
        """Record a vote and re-evaluate the proposal's quorum.

        Args:
            proposal_id: Proposal being voted on.
            agent_id: Voting agent.
            choice: AGREE or DISAGREE.
            reason: Optional free-text reasoning.

        Returns:
            VoteOutcome with the stored vote, updated proposal and verdict.

        Raises:
            ProposalNotFoundError: Proposal does not exist.
            DuplicateVoteError: Agent already voted on this proposal.
            InvalidProposalStateError: Proposal is not VOTING.
            ProposalExpiredError: Proposal passed its deadline. It has
                been moved to EXPIRED before this is raised.
            ForumNotFoundError: Owning forum does not exist.
            NotForumParticipantError: Agent is not a forum participant.
        """
        log = self._log.bind(proposal_id=str(proposal_id), agent_id=agent_id)

        async with self._guard(proposal_id):
            proposal = await self._load_guarded(proposal_id)

            # Step 1: Duplicate check
            if await self._votes.has_voted(proposal_id, agent_id):
                log.info("duplicate_vote_rejected")
                raise DuplicateVoteError(proposal_id, agent_id)

            # Step 2: Only VOTING proposals accept votes
            if proposal.status is not ProposalStatus.VOTING:
                log.info("vote_rejected_invalid_state", status=proposal.status.value)
                raise InvalidProposalStateError(
                    proposal_id=proposal_id,
                    current=proposal.status,
                    attempted=ProposalStatus.VOTING,
                    allowed=sorted(
                        proposal.status.valid_transitions(), key=lambda s: s.value
                    ),
                )

            # Step 3: Lazy expiry
            now = self._time.now()
            if is_expired(proposal.expires_at, now):
                await self._expire(proposal)
                log.info("vote_rejected_expired", expires_at=proposal.expires_at.isoformat())
                raise ProposalExpiredError(proposal_id, proposal.expires_at, now)

            # Step 4: Eligibility
            forum = await self._load_forum(proposal.forum_id)
            if not forum.is_participant(agent_id):
                log.info("vote_rejected_not_participant", forum_id=str(forum.id))
                raise NotForumParticipantError(forum.id, agent_id)

            # Step 5: Count and evaluate before anything is written
            updated = proposal.with_vote(choice)
            verdict = evaluate(
                updated.agree_count, updated.disagree_count, forum.quorum_rule
            )
            if verdict.reached:
                target = (
                    ProposalStatus.APPROVED
                    if verdict.result is VerdictResult.APPROVED
                    else ProposalStatus.REJECTED
                )
                updated = updated.with_status(target, resolved_at=now)

            # Step 6: Append. The store re-checks uniqueness atomically.
            vote = await self._votes.append_vote(
                Vote(
                    proposal_id=proposal_id,
                    agent_id=agent_id,
                    choice=choice,
                    created_at=now,
                    reason=reason,
                )
            )

            # Step 7: Persist counters and status together. A vote whose
            # counters were not stored is retracted so the agent can retry.
            try:
                stored = await self._proposals.update_proposal_status(
                    proposal_id,
                    updated.status,
                    agree_count=updated.agree_count,
                    disagree_count=updated.disagree_count,
                    resolved_at=updated.resolved_at,
                )
            except Exception as exc:
                await self._votes.retract_vote(proposal_id, agent_id)
                log.error("vote_retracted", error=str(exc))
                raise

            if self._metrics is not None:
                self._metrics.record_vote(choice.value)
                self._metrics.record_verdict(
                    verdict.result.value if verdict.result else None,
                    verdict.reason.value if verdict.reason else None,
                )

            log.info(
                "vote_recorded",
                choice=choice.value,
                agree=stored.agree_count,
                disagree=stored.disagree_count,
                verdict=verdict.to_dict(),
            )

            if verdict.reached:
                await self._on_resolved(stored, forum, verdict)

            return VoteOutcome(vote=vote, proposal=stored, verdict=verdict)

    async def _on_resolved(self, proposal: Proposal, forum: Forum, verdict: Verdict) -> None:
        self._record_transition(proposal)
        pct = f"{(verdict.percentage or 0.0) * 100:.0f}%"
        if verdict.is_approved:
            await self._move_forum(forum, ForumStatus.CONSENSUS)
            content = f"Consensus reached: proposal {proposal.id} approved with {pct} agreement"
        else:
            content = f"Proposal {proposal.id} rejected: consensus impossible at {pct} agreement"
        await self._post_system_message(forum.id, content, MessageKind.RESULT)
        self._log.info(
            "consensus_reached" if verdict.is_approved else "consensus_impossible",
            proposal_id=str(proposal.id),
            forum_id=str(forum.id),
            percentage=verdict.percentage,
        )

    # =========================================================================
    # Execution status
    # =========================================================================

    async def begin_execution(self, proposal_id: UUID) -> Proposal:
        """Move an APPROVED proposal to EXECUTING.

        Raises:
            ProposalNotFoundError: Proposal does not exist.
            InvalidProposalStateError: Proposal is not APPROVED.
        """
        async with self._guard(proposal_id):
            proposal = await self._load_guarded(proposal_id)
            updated = proposal.with_status(ProposalStatus.EXECUTING)
            stored = await self._proposals.update_proposal_status(
                proposal_id, updated.status
            )
            self._record_transition(stored)

            forum = await self._forums.get_forum(proposal.forum_id)
            if forum is not None:
                await self._move_forum(forum, ForumStatus.EXECUTING)

            self._log.info("execution_started", proposal_id=str(proposal_id))
            return stored

    async def complete_execution(
        self, proposal_id: UUID, all_succeeded: bool
    ) -> Proposal:
        """Move an EXECUTING proposal to EXECUTED or FAILED.

        On failure the owning forum reopens (ACTIVE) so a new proposal can
        be made.

        Args:
            proposal_id: Proposal being completed.
            all_succeeded: True iff every designated execution succeeded.

        Raises:
            ProposalNotFoundError: Proposal does not exist.
            InvalidProposalStateError: Proposal is not EXECUTING.
        """
        target = ProposalStatus.EXECUTED if all_succeeded else ProposalStatus.FAILED
        async with self._guard(proposal_id):
            proposal = await self._load_guarded(proposal_id)
            updated = proposal.with_status(target)
            stored = await self._proposals.update_proposal_status(
                proposal_id, updated.status
            )
            self._record_transition(stored)

            forum = await self._forums.get_forum(proposal.forum_id)
            if forum is not None:
                await self._move_forum(
                    forum,
                    ForumStatus.EXECUTED if all_succeeded else ForumStatus.ACTIVE,
                )
                await self._post_system_message(
                    forum.id,
                    f"Execution of proposal {proposal_id} "
                    f"{'succeeded' if all_succeeded else 'failed'}",
                    MessageKind.RESULT,
                )

            self._log.info(
                "execution_completed",
                proposal_id=str(proposal_id),
                status=stored.status.value,
            )
            return stored

    # =========================================================================
    # Expiry
    # =========================================================================

    async def check_expiry(self, proposal_id: UUID) -> Proposal:
        """Expire a VOTING proposal that passed its deadline.

        Proposals that are not due, or not VOTING, are returned unchanged.

        Raises:
            ProposalNotFoundError: Proposal does not exist.
        """
        async with self._guard(proposal_id):
            proposal = await self._load_guarded(proposal_id)
            check = check_expiry(proposal, self._time.now())
            if not check.expired:
                return proposal
            return await self._expire(proposal)

    async def sweep_expired(self) -> list[Proposal]:
        """Check every VOTING proposal and expire the overdue ones.

        Returns:
            Proposals that were moved to EXPIRED by this sweep.
        """
        expired: list[Proposal] = []
        for candidate in await self._proposals.list_by_status(ProposalStatus.VOTING):
            result = await self.check_expiry(candidate.id)
            if result.status is ProposalStatus.EXPIRED:
                expired.append(result)
        self._log.info("expiry_sweep_completed", expired=len(expired))
        return expired

    async def _expire(self, proposal: Proposal) -> Proposal:
        now = self._time.now()
        updated = proposal.with_status(ProposalStatus.EXPIRED, resolved_at=now)
        stored = await self._proposals.update_proposal_status(
            proposal.id, updated.status, resolved_at=updated.resolved_at
        )
        self._record_transition(stored)
        await self._post_system_message(
            proposal.forum_id,
            f"Proposal {proposal.id} expired without consensus",
            MessageKind.SYSTEM,
        )
        self._log.info(
            "proposal_expired",
            proposal_id=str(proposal.id),
            expires_at=proposal.expires_at.isoformat(),
        )
        return stored

    # =========================================================================
    # Helpers
    # =========================================================================

    async def get_proposal(self, proposal_id: UUID) -> Proposal:
        """Load a proposal.

        Raises:
            ProposalNotFoundError: Proposal does not exist.
        """
        return await self._load_proposal(proposal_id)

    async def _load_proposal(self, proposal_id: UUID) -> Proposal:
        proposal = await self._proposals.get_proposal(proposal_id)
        if proposal is None:
            raise ProposalNotFoundError(proposal_id)
        return proposal

    async def _load_guarded(self, proposal_id: UUID) -> Proposal:
        try:
            proposal = await self._load_proposal(proposal_id)
        except ProposalNotFoundError:
            self._settled.add(proposal_id)
            raise
        if proposal.status.is_terminal:
            self._settled.add(proposal_id)
        return proposal

    async def _load_forum(self, forum_id: UUID) -> Forum:
        forum = await self._forums.get_forum(forum_id)
        if forum is None:
            raise ForumNotFoundError(forum_id)
        return forum

    async def _move_forum(self, forum: Forum, status: ForumStatus) -> None:
        """Mirror a proposal transition onto its forum when permitted."""
        if forum.status is status:
            return
        if status not in forum.status.valid_transitions():
            self._log.warning(
                "forum_transition_skipped",
                forum_id=str(forum.id),
                current=forum.status.value,
                attempted=status.value,
            )
            return
        await self._forums.save_forum(forum.with_status(status))

    async def _post_system_message(
        self, forum_id: UUID, content: str, kind: MessageKind
    ) -> None:
        await self._messages.append_message(
            DiscussionMessage.system(forum_id, content, self._time.now(), kind=kind)
        )

    def _record_transition(self, proposal: Proposal) -> None:
        if proposal.status.is_terminal:
            self._settled.add(proposal.id)
        if self._metrics is not None:
            self._metrics.record_proposal_transition(proposal.status.value)
