"""Execution domain models.

One forum member, the designated executor, submits the approved action
on behalf of everyone who voted for it. The coordinator still reports
results as a list so that callers can aggregate them uniformly.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

import structlog

from forum_engine.domain.errors.execution import NoExecutorError
from forum_engine.domain.models.forum import Forum
from forum_engine.domain.models.proposal import Proposal, ProposalStatus
from forum_engine.domain.models.proposal_action import (
    ActionKind,
    ProposalAction,
    ProposalHooks,
    SwapAction,
)

logger = structlog.get_logger(__name__)

# Unichain Sepolia
DEFAULT_CHAIN_ID = 1301


class ExecutionStatus(Enum):
    """Status of one executor's attempt."""

    PENDING = "pending"
    EXECUTING = "executing"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_final(self) -> bool:
        return self in (ExecutionStatus.SUCCESS, ExecutionStatus.FAILED)


@dataclass(frozen=True, eq=True)
class SoleExecutor:
    """The single agent that submits an approved proposal.

    Attributes:
        agent_id: Executor agent identifier.
        signer: Opaque signing capability handed to the submission layer.
    """

    agent_id: str
    signer: Any = None

    @classmethod
    def from_executor_list(cls, executors: Sequence[SoleExecutor]) -> SoleExecutor:
        """Select the designated executor from a list.

        Only the first entry acts. Additional entries are ignored.

        Raises:
            NoExecutorError: If ``executors`` is empty.
        """
        if not executors:
            raise NoExecutorError()
        chosen = executors[0]
        if len(executors) > 1:
            logger.info(
                "extra_executors_ignored",
                executor=chosen.agent_id,
                ignored=[e.agent_id for e in executors[1:]],
            )
        return chosen


@dataclass(frozen=True, eq=True)
class SubmissionResult:
    """Uniform result contract of a submission capability.

    Attributes:
        success: True when the transaction was accepted.
        tx_hash: Transaction hash on success.
        error: Failure text when ``success`` is False.
        gas_used: Optional gas metric.
    """

    success: bool
    tx_hash: str | None = None
    error: str | None = None
    gas_used: int | None = None

    @classmethod
    def ok(cls, tx_hash: str, gas_used: int | None = None) -> SubmissionResult:
        return cls(success=True, tx_hash=tx_hash, gas_used=gas_used)

    @classmethod
    def failure(cls, error: str) -> SubmissionResult:
        return cls(success=False, error=error)


@dataclass(frozen=True, eq=True)
class ExecutionResult:
    """Outcome of one executor's submission, after retries.

    Attributes:
        agent_id: Executor that submitted.
        status: SUCCESS or FAILED.
        tx_hash: Transaction hash for successful submissions.
        error: Error text for failed submissions.
        gas_used: Optional gas metric.
        attempts: Number of capability invocations made.
    """

    agent_id: str
    status: ExecutionStatus
    tx_hash: str | None = None
    error: str | None = None
    gas_used: int | None = None
    attempts: int = 1

    @property
    def succeeded(self) -> bool:
        return self.status is ExecutionStatus.SUCCESS

    @classmethod
    def from_submission(
        cls, agent_id: str, submission: SubmissionResult, attempts: int
    ) -> ExecutionResult:
        if submission.success:
            return cls(
                agent_id=agent_id,
                status=ExecutionStatus.SUCCESS,
                tx_hash=submission.tx_hash,
                gas_used=submission.gas_used,
                attempts=attempts,
            )
        return cls(
            agent_id=agent_id,
            status=ExecutionStatus.FAILED,
            error=submission.error or "Unknown error",
            attempts=attempts,
        )


@dataclass(frozen=True, eq=True)
class Execution:
    """Persisted record of one (proposal, executor) attempt."""

    proposal_id: UUID
    forum_id: UUID
    agent_id: str
    status: ExecutionStatus = ExecutionStatus.PENDING
    tx_hash: str | None = None
    error: str | None = None
    gas_used: int | None = None
    completed_at: datetime | None = None
    id: UUID = field(default_factory=uuid4)

    def with_result(self, result: ExecutionResult, completed_at: datetime) -> Execution:
        """Return the record finalized with ``result``."""
        return replace(
            self,
            status=result.status,
            tx_hash=result.tx_hash,
            error=result.error,
            gas_used=result.gas_used,
            completed_at=completed_at,
        )


@dataclass(frozen=True, eq=True)
class ExecutionSummary:
    """Aggregate of a batch of execution results.

    Attributes:
        total: Number of results.
        successful: Number of SUCCESS results.
        failed: Number of FAILED results.
        tx_hashes: Hashes of successful submissions, in result order.
        errors: ``"<agent>: <error>"`` lines for failed submissions.
    """

    total: int
    successful: int
    failed: int
    tx_hashes: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    @classmethod
    def from_results(cls, results: Iterable[ExecutionResult]) -> ExecutionSummary:
        results = list(results)
        successes = [r for r in results if r.succeeded]
        failures = [r for r in results if not r.succeeded]
        return cls(
            total=len(results),
            successful=len(successes),
            failed=len(failures),
            tx_hashes=tuple(r.tx_hash for r in successes if r.tx_hash),
            errors=tuple(f"{r.agent_id}: {r.error}" for r in failures),
        )


@dataclass(frozen=True)
class ExecutionPayload:
    """Everything an executor needs to act on an approved proposal."""

    proposal_id: UUID
    forum_id: UUID
    executor_id: str
    action_kind: ActionKind
    action: ProposalAction
    chain_id: int
    hooks: ProposalHooks | None = None
    deadline: int | None = None
    forum_goal: str | None = None
    approved_at: datetime | None = None

    @classmethod
    def for_proposal(
        cls,
        proposal: Proposal,
        forum: Forum,
        executor_id: str,
        chain_id: int = DEFAULT_CHAIN_ID,
    ) -> ExecutionPayload | None:
        """Build the payload for an approved or executing proposal.

        Returns:
            The payload, or None if the proposal is not executable.
        """
        if proposal.status not in (ProposalStatus.APPROVED, ProposalStatus.EXECUTING):
            return None
        deadline = (
            proposal.action.params.deadline
            if isinstance(proposal.action, SwapAction)
            else None
        )
        return cls(
            proposal_id=proposal.id,
            forum_id=forum.id,
            executor_id=executor_id,
            action_kind=proposal.action_kind,
            action=proposal.action,
            chain_id=chain_id,
            hooks=proposal.hooks,
            deadline=deadline,
            forum_goal=forum.goal,
            approved_at=proposal.resolved_at,
        )
