"""Execution coordinator.

Submits an approved proposal's action through the submission capability
registered for its action kind, retrying thrown errors with exponential
backoff, and aggregates per-executor results.

Only one executor acts per approved proposal: the forum's designated
executor (its creator). ``run`` therefore takes a SoleExecutor. Callers
holding a list select from it with ``SoleExecutor.from_executor_list``,
which keeps the first entry and ignores the rest. ``run_batch`` keeps the
multi-executor sequencing (sequential with a delay, or parallel fan-out)
for callers that really do submit for several agents.

Error handling:
    - Unknown action kind: raises UnknownActionError before any dispatch.
    - Capability raises: retried per RetryPolicy. Exhausted retries give
      a FAILED result. Nothing transient escapes the coordinator.
    - Capability returns success=False: FAILED result, not retried.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from uuid import UUID

import structlog

from forum_engine.application.ports.execution_repository import (
    ExecutionRepositoryProtocol,
)
from forum_engine.application.ports.forum_metrics import ForumMetricsProtocol
from forum_engine.application.ports.submission_capability import (
    SubmissionCapabilityProtocol,
)
from forum_engine.application.ports.time_authority import TimeAuthorityProtocol
from forum_engine.application.services.proposal_lifecycle_service import (
    ProposalLifecycleService,
)
from forum_engine.config.execution_config import (
    DEFAULT_EXECUTION_POLICY,
    ExecutionPolicy,
)
from forum_engine.domain.errors import InvalidProposalStateError, UnknownActionError
from forum_engine.domain.models.execution import (
    Execution,
    ExecutionResult,
    ExecutionStatus,
    ExecutionSummary,
    SoleExecutor,
)
from forum_engine.domain.models.proposal import Proposal, ProposalStatus
from forum_engine.domain.models.proposal_action import ActionKind

logger = structlog.get_logger(__name__)

Sleeper = Callable[[float], Awaitable[None]]

EXECUTABLE_STATUSES = frozenset({ProposalStatus.APPROVED, ProposalStatus.EXECUTING})


def summarize(results: Sequence[ExecutionResult]) -> ExecutionSummary:
    """Aggregate execution results. Pure."""
    return ExecutionSummary.from_results(results)


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of the full execute-proposal workflow.

    Attributes:
        proposal: The proposal in its terminal status.
        results: Per-executor results.
        summary: Aggregate of ``results``.
    """

    proposal: Proposal
    results: tuple[ExecutionResult, ...]
    summary: ExecutionSummary


class ExecutionCoordinatorService:
    """Submits approved proposals and reports per-executor outcomes."""

    def __init__(
        self,
        capabilities: Mapping[ActionKind, SubmissionCapabilityProtocol],
        executions: ExecutionRepositoryProtocol,
        lifecycle: ProposalLifecycleService,
        time_authority: TimeAuthorityProtocol,
        metrics: ForumMetricsProtocol | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """Initialize the coordinator.

        Args:
            capabilities: Submission capability per action kind.
            executions: Execution record persistence.
            lifecycle: Proposal lifecycle for the execute-proposal workflow.
            time_authority: Clock for completion stamps and durations.
            metrics: Optional metrics sink.
            sleep: Awaitable sleep used for backoff and sequencing delays.
        """
        self._capabilities = dict(capabilities)
        self._executions = executions
        self._lifecycle = lifecycle
        self._time = time_authority
        self._metrics = metrics
        self._sleep = sleep
        self._log = logger.bind(component="execution_coordinator")

    def _capability_for(self, kind: ActionKind) -> SubmissionCapabilityProtocol:
        capability = self._capabilities.get(kind)
        if capability is None:
            raise UnknownActionError(kind.value)
        return capability

    # =========================================================================
    # Workflow
    # =========================================================================

    async def execute_proposal(
        self,
        proposal_id: UUID,
        executor: SoleExecutor,
        policy: ExecutionPolicy = DEFAULT_EXECUTION_POLICY,
    ) -> ExecutionOutcome:
        """Run an APPROVED proposal end to end.

        begin_execution -> run -> summarize -> complete_execution.

        Raises:
            ProposalNotFoundError: Proposal does not exist.
            InvalidProposalStateError: Proposal is not APPROVED.
            UnknownActionError: No capability for the action kind. Raised
                before the proposal leaves APPROVED.
        """
        current = await self._lifecycle.get_proposal(proposal_id)
        self._capability_for(current.action_kind)
        proposal = await self._lifecycle.begin_execution(proposal_id)
        results = await self.run(proposal, executor, policy)
        summary = summarize(results)
        final = await self._lifecycle.complete_execution(
            proposal_id, all_succeeded=summary.all_succeeded
        )
        self._log.info(
            "proposal_execution_finished",
            proposal_id=str(proposal_id),
            status=final.status.value,
            successful=summary.successful,
            failed=summary.failed,
            tx_hashes=list(summary.tx_hashes),
        )
        return ExecutionOutcome(proposal=final, results=tuple(results), summary=summary)

    async def run(
        self,
        proposal: Proposal,
        executor: SoleExecutor,
        policy: ExecutionPolicy = DEFAULT_EXECUTION_POLICY,
    ) -> list[ExecutionResult]:
        """Submit the proposal's action for the designated executor.

        Returns:
            A single-element list with the executor's result.
        """
        return await self.run_batch(proposal, [executor], policy)

    async def run_for_executors(
        self,
        proposal: Proposal,
        executors: Sequence[SoleExecutor],
        policy: ExecutionPolicy = DEFAULT_EXECUTION_POLICY,
    ) -> list[ExecutionResult]:
        """Run for the first executor of ``executors``, ignoring the rest.

        Raises:
            NoExecutorError: If ``executors`` is empty.
        """
        return await self.run(
            proposal, SoleExecutor.from_executor_list(executors), policy
        )

    async def run_batch(
        self,
        proposal: Proposal,
        executors: Sequence[SoleExecutor],
        policy: ExecutionPolicy = DEFAULT_EXECUTION_POLICY,
    ) -> list[ExecutionResult]:
        """Submit for each executor, sequentially or in parallel.

        Sequential mode waits for each executor's result to be recorded,
        then ``delay_between_ms``, before starting the next one. Parallel
        mode starts every submission at once and never lets one
        executor's failure abort the others.

        Returns:
            Results in executor order.

        Raises:
            InvalidProposalStateError: Proposal is not APPROVED/EXECUTING.
            UnknownActionError: No capability for the action kind.
        """
        if proposal.status not in EXECUTABLE_STATUSES:
            raise InvalidProposalStateError(
                proposal_id=proposal.id,
                current=proposal.status,
                attempted=ProposalStatus.EXECUTING,
                allowed=sorted(
                    proposal.status.valid_transitions(), key=lambda s: s.value
                ),
            )
        capability = self._capability_for(proposal.action_kind)
        log = self._log.bind(
            proposal_id=str(proposal.id),
            action=proposal.action_kind.value,
            parallel=policy.parallel,
        )
        log.info("execution_batch_started", executors=[e.agent_id for e in executors])

        if policy.parallel:
            outcomes = await asyncio.gather(
                *(
                    self._execute_one(proposal, executor, capability, policy)
                    for executor in executors
                ),
                return_exceptions=True,
            )
            results: list[ExecutionResult] = []
            for executor, outcome in zip(executors, outcomes):
                if isinstance(outcome, ExecutionResult):
                    results.append(outcome)
                elif isinstance(outcome, Exception):
                    log.error(
                        "execution_task_failed",
                        agent_id=executor.agent_id,
                        error=str(outcome),
                    )
                    results.append(
                        ExecutionResult(
                            agent_id=executor.agent_id,
                            status=ExecutionStatus.FAILED,
                            error=str(outcome) or "Execution failed",
                        )
                    )
                else:
                    raise outcome
            return results

        results = []
        for index, executor in enumerate(executors):
            if index > 0 and policy.delay_between_ms > 0:
                await self._sleep(policy.delay_between_seconds)
            results.append(
                await self._execute_one(proposal, executor, capability, policy)
            )
        return results

    def summarize(self, results: Sequence[ExecutionResult]) -> ExecutionSummary:
        return summarize(results)

    # =========================================================================
    # Single executor
    # =========================================================================

    async def _execute_one(
        self,
        proposal: Proposal,
        executor: SoleExecutor,
        capability: SubmissionCapabilityProtocol,
        policy: ExecutionPolicy,
    ) -> ExecutionResult:
        record = Execution(
            proposal_id=proposal.id,
            forum_id=proposal.forum_id,
            agent_id=executor.agent_id,
            status=ExecutionStatus.EXECUTING,
        )
        await self._executions.record_execution(record)

        started = self._time.monotonic()
        result = await self._submit_with_retry(proposal, executor, capability, policy)
        elapsed = self._time.monotonic() - started

        await self._executions.record_execution(
            record.with_result(result, self._time.now())
        )
        if self._metrics is not None:
            self._metrics.record_execution_result(
                proposal.action_kind.value, result.status.value, elapsed
            )
        self._log.info(
            "execution_recorded",
            proposal_id=str(proposal.id),
            agent_id=executor.agent_id,
            status=result.status.value,
            tx_hash=result.tx_hash,
            error=result.error,
            attempts=result.attempts,
        )
        return result

    async def _submit_with_retry(
        self,
        proposal: Proposal,
        executor: SoleExecutor,
        capability: SubmissionCapabilityProtocol,
        policy: ExecutionPolicy,
    ) -> ExecutionResult:
        retry = policy.retry
        log = self._log.bind(proposal_id=str(proposal.id), agent_id=executor.agent_id)
        attempt = 0
        while True:
            if self._metrics is not None:
                self._metrics.record_execution_attempt(proposal.action_kind.value)
            try:
                submission = await capability.submit(
                    proposal.action, proposal.hooks, executor.signer, policy.chain_id
                )
            except Exception as exc:
                error = str(exc) or type(exc).__name__
                if not retry.should_retry(attempt):
                    log.error(
                        "execution_retries_exhausted",
                        attempts=attempt + 1,
                        error=error,
                    )
                    return ExecutionResult(
                        agent_id=executor.agent_id,
                        status=ExecutionStatus.FAILED,
                        error=error,
                        attempts=attempt + 1,
                    )
                delay = retry.delay_for(attempt)
                log.warning(
                    "execution_retry_scheduled",
                    attempt=attempt + 1,
                    delay_seconds=delay,
                    error=error,
                )
                await self._sleep(delay)
                attempt += 1
                continue

            return ExecutionResult.from_submission(
                executor.agent_id, submission, attempts=attempt + 1
            )
