"""Unit tests for the execution coordinator."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from unittest.mock import MagicMock

import pytest

from forum_engine.application.ports.forum_metrics import ForumMetricsProtocol
from forum_engine.application.services.execution_coordinator_service import (
    ExecutionCoordinatorService,
    summarize,
)
from forum_engine.application.services.proposal_lifecycle_service import (
    ProposalLifecycleService,
)
from forum_engine.config.execution_config import ExecutionPolicy
from forum_engine.domain.errors import (
    InvalidProposalStateError,
    NoExecutorError,
    UnknownActionError,
)
from forum_engine.domain.models.execution import (
    Execution,
    ExecutionResult,
    ExecutionStatus,
    SoleExecutor,
    SubmissionResult,
)
from forum_engine.domain.models.forum import Forum, ForumStatus
from forum_engine.domain.models.proposal import Proposal, ProposalStatus
from forum_engine.domain.models.proposal_action import (
    ActionKind,
    ProposalAction,
    ProposalHooks,
    parse_proposal_action,
)
from forum_engine.domain.models.retry_policy import RetryPolicy
from forum_engine.infrastructure.stubs import (
    ExecutionRepositoryStub,
    ForumRepositoryStub,
    MessageLogStub,
    ProposalRepositoryStub,
    ScriptedSubmissionCapability,
    VoteStoreStub,
)
from tests.helpers import FakeTimeAuthority, RecordingSleeper
from tests.helpers.factories import ALPHA, BASE_TIME, BETA, make_forum, make_proposal

RETRYING = ExecutionPolicy(
    delay_between_ms=0, retry=RetryPolicy(max_attempts=3, base_delay_ms=1000)
)


class TimedCapability(ScriptedSubmissionCapability):
    """Scripted capability that also stamps when each call started."""

    def __init__(self, time_authority: FakeTimeAuthority, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._time = time_authority
        self.started_at: list[datetime] = []

    async def submit(
        self,
        action: ProposalAction,
        hooks: ProposalHooks | None,
        signer: Any,
        chain_id: int,
    ) -> SubmissionResult:
        self.started_at.append(self._time.now())
        return await super().submit(action, hooks, signer, chain_id)


class BrokenRecordStore(ExecutionRepositoryStub):
    """Execution store that refuses records for one agent."""

    def __init__(self, broken_agent: str) -> None:
        super().__init__()
        self._broken_agent = broken_agent

    async def record_execution(self, execution: Execution) -> None:
        if execution.agent_id == self._broken_agent:
            raise ConnectionError("execution store unavailable")
        await super().record_execution(execution)


@pytest.fixture
def fake_time() -> FakeTimeAuthority:
    return FakeTimeAuthority(frozen_at=BASE_TIME)


@pytest.fixture
def sleeper(fake_time: FakeTimeAuthority) -> RecordingSleeper:
    return RecordingSleeper(fake_time)


@pytest.fixture
def forums() -> ForumRepositoryStub:
    return ForumRepositoryStub()


@pytest.fixture
def proposals() -> ProposalRepositoryStub:
    return ProposalRepositoryStub()


@pytest.fixture
def executions() -> ExecutionRepositoryStub:
    return ExecutionRepositoryStub()


@pytest.fixture
def metrics() -> MagicMock:
    return MagicMock(spec=ForumMetricsProtocol)


@pytest.fixture
def lifecycle(
    proposals: ProposalRepositoryStub,
    forums: ForumRepositoryStub,
    fake_time: FakeTimeAuthority,
) -> ProposalLifecycleService:
    return ProposalLifecycleService(
        proposals=proposals,
        forums=forums,
        votes=VoteStoreStub(),
        messages=MessageLogStub(),
        time_authority=fake_time,
    )


@pytest.fixture
async def forum(forums: ForumRepositoryStub) -> Forum:
    forum = make_forum(status=ForumStatus.CONSENSUS)
    await forums.save_forum(forum)
    return forum


@pytest.fixture
async def approved(proposals: ProposalRepositoryStub, forum: Forum) -> Proposal:
    proposal = make_proposal(
        forum_id=forum.id, status=ProposalStatus.APPROVED, resolved_at=BASE_TIME
    )
    await proposals.save_proposal(proposal)
    return proposal


def make_coordinator(
    capability: ScriptedSubmissionCapability,
    executions: ExecutionRepositoryStub,
    lifecycle: ProposalLifecycleService,
    fake_time: FakeTimeAuthority,
    sleeper: RecordingSleeper,
    metrics: MagicMock | None = None,
    kinds: tuple[ActionKind, ...] = tuple(ActionKind),
) -> ExecutionCoordinatorService:
    return ExecutionCoordinatorService(
        capabilities={kind: capability for kind in kinds},
        executions=executions,
        lifecycle=lifecycle,
        time_authority=fake_time,
        metrics=metrics,
        sleep=sleeper,
    )


class TestRetry:
    """Thrown submission errors are retried with exponential backoff."""

    async def test_throws_twice_then_succeeds(
        self,
        approved: Proposal,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
        metrics: MagicMock,
    ) -> None:
        capability = ScriptedSubmissionCapability(
            script=[TimeoutError("rpc timeout"), ConnectionError("reset")]
        )
        coordinator = make_coordinator(
            capability, executions, lifecycle, fake_time, sleeper, metrics
        )

        results = await coordinator.run(approved, SoleExecutor(ALPHA), RETRYING)

        assert len(results) == 1
        assert results[0].status is ExecutionStatus.SUCCESS
        assert results[0].attempts == 3
        assert capability.call_count == 3
        assert sleeper.delays == [1.0, 2.0]
        assert metrics.record_execution_attempt.call_count == 3
        metrics.record_execution_result.assert_called_once_with("swap", "success", 3.0)

    async def test_retries_exhausted(
        self,
        approved: Proposal,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        capability = ScriptedSubmissionCapability(
            script=[RuntimeError("boom")] * 3
        )
        coordinator = make_coordinator(capability, executions, lifecycle, fake_time, sleeper)

        [result] = await coordinator.run(approved, SoleExecutor(ALPHA), RETRYING)

        assert result.status is ExecutionStatus.FAILED
        assert result.error == "boom"
        assert result.attempts == 3
        assert capability.call_count == 3
        assert sleeper.delays == [1.0, 2.0]

    async def test_returned_failure_is_not_retried(
        self,
        approved: Proposal,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        capability = ScriptedSubmissionCapability(
            script=[SubmissionResult.failure("execution reverted")]
        )
        coordinator = make_coordinator(capability, executions, lifecycle, fake_time, sleeper)

        [result] = await coordinator.run(approved, SoleExecutor(ALPHA), RETRYING)

        assert result.status is ExecutionStatus.FAILED
        assert result.error == "execution reverted"
        assert capability.call_count == 1
        assert sleeper.delays == []

    async def test_exception_without_message_uses_type_name(
        self,
        approved: Proposal,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        capability = ScriptedSubmissionCapability(script=[ValueError()])
        coordinator = make_coordinator(capability, executions, lifecycle, fake_time, sleeper)
        policy = ExecutionPolicy(retry=RetryPolicy(max_attempts=1))

        [result] = await coordinator.run(approved, SoleExecutor(ALPHA), policy)

        assert result.error == "ValueError"


class TestRun:
    """Tests for run() / run_for_executors() / run_batch()."""

    async def test_passes_signer_and_chain(
        self,
        approved: Proposal,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        signer = object()
        capability = ScriptedSubmissionCapability()
        coordinator = make_coordinator(capability, executions, lifecycle, fake_time, sleeper)

        await coordinator.run(
            approved, SoleExecutor(ALPHA, signer=signer), ExecutionPolicy(chain_id=130)
        )

        call = capability.calls[0]
        assert call.signer is signer
        assert call.chain_id == 130
        assert call.action == approved.action

    async def test_records_executing_then_final(
        self,
        approved: Proposal,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        coordinator = make_coordinator(
            ScriptedSubmissionCapability(), executions, lifecycle, fake_time, sleeper
        )

        [result] = await coordinator.run(approved, SoleExecutor(ALPHA))

        assert [r.status for r in executions.history] == [
            ExecutionStatus.EXECUTING,
            ExecutionStatus.SUCCESS,
        ]
        assert executions.history[0].id == executions.history[1].id
        stored = await executions.list_executions(approved.id)
        assert len(stored) == 1
        assert stored[0].tx_hash == result.tx_hash
        assert stored[0].completed_at == fake_time.now()

    async def test_only_first_executor_acts(
        self,
        approved: Proposal,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        capability = ScriptedSubmissionCapability()
        coordinator = make_coordinator(capability, executions, lifecycle, fake_time, sleeper)

        results = await coordinator.run_for_executors(
            approved, [SoleExecutor(ALPHA), SoleExecutor(BETA)]
        )

        assert [r.agent_id for r in results] == [ALPHA]
        assert capability.call_count == 1

    async def test_no_executor(
        self,
        approved: Proposal,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        coordinator = make_coordinator(
            ScriptedSubmissionCapability(), executions, lifecycle, fake_time, sleeper
        )

        with pytest.raises(NoExecutorError):
            await coordinator.run_for_executors(approved, [])

    async def test_voting_proposal_rejected(
        self,
        forum: Forum,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        capability = ScriptedSubmissionCapability()
        coordinator = make_coordinator(capability, executions, lifecycle, fake_time, sleeper)

        with pytest.raises(InvalidProposalStateError):
            await coordinator.run(make_proposal(forum_id=forum.id), SoleExecutor(ALPHA))
        assert capability.call_count == 0

    async def test_unknown_action(
        self,
        forum: Forum,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        capability = ScriptedSubmissionCapability()
        coordinator = make_coordinator(
            capability, executions, lifecycle, fake_time, sleeper, kinds=(ActionKind.SWAP,)
        )
        proposal = make_proposal(
            forum_id=forum.id,
            status=ProposalStatus.APPROVED,
            action=parse_proposal_action(
                {"action": "addLiquidity", "params": {"pool": "ETH-USDC", "amount0": "1"}}
            ),
        )

        with pytest.raises(UnknownActionError, match="Unknown action: addLiquidity"):
            await coordinator.run(proposal, SoleExecutor(ALPHA))
        assert capability.call_count == 0
        assert executions.history == []


class TestBatchSequencing:
    """Sequential and parallel multi-executor submission."""

    async def test_sequential_waits_for_record_and_delay(
        self,
        approved: Proposal,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        capability = TimedCapability(fake_time)
        coordinator = make_coordinator(capability, executions, lifecycle, fake_time, sleeper)
        policy = ExecutionPolicy(delay_between_ms=500)

        results = await coordinator.run_batch(
            approved, [SoleExecutor(ALPHA), SoleExecutor(BETA)], policy
        )

        assert [r.agent_id for r in results] == [ALPHA, BETA]
        assert sleeper.delays == [0.5]
        first_final = next(
            e for e in executions.history if e.agent_id == ALPHA and e.status.is_final
        )
        second_started = executions.history.index(
            next(e for e in executions.history if e.agent_id == BETA)
        )
        assert executions.history.index(first_final) < second_started
        assert first_final.completed_at is not None
        assert (capability.started_at[1] - first_final.completed_at).total_seconds() >= 0.5

    async def test_parallel_failure_is_isolated(
        self,
        approved: Proposal,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        capability = ScriptedSubmissionCapability(script=[RuntimeError("nonce too low")])
        coordinator = make_coordinator(capability, executions, lifecycle, fake_time, sleeper)
        policy = ExecutionPolicy(parallel=True, retry=RetryPolicy(max_attempts=1))

        results = await coordinator.run_batch(
            approved, [SoleExecutor(ALPHA), SoleExecutor(BETA)], policy
        )

        assert [r.status for r in results] == [
            ExecutionStatus.FAILED,
            ExecutionStatus.SUCCESS,
        ]
        assert sleeper.delays == []

    async def test_parallel_task_error_becomes_failed_result(
        self,
        approved: Proposal,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        coordinator = make_coordinator(
            ScriptedSubmissionCapability(),
            BrokenRecordStore(broken_agent=BETA),
            lifecycle,
            fake_time,
            sleeper,
        )

        results = await coordinator.run_batch(
            approved,
            [SoleExecutor(ALPHA), SoleExecutor(BETA)],
            ExecutionPolicy(parallel=True),
        )

        assert results[0].succeeded
        assert results[1].status is ExecutionStatus.FAILED
        assert results[1].error == "execution store unavailable"


class TestExecuteProposal:
    """Tests for the execute_proposal() workflow."""

    async def test_success(
        self,
        approved: Proposal,
        forums: ForumRepositoryStub,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        coordinator = make_coordinator(
            ScriptedSubmissionCapability(), executions, lifecycle, fake_time, sleeper
        )

        outcome = await coordinator.execute_proposal(approved.id, SoleExecutor(ALPHA))

        assert outcome.proposal.status is ProposalStatus.EXECUTED
        assert outcome.summary.successful == 1
        assert outcome.summary.tx_hashes == (outcome.results[0].tx_hash,)
        forum = await forums.get_forum(approved.forum_id)
        assert forum is not None
        assert forum.status is ForumStatus.EXECUTED

    async def test_failure_marks_failed_and_reopens_forum(
        self,
        approved: Proposal,
        forums: ForumRepositoryStub,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        capability = ScriptedSubmissionCapability(
            script=[SubmissionResult.failure("insufficient balance")]
        )
        coordinator = make_coordinator(capability, executions, lifecycle, fake_time, sleeper)

        outcome = await coordinator.execute_proposal(approved.id, SoleExecutor(ALPHA))

        assert outcome.proposal.status is ProposalStatus.FAILED
        assert outcome.summary.errors == (f"{ALPHA}: insufficient balance",)
        forum = await forums.get_forum(approved.forum_id)
        assert forum is not None
        assert forum.status is ForumStatus.ACTIVE

    async def test_unknown_action_leaves_proposal_approved(
        self,
        approved: Proposal,
        proposals: ProposalRepositoryStub,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        coordinator = make_coordinator(
            ScriptedSubmissionCapability(),
            executions,
            lifecycle,
            fake_time,
            sleeper,
            kinds=(ActionKind.LIMIT_ORDER,),
        )

        with pytest.raises(UnknownActionError):
            await coordinator.execute_proposal(approved.id, SoleExecutor(ALPHA))

        stored = await proposals.get_proposal(approved.id)
        assert stored is not None
        assert stored.status is ProposalStatus.APPROVED

    async def test_not_approved(
        self,
        forum: Forum,
        proposals: ProposalRepositoryStub,
        executions: ExecutionRepositoryStub,
        lifecycle: ProposalLifecycleService,
        fake_time: FakeTimeAuthority,
        sleeper: RecordingSleeper,
    ) -> None:
        proposal = make_proposal(forum_id=forum.id)
        await proposals.save_proposal(proposal)
        coordinator = make_coordinator(
            ScriptedSubmissionCapability(), executions, lifecycle, fake_time, sleeper
        )

        with pytest.raises(InvalidProposalStateError):
            await coordinator.execute_proposal(proposal.id, SoleExecutor(ALPHA))


def test_summarize_matches_summary() -> None:
    results = [
        ExecutionResult(ALPHA, ExecutionStatus.SUCCESS, tx_hash="tx1"),
        ExecutionResult(BETA, ExecutionStatus.FAILED, error="err"),
    ]

    summary = summarize(results)

    assert (summary.total, summary.successful, summary.failed) == (2, 1, 1)
    assert summary.tx_hashes == ("tx1",)
    assert summary.errors == (f"{BETA}: err",)
