"""Unit tests for the discussion scheduler."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from forum_engine.application.ports.forum_metrics import ForumMetricsProtocol
from forum_engine.application.services.discussion_scheduler_service import (
    DiscussionSchedulerService,
    SpeakReason,
    should_speak,
)
from forum_engine.config.discussion_config import DiscussionPolicy
from forum_engine.domain.models.discussion import MessageOrigin
from forum_engine.infrastructure.stubs import MessageLogStub
from tests.helpers import FakeTimeAuthority
from tests.helpers.factories import (
    ALPHA,
    BASE_TIME,
    BETA,
    DELTA,
    GAMMA,
    make_agent,
    make_forum,
    make_message,
)

POLICY = DiscussionPolicy(min_interval_ms=30_000, max_auto_messages=3)


class TestShouldSpeak:
    """Tests for the pure should_speak() decision."""

    def test_empty_window_starts_discussion(self) -> None:
        decision = should_speak(make_agent(), make_forum(), [], POLICY, BASE_TIME)

        assert decision.should
        assert decision.reason is SpeakReason.STARTING_DISCUSSION
        assert decision.agent_id == ALPHA

    def test_rate_limited_ten_seconds_after_last_message(self) -> None:
        forum = make_forum()
        window = [make_message(forum.id, ALPHA, BASE_TIME)]

        decision = should_speak(
            make_agent(), forum, window, POLICY, BASE_TIME + timedelta(seconds=10)
        )

        assert not decision.should
        assert decision.reason is SpeakReason.RATE_LIMITED

    def test_resumes_after_interval(self) -> None:
        forum = make_forum()
        window = [make_message(forum.id, ALPHA, BASE_TIME)]

        decision = should_speak(
            make_agent(), forum, window, POLICY, BASE_TIME + timedelta(seconds=31)
        )

        assert decision.should
        assert decision.reason is SpeakReason.ACTIVE_PARTICIPANT

    def test_cap_applies_after_interval_elapsed(self) -> None:
        forum = make_forum()
        window = [
            make_message(forum.id, ALPHA, BASE_TIME + timedelta(minutes=i))
            for i in range(3)
        ]

        decision = should_speak(
            make_agent(), forum, window, POLICY, BASE_TIME + timedelta(hours=1)
        )

        assert not decision.should
        assert decision.reason is SpeakReason.MESSAGE_CAP_REACHED

    def test_window_order_does_not_matter(self) -> None:
        forum = make_forum()
        oldest_first = [
            make_message(forum.id, ALPHA, BASE_TIME),
            make_message(forum.id, ALPHA, BASE_TIME + timedelta(seconds=50)),
        ]
        now = BASE_TIME + timedelta(seconds=60)

        forward = should_speak(make_agent(), forum, oldest_first, POLICY, now)
        backward = should_speak(make_agent(), forum, oldest_first[::-1], POLICY, now)

        assert forward == backward
        assert forward.reason is SpeakReason.RATE_LIMITED

    def test_external_messages_do_not_count(self) -> None:
        forum = make_forum()
        window = [
            make_message(forum.id, ALPHA, BASE_TIME, origin=MessageOrigin.EXTERNAL)
            for _ in range(5)
        ]

        decision = should_speak(
            make_agent(), forum, window, POLICY, BASE_TIME + timedelta(seconds=1)
        )

        assert decision.should

    def test_other_agents_messages_do_not_limit(self) -> None:
        forum = make_forum()
        window = [make_message(forum.id, BETA, BASE_TIME)]

        decision = should_speak(make_agent(), forum, window, POLICY, BASE_TIME)

        assert decision.reason is SpeakReason.ACTIVE_PARTICIPANT

    def test_interval_floor(self) -> None:
        forum = make_forum()
        policy = DiscussionPolicy(min_interval_ms=0)
        window = [make_message(forum.id, ALPHA, BASE_TIME)]

        early = should_speak(
            make_agent(), forum, window, policy, BASE_TIME + timedelta(milliseconds=100)
        )
        late = should_speak(
            make_agent(), forum, window, policy, BASE_TIME + timedelta(milliseconds=300)
        )

        assert early.reason is SpeakReason.RATE_LIMITED
        assert late.should

    def test_pool_match_is_case_insensitive(self) -> None:
        forum = make_forum(pool="ETH-USDC")
        agent = make_agent(preferred_pools=("eth-usdc",))
        window = [make_message(forum.id, BETA, BASE_TIME)]

        decision = should_speak(agent, forum, window, POLICY, BASE_TIME)

        assert decision.reason is SpeakReason.POOL_MATCH

    def test_forum_without_pool_never_matches(self) -> None:
        forum = make_forum(pool=None)
        agent = make_agent(preferred_pools=("ETH-USDC",))
        window = [make_message(forum.id, BETA, BASE_TIME)]

        decision = should_speak(agent, forum, window, POLICY, BASE_TIME)

        assert decision.reason is SpeakReason.ACTIVE_PARTICIPANT

    def test_mentioned(self) -> None:
        forum = make_forum()
        window = [
            make_message(forum.id, BETA, BASE_TIME, content="What does Alpha.uniforum.eth think?")
        ]

        decision = should_speak(make_agent(), forum, window, POLICY, BASE_TIME)

        assert decision.reason is SpeakReason.MENTIONED

    def test_rate_limit_beats_pool_match(self) -> None:
        forum = make_forum(pool="ETH-USDC")
        agent = make_agent(preferred_pools=("ETH-USDC",))
        window = [make_message(forum.id, ALPHA, BASE_TIME)]

        decision = should_speak(agent, forum, window, POLICY, BASE_TIME)

        assert decision.reason is SpeakReason.RATE_LIMITED


class TestDiscussionSchedulerService:
    """Tests for DiscussionSchedulerService."""

    @pytest.fixture
    def fake_time(self) -> FakeTimeAuthority:
        return FakeTimeAuthority(frozen_at=BASE_TIME)

    @pytest.fixture
    def messages(self) -> MessageLogStub:
        return MessageLogStub()

    @pytest.fixture
    def metrics(self) -> MagicMock:
        return MagicMock(spec=ForumMetricsProtocol)

    @pytest.fixture
    def scheduler(
        self,
        messages: MessageLogStub,
        fake_time: FakeTimeAuthority,
        metrics: MagicMock,
    ) -> DiscussionSchedulerService:
        return DiscussionSchedulerService(
            messages=messages, time_authority=fake_time, policy=POLICY, metrics=metrics
        )

    async def test_evaluate_turn_reads_window(
        self,
        scheduler: DiscussionSchedulerService,
        messages: MessageLogStub,
        fake_time: FakeTimeAuthority,
        metrics: MagicMock,
    ) -> None:
        forum = make_forum()
        await messages.append_message(make_message(forum.id, ALPHA, BASE_TIME))
        fake_time.advance(seconds=10)

        blocked = await scheduler.evaluate_turn(make_agent(), forum)
        fake_time.advance(seconds=21)
        allowed = await scheduler.evaluate_turn(make_agent(), forum)

        assert blocked.reason is SpeakReason.RATE_LIMITED
        assert allowed.should
        metrics.record_discussion_decision.assert_any_call("rate_limited")

    async def test_window_limit_is_applied(
        self, messages: MessageLogStub, fake_time: FakeTimeAuthority
    ) -> None:
        forum = make_forum()
        scheduler = DiscussionSchedulerService(
            messages=messages,
            time_authority=fake_time,
            policy=DiscussionPolicy(recent_message_limit=2),
        )
        # Three old autonomous messages, then two from someone else
        for i in range(3):
            await messages.append_message(
                make_message(forum.id, ALPHA, BASE_TIME + timedelta(seconds=i))
            )
        for i in range(2):
            await messages.append_message(
                make_message(forum.id, BETA, BASE_TIME + timedelta(minutes=5, seconds=i))
            )
        fake_time.advance(delta=timedelta(minutes=10))

        decision = await scheduler.evaluate_turn(make_agent(), forum)

        assert decision.should

    async def test_select_speakers_orders_by_priority(
        self,
        scheduler: DiscussionSchedulerService,
        messages: MessageLogStub,
        fake_time: FakeTimeAuthority,
    ) -> None:
        forum = make_forum(participants=(ALPHA, BETA, GAMMA), pool="ETH-USDC")
        await messages.append_message(
            make_message(forum.id, ALPHA, BASE_TIME, content=f"{BETA}, your view?")
        )
        fake_time.advance(seconds=5)
        agents = [
            make_agent(ALPHA),
            make_agent(BETA),
            make_agent(GAMMA, preferred_pools=("ETH-USDC",)),
            make_agent(DELTA, preferred_pools=("ETH-USDC",)),
        ]

        speakers = await scheduler.select_speakers(forum, agents)

        assert [d.agent_id for d in speakers] == [GAMMA, BETA]
        assert [d.reason for d in speakers] == [
            SpeakReason.POOL_MATCH,
            SpeakReason.MENTIONED,
        ]

    async def test_select_speakers_keeps_input_order_within_priority(
        self, scheduler: DiscussionSchedulerService
    ) -> None:
        forum = make_forum(participants=(ALPHA, BETA, GAMMA))

        speakers = await scheduler.select_speakers(
            forum, [make_agent(GAMMA), make_agent(ALPHA), make_agent(BETA)]
        )

        assert [d.agent_id for d in speakers] == [GAMMA, ALPHA, BETA]
        assert all(d.reason is SpeakReason.STARTING_DISCUSSION for d in speakers)
