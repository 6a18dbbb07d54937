"""Discussion scheduler.

Decides, per agent per tick, whether that agent may post a discussion
message. Only autonomously generated messages count toward the rate
limit and the message cap; messages posted on an agent's behalf (for
example a user-authored kickoff) do not.

Decision order, first match wins:
    1. empty window -> speak (starting_discussion)
    2. last autonomous message too recent -> wait (rate_limited)
    3. autonomous message cap reached -> wait (message_cap_reached)
    4. forum pool matches a preferred pool -> speak (pool_match)
    5. agent mentioned in the window -> speak (mentioned)
    6. otherwise -> speak (active_participant)

Rules 4-6 are priority hints used to order speakers, not admission gates.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import structlog

from forum_engine.application.ports.forum_metrics import ForumMetricsProtocol
from forum_engine.application.ports.message_log import MessageLogProtocol
from forum_engine.application.ports.time_authority import TimeAuthorityProtocol
from forum_engine.config.discussion_config import (
    DEFAULT_DISCUSSION_POLICY,
    DiscussionPolicy,
)
from forum_engine.domain.models.agent import AgentProfile
from forum_engine.domain.models.discussion import DiscussionMessage
from forum_engine.domain.models.forum import Forum

logger = structlog.get_logger(__name__)


class SpeakReason(Enum):
    """Why an agent may or may not speak."""

    STARTING_DISCUSSION = "starting_discussion"
    RATE_LIMITED = "rate_limited"
    MESSAGE_CAP_REACHED = "message_cap_reached"
    POOL_MATCH = "pool_match"
    MENTIONED = "mentioned"
    ACTIVE_PARTICIPANT = "active_participant"


# Lower sorts first when choosing who speaks
SPEAKER_PRIORITY: dict[SpeakReason, int] = {
    SpeakReason.POOL_MATCH: 0,
    SpeakReason.MENTIONED: 1,
    SpeakReason.STARTING_DISCUSSION: 2,
    SpeakReason.ACTIVE_PARTICIPANT: 3,
}


@dataclass(frozen=True)
class SpeakDecision:
    """Outcome of one scheduling check.

    Attributes:
        should: True if the agent may post now.
        reason: Which rule decided.
        agent_id: The evaluated agent.
    """

    should: bool
    reason: SpeakReason
    agent_id: str

    @property
    def priority(self) -> int:
        return SPEAKER_PRIORITY.get(self.reason, len(SPEAKER_PRIORITY))


def _pool_matches(forum_pool: str | None, preferred: Iterable[str]) -> bool:
    if not forum_pool:
        return False
    pool = forum_pool.lower()
    return any(pool in p.lower() or p.lower() in pool for p in preferred)


def should_speak(
    agent: AgentProfile,
    forum: Forum,
    recent_messages: Sequence[DiscussionMessage],
    policy: DiscussionPolicy,
    now: datetime,
) -> SpeakDecision:
    """Decide whether ``agent`` may post a discussion message now.

    Pure given its inputs. ``recent_messages`` may be in any order.

    Args:
        agent: The agent being scheduled.
        forum: The forum it would post in.
        recent_messages: Window of recent forum messages.
        policy: Interval and cap settings.
        now: Current time.

    Returns:
        The decision and the rule that made it.
    """

    def decide(should: bool, reason: SpeakReason) -> SpeakDecision:
        return SpeakDecision(should=should, reason=reason, agent_id=agent.agent_id)

    if not recent_messages:
        return decide(True, SpeakReason.STARTING_DISCUSSION)

    own_auto = [
        m
        for m in recent_messages
        if m.agent_id == agent.agent_id and m.is_autonomous
    ]
    if own_auto:
        latest = max(own_auto, key=lambda m: m.created_at)
        if now - latest.created_at < policy.effective_min_interval:
            return decide(False, SpeakReason.RATE_LIMITED)

    if len(own_auto) >= policy.max_auto_messages:
        return decide(False, SpeakReason.MESSAGE_CAP_REACHED)

    if _pool_matches(forum.pool, agent.preferred_pools):
        return decide(True, SpeakReason.POOL_MATCH)

    handle = agent.agent_id.lower()
    if any(handle in m.content.lower() for m in recent_messages):
        return decide(True, SpeakReason.MENTIONED)

    return decide(True, SpeakReason.ACTIVE_PARTICIPANT)


class DiscussionSchedulerService:
    """Schedules autonomous discussion turns for forum participants."""

    def __init__(
        self,
        messages: MessageLogProtocol,
        time_authority: TimeAuthorityProtocol,
        policy: DiscussionPolicy = DEFAULT_DISCUSSION_POLICY,
        metrics: ForumMetricsProtocol | None = None,
    ) -> None:
        self._messages = messages
        self._time = time_authority
        self._policy = policy
        self._metrics = metrics
        self._log = logger.bind(component="discussion_scheduler")

    async def _window(self, forum: Forum) -> list[DiscussionMessage]:
        return await self._messages.list_recent_messages(
            forum.id, self._policy.recent_message_limit
        )

    def _record(self, decision: SpeakDecision) -> None:
        if self._metrics is not None:
            self._metrics.record_discussion_decision(decision.reason.value)

    async def evaluate_turn(self, agent: AgentProfile, forum: Forum) -> SpeakDecision:
        """Load the forum's message window and decide for one agent."""
        decision = should_speak(
            agent, forum, await self._window(forum), self._policy, self._time.now()
        )
        self._record(decision)
        self._log.debug(
            "turn_evaluated",
            forum_id=str(forum.id),
            agent_id=agent.agent_id,
            should=decision.should,
            reason=decision.reason.value,
        )
        return decision

    async def select_speakers(
        self, forum: Forum, agents: Iterable[AgentProfile]
    ) -> list[SpeakDecision]:
        """Evaluate every participant against one shared message window.

        Agents that are not forum participants are skipped. Eligible
        agents are returned ordered by hint priority (pool match, mention,
        starting discussion, active participant), keeping input order
        within a priority.

        Returns:
            Decisions for agents that may speak, highest priority first.
        """
        window = await self._window(forum)
        now = self._time.now()
        eligible: list[SpeakDecision] = []
        for agent in agents:
            if not forum.is_participant(agent.agent_id):
                continue
            decision = should_speak(agent, forum, window, self._policy, now)
            self._record(decision)
            if decision.should:
                eligible.append(decision)

        eligible.sort(key=lambda d: d.priority)
        self._log.info(
            "speakers_selected",
            forum_id=str(forum.id),
            speakers=[d.agent_id for d in eligible],
        )
        return eligible
