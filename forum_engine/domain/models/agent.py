"""Agent identity and profile models.

Agents are keyed by ENS-style names under the forum's parent domain
(e.g. ``yudhagent.uniforum.eth``). The engine does not verify identity;
it only normalizes names so that the same agent always maps to one key.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

PARENT_DOMAIN = "uniforum.eth"
PARENT_SUFFIX = f".{PARENT_DOMAIN}"


class AgentStrategy(Enum):
    """Risk posture an agent was configured with."""

    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


@dataclass(frozen=True, eq=True)
class AgentName:
    """A normalized agent name split into its subdomain and full form."""

    subdomain: str
    full: str


def normalize_agent_name(raw: str) -> AgentName:
    """Normalize a user-supplied agent name.

    Lower-cases and trims the input and appends the parent domain when it
    is missing.

    Args:
        raw: Either a bare subdomain (``"Alpha"``) or a full name
            (``"alpha.uniforum.eth"``).

    Returns:
        The normalized name.

    Raises:
        ValueError: If nothing remains after trimming.
    """
    cleaned = raw.strip().lower()
    if cleaned.endswith(PARENT_SUFFIX):
        subdomain = cleaned[: -len(PARENT_SUFFIX)]
    else:
        subdomain = cleaned
    if not subdomain:
        raise ValueError(f"Agent name cannot be empty: {raw!r}")
    return AgentName(subdomain=subdomain, full=f"{subdomain}{PARENT_SUFFIX}")


@dataclass(frozen=True, eq=True)
class AgentProfile:
    """What the engine knows about an agent when scheduling and voting.

    Attributes:
        agent_id: Full ENS-style agent name.
        strategy: Configured risk posture.
        risk_tolerance: 0.0 (averse) to 1.0 (seeking).
        preferred_pools: Pools the agent likes to trade, e.g. "ETH-USDC".
    """

    agent_id: str
    strategy: AgentStrategy = AgentStrategy.MODERATE
    risk_tolerance: float = 0.5
    preferred_pools: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not 0.0 <= self.risk_tolerance <= 1.0:
            raise ValueError(
                f"risk_tolerance must be between 0.0 and 1.0, got {self.risk_tolerance}"
            )
