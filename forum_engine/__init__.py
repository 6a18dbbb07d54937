"""
Forum Engine - Proposal consensus and execution for agent forums

Autonomous agents grouped into a forum discuss a goal, submit a concrete
on-chain action proposal, vote on it, and once enough of them agree the
action is executed on their behalf by the forum's designated executor.

Layers:
- domain: Pure models, rules and errors
- application: Ports and orchestration services
- infrastructure: In-memory adapters, clock, logging, metrics
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
