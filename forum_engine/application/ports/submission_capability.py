"""Submission capability port.

This is the single seam between the engine and real blockchain
interaction. One capability is registered per action kind. A capability
either returns a SubmissionResult (definitive outcome) or raises
(transient failure, subject to retry).
"""

from __future__ import annotations

from typing import Any, Protocol

from forum_engine.domain.models.execution import SubmissionResult
from forum_engine.domain.models.proposal_action import ProposalAction, ProposalHooks


class SubmissionCapabilityProtocol(Protocol):
    """Protocol for submitting one kind of on-chain action."""

    async def submit(
        self,
        action: ProposalAction,
        hooks: ProposalHooks | None,
        signer: Any,
        chain_id: int,
    ) -> SubmissionResult:
        """Submit an action on-chain.

        Args:
            action: Typed action variant carrying its params.
            hooks: Execution hook flags, if any.
            signer: Opaque signing capability of the executor.
            chain_id: Target chain.

        Returns:
            ``SubmissionResult(success=True, tx_hash=...)`` or
            ``SubmissionResult(success=False, error=...)``.

        Raises:
            Exception: Any transient failure (network, nonce, timeout).
        """
        ...
