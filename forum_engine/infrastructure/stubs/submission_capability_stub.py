"""Scripted submission capability.

Deterministic test double for the blockchain seam. Each call consumes the
next scripted step: a SubmissionResult is returned, an exception is
raised. When the script runs out the default result is returned.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from forum_engine.application.ports.submission_capability import (
    SubmissionCapabilityProtocol,
)
from forum_engine.domain.models.execution import SubmissionResult
from forum_engine.domain.models.proposal_action import ProposalAction, ProposalHooks


@dataclass(frozen=True)
class SubmissionCall:
    """One recorded invocation of the capability."""

    action: ProposalAction
    hooks: ProposalHooks | None
    signer: Any
    chain_id: int


class ScriptedSubmissionCapability(SubmissionCapabilityProtocol):
    """Submission capability that plays back a script of outcomes."""

    def __init__(
        self,
        script: Iterable[SubmissionResult | Exception] = (),
        default: SubmissionResult | None = None,
    ) -> None:
        """Initialize the capability.

        Args:
            script: Outcomes to play back, one per call.
            default: Result once the script is exhausted. Defaults to a
                success with a generated tx hash.
        """
        self._script: deque[SubmissionResult | Exception] = deque(script)
        self._default = default
        self.calls: list[SubmissionCall] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def submit(
        self,
        action: ProposalAction,
        hooks: ProposalHooks | None,
        signer: Any,
        chain_id: int,
    ) -> SubmissionResult:
        self.calls.append(SubmissionCall(action, hooks, signer, chain_id))
        if self._script:
            step = self._script.popleft()
            if isinstance(step, Exception):
                raise step
            return step
        if self._default is not None:
            return self._default
        return SubmissionResult.ok(tx_hash=f"0x{len(self.calls):064x}")
