"""Execution repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from forum_engine.domain.models.execution import Execution


class ExecutionRepositoryProtocol(Protocol):
    """Protocol for execution record persistence.

    One record exists per (proposal, executor). Recording the same record
    id again replaces the stored version.
    """

    async def record_execution(self, execution: Execution) -> None: ...

    async def list_executions(self, proposal_id: UUID) -> list[Execution]: ...
