"""In-memory execution record store. Not suitable for production use."""

from __future__ import annotations

from uuid import UUID

from forum_engine.application.ports.execution_repository import (
    ExecutionRepositoryProtocol,
)
from forum_engine.domain.models.execution import Execution


class ExecutionRepositoryStub(ExecutionRepositoryProtocol):
    """In-memory implementation of ExecutionRepositoryProtocol.

    Attributes:
        _records: Latest version of each record by id.
        history: Every recorded version in order (for asserting sequencing).
    """

    def __init__(self) -> None:
        self._records: dict[UUID, Execution] = {}
        self.history: list[Execution] = []

    async def record_execution(self, execution: Execution) -> None:
        self._records[execution.id] = execution
        self.history.append(execution)

    async def list_executions(self, proposal_id: UUID) -> list[Execution]:
        return [e for e in self._records.values() if e.proposal_id == proposal_id]

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._records.clear()
        self.history.clear()
