"""
Pytest configuration and shared fixtures for forum engine tests.

Testing Standards:
- Async tests run under pytest-asyncio auto mode (see pyproject.toml)
- Use in-memory stubs for stores, MagicMock(spec=...) for the metrics port
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from tests.helpers import FakeTimeAuthority, RecordingSleeper


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Time authority frozen at 2026-01-15T10:00:00Z."""
    return FakeTimeAuthority(
        frozen_at=datetime(2026, 1, 15, 10, 0, 0, tzinfo=timezone.utc)
    )


@pytest.fixture
def recording_sleeper(fake_time_authority: FakeTimeAuthority) -> RecordingSleeper:
    """Sleeper that records delays and advances the fake clock."""
    return RecordingSleeper(fake_time_authority)
