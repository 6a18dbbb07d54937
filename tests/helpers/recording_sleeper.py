"""RecordingSleeper - stand-in for asyncio.sleep in execution tests.

Each awaited delay is recorded and, when a FakeTimeAuthority is given,
the fake clock is advanced by the same amount so that ordering against
timestamps can be asserted.
"""

from __future__ import annotations

import asyncio

from tests.helpers.fake_time_authority import FakeTimeAuthority


class RecordingSleeper:
    """Async callable recording each requested delay in seconds."""

    def __init__(self, time_authority: FakeTimeAuthority | None = None) -> None:
        self.delays: list[float] = []
        self._time = time_authority

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self._time is not None and seconds > 0:
            self._time.advance(seconds=seconds)
        # Yield so concurrent tasks interleave as they would with a real sleep
        await asyncio.sleep(0)

    @property
    def total(self) -> float:
        return sum(self.delays)
