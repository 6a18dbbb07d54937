"""Test helpers for forum engine tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    RecordingSleeper: Records awaited delays instead of sleeping
    factories: Builders for forums, proposals, actions and agents

Usage:
    from tests.helpers import FakeTimeAuthority
"""

from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.recording_sleeper import RecordingSleeper

__all__ = ["FakeTimeAuthority", "RecordingSleeper"]
