"""Testing support – in-memory doubles for the capture gate."""

from coffee_passport.testing.fakes import (
    FakeClock,
    FailingKeyValueStore,
    InMemoryKeyValueStore,
    RecordingEventValidator,
)

__all__ = [
    "FailingKeyValueStore",
    "FakeClock",
    "InMemoryKeyValueStore",
    "RecordingEventValidator",
]
