"""Testing fakes – in-memory doubles for kernel and application ports."""
from coffee_passport.testing.fakes.clock import FakeClock
from coffee_passport.testing.fakes.kv_store import FailingKeyValueStore, InMemoryKeyValueStore
from coffee_passport.testing.fakes.validator import RecordingEventValidator
from coffee_passport.kernel.time import FrozenClock

__all__ = [
    "FailingKeyValueStore",
    "FakeClock",
    "FrozenClock",
    "InMemoryKeyValueStore",
    "RecordingEventValidator",
]
