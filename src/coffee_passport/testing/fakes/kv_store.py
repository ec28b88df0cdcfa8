"""Testing fakes – InMemoryKeyValueStore, FailingKeyValueStore."""
from __future__ import annotations

from coffee_passport.kernel.errors import ConnectionError
from coffee_passport.kernel.messaging import KeyValueStore
from coffee_passport.kernel.time import Clock, SystemClock

# Expiry given to keys created by set_if_not_exists until expire() is called.
_SETNX_DEFAULT_TTL_SECONDS = 3600


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed key/value store with clock-driven expiry.

    No method awaits, so each call is atomic with respect to other tasks on
    the same event loop. Only valid for a single process.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._entries: dict[str, tuple[str, float]] = {}

    def _live(self, key: str) -> tuple[str, float] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry[1] <= self._clock.timestamp():
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> str | None:
        entry = self._live(key)
        return entry[0] if entry is not None else None

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        self._entries[key] = (value, self._clock.timestamp() + ttl_seconds)

    async def set_if_not_exists(self, key: str, value: str) -> bool:
        if self._live(key) is not None:
            return False
        self._entries[key] = (value, self._clock.timestamp() + _SETNX_DEFAULT_TTL_SECONDS)
        return True

    async def expire(self, key: str, ttl_seconds: int) -> None:
        entry = self._live(key)
        if entry is not None:
            self._entries[key] = (entry[0], self._clock.timestamp() + ttl_seconds)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def exists(self, key: str) -> bool:
        return self._live(key) is not None

    async def ping(self) -> bool:
        return True

    def ttl(self, key: str) -> float | None:
        """Seconds until *key* expires, or ``None`` if absent."""
        entry = self._live(key)
        return None if entry is None else entry[1] - self._clock.timestamp()

    def all_keys(self) -> list[str]:
        return [k for k in list(self._entries) if self._live(k) is not None]


class FailingKeyValueStore(KeyValueStore):
    """Store whose selected operations raise, simulating a Redis outage.

    ``failing`` names the methods that raise; by default all of them do.
    Operations not listed delegate to an :class:`InMemoryKeyValueStore`.
    """

    ALL = frozenset({"get", "set_with_expiry", "set_if_not_exists", "expire", "delete", "exists"})

    def __init__(self, failing: frozenset[str] | set[str] | None = None) -> None:
        self.failing = frozenset(failing) if failing is not None else self.ALL
        self.inner = InMemoryKeyValueStore()
        self.calls: list[str] = []

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failing:
            raise ConnectionError("memory", f"{operation} unavailable")

    async def get(self, key: str) -> str | None:
        self._check("get")
        return await self.inner.get(key)

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        self._check("set_with_expiry")
        await self.inner.set_with_expiry(key, ttl_seconds, value)

    async def set_if_not_exists(self, key: str, value: str) -> bool:
        self._check("set_if_not_exists")
        return await self.inner.set_if_not_exists(key, value)

    async def expire(self, key: str, ttl_seconds: int) -> None:
        self._check("expire")
        await self.inner.expire(key, ttl_seconds)

    async def delete(self, key: str) -> None:
        self._check("delete")
        await self.inner.delete(key)

    async def exists(self, key: str) -> bool:
        self._check("exists")
        return await self.inner.exists(key)


__all__ = ["FailingKeyValueStore", "InMemoryKeyValueStore"]
