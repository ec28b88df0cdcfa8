"""Kernel messaging – idempotency ports."""
from __future__ import annotations

import abc
import dataclasses

DEFAULT_RESULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_LOCK_TTL_SECONDS = 5 * 60


@dataclasses.dataclass(frozen=True)
class IdempotencyKey:
    """Composite idempotency key = (org_id, client_key).

    The pair identifies one logical request attempt. Cached responses and
    processing locks live in separate namespaces of the same store.
    """

    org_id: str
    client_key: str

    @property
    def response_key(self) -> str:
        return f"idempotency:{self.org_id}:{self.client_key}"

    @property
    def lock_key(self) -> str:
        return f"processing:{self.org_id}:{self.client_key}"

    def __str__(self) -> str:
        return f"{self.org_id}:{self.client_key}"


class KeyValueStore(abc.ABC):
    """Port: TTL-capable string store shared by every API instance.

    ``set_if_not_exists`` must be atomic across processes; the processing
    lock relies on it as its only ordering primitive.
    """

    @abc.abstractmethod
    async def get(self, key: str) -> str | None: ...

    @abc.abstractmethod
    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None: ...

    @abc.abstractmethod
    async def set_if_not_exists(self, key: str, value: str) -> bool: ...

    @abc.abstractmethod
    async def expire(self, key: str, ttl_seconds: int) -> None: ...

    @abc.abstractmethod
    async def delete(self, key: str) -> None: ...

    @abc.abstractmethod
    async def exists(self, key: str) -> bool: ...


__all__ = [
    "DEFAULT_LOCK_TTL_SECONDS",
    "DEFAULT_RESULT_TTL_SECONDS",
    "IdempotencyKey",
    "KeyValueStore",
]
