"""Redis adapter – RedisKeyValueStore."""
from __future__ import annotations

from typing import Any

from coffee_passport.kernel.errors import ConnectionError
from coffee_passport.kernel.messaging import KeyValueStore


def _require_redis() -> Any:
    try:
        import redis.asyncio as aioredis
        return aioredis
    except ImportError as exc:
        raise ImportError("Install 'coffee-passport[redis]' to use the Redis adapter") from exc


class RedisKeyValueStore(KeyValueStore):
    """Async Redis implementation of :class:`KeyValueStore`.

    ``set_if_not_exists`` maps to ``SET key value NX``, which Redis executes
    atomically, so the processing lock holds across API instances.
    Client errors are re-raised as :class:`ConnectionError`.
    """

    def __init__(self, url: str, **kwargs: Any) -> None:
        aioredis = _require_redis()
        kwargs.setdefault("decode_responses", True)
        self._client = aioredis.from_url(url, **kwargs)

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except Exception as exc:
            raise ConnectionError("redis", f"GET {key} failed: {exc}", cause=exc) from exc

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except Exception as exc:
            raise ConnectionError("redis", f"SET {key} failed: {exc}", cause=exc) from exc

    async def set_if_not_exists(self, key: str, value: str) -> bool:
        try:
            return bool(await self._client.set(key, value, nx=True))
        except Exception as exc:
            raise ConnectionError("redis", f"SET NX {key} failed: {exc}", cause=exc) from exc

    async def expire(self, key: str, ttl_seconds: int) -> None:
        try:
            await self._client.expire(key, ttl_seconds)
        except Exception as exc:
            raise ConnectionError("redis", f"EXPIRE {key} failed: {exc}", cause=exc) from exc

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except Exception as exc:
            raise ConnectionError("redis", f"DEL {key} failed: {exc}", cause=exc) from exc

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._client.exists(key))
        except Exception as exc:
            raise ConnectionError("redis", f"EXISTS {key} failed: {exc}", cause=exc) from exc

    async def ping(self) -> bool:
        """Readiness probe; ``False`` instead of raising when Redis is down."""
        try:
            return bool(await self._client.ping())
        except Exception:  # noqa: BLE001
            return False

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["RedisKeyValueStore"]
