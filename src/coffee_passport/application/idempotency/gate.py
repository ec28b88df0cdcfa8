"""Idempotency gate over a shared :class:`KeyValueStore`.

Every operation is best effort: a store outage is logged and degrades to
"not yet processed", never to a rejected request.
"""
from __future__ import annotations

import json
from typing import Any

from coffee_passport.kernel.messaging import (
    DEFAULT_LOCK_TTL_SECONDS,
    DEFAULT_RESULT_TTL_SECONDS,
    IdempotencyKey,
    KeyValueStore,
)
from coffee_passport.observability.logging import get_logger

__all__ = ["LOCK_MARKER", "IdempotencyGate"]

LOCK_MARKER = "processing"

logger = get_logger(__name__)


class IdempotencyGate:
    """Owns the cached-response and processing-lock records for capture keys.

    Parameters
    ----------
    store:
        Shared key/value store. Its ``set_if_not_exists`` must be atomic.
    result_ttl_seconds:
        Retention of cached responses.
    lock_ttl_seconds:
        Expiry of a processing lock left behind by a crashed worker.
    fail_open:
        Value returned by :meth:`try_acquire_lock` when the store cannot be
        reached. ``True`` keeps ingestion available during an outage at the
        cost of duplicate suppression.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        result_ttl_seconds: int = DEFAULT_RESULT_TTL_SECONDS,
        lock_ttl_seconds: int = DEFAULT_LOCK_TTL_SECONDS,
        fail_open: bool = True,
    ) -> None:
        self._store = store
        self._result_ttl = result_ttl_seconds
        self._lock_ttl = lock_ttl_seconds
        self._fail_open = fail_open

    @property
    def lock_ttl_seconds(self) -> int:
        return self._lock_ttl

    async def lookup(self, key: str, org_id: str) -> dict[str, Any] | None:
        """Return the cached response for ``(org_id, key)`` or ``None``."""
        idem = IdempotencyKey(org_id=org_id, client_key=key)
        try:
            raw = await self._store.get(idem.response_key)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "idempotency.store_error",
                operation="lookup",
                org_id=org_id,
                idempotency_key=key,
                error=str(exc),
            )
            return None
        if raw is None:
            return None
        try:
            response = json.loads(raw)
        except ValueError as exc:
            logger.warning(
                "idempotency.corrupt_response",
                org_id=org_id,
                idempotency_key=key,
                error=str(exc),
            )
            return None
        logger.info("capture.idem_hit", org_id=org_id, idempotency_key=key)
        return response

    async def try_acquire_lock(self, key: str, org_id: str) -> bool:
        """Create the processing lock if absent; ``True`` when this caller owns it."""
        idem = IdempotencyKey(org_id=org_id, client_key=key)
        try:
            acquired = await self._store.set_if_not_exists(idem.lock_key, LOCK_MARKER)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "idempotency.store_error",
                operation="acquire_lock",
                org_id=org_id,
                idempotency_key=key,
                error=str(exc),
                proceeding_unlocked=self._fail_open,
            )
            return self._fail_open
        if not acquired:
            return False
        try:
            await self._store.expire(idem.lock_key, self._lock_ttl)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "idempotency.store_error",
                operation="expire_lock",
                org_id=org_id,
                idempotency_key=key,
                error=str(exc),
            )
        logger.info(
            "capture.lock_acquired",
            org_id=org_id,
            idempotency_key=key,
            ttl=self._lock_ttl,
        )
        return True

    async def is_processing(self, key: str, org_id: str) -> bool:
        """Whether another attempt currently holds the lock for ``(org_id, key)``."""
        idem = IdempotencyKey(org_id=org_id, client_key=key)
        try:
            return await self._store.exists(idem.lock_key)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "idempotency.store_error",
                operation="is_processing",
                org_id=org_id,
                idempotency_key=key,
                error=str(exc),
            )
            return False

    async def release_lock(self, key: str, org_id: str) -> None:
        idem = IdempotencyKey(org_id=org_id, client_key=key)
        try:
            await self._store.delete(idem.lock_key)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "idempotency.store_error",
                operation="release_lock",
                org_id=org_id,
                idempotency_key=key,
                error=str(exc),
            )
            return
        logger.info("capture.lock_released", org_id=org_id, idempotency_key=key)

    async def store(self, key: str, org_id: str, response: dict[str, Any]) -> None:
        """Cache *response* under ``(org_id, key)`` for the result TTL."""
        idem = IdempotencyKey(org_id=org_id, client_key=key)
        try:
            payload = json.dumps(response, separators=(",", ":"), sort_keys=True)
            await self._store.set_with_expiry(idem.response_key, self._result_ttl, payload)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "idempotency.store_error",
                operation="store",
                org_id=org_id,
                idempotency_key=key,
                error=str(exc),
            )
            return
        logger.info(
            "capture.stored",
            org_id=org_id,
            idempotency_key=key,
            ttl=self._result_ttl,
        )
