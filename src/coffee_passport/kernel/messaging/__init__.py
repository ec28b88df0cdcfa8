"""Kernel messaging – idempotency keys and the key/value store port."""
from coffee_passport.kernel.messaging.idempotency import (
    DEFAULT_LOCK_TTL_SECONDS,
    DEFAULT_RESULT_TTL_SECONDS,
    IdempotencyKey,
    KeyValueStore,
)

__all__ = [
    "DEFAULT_LOCK_TTL_SECONDS",
    "DEFAULT_RESULT_TTL_SECONDS",
    "IdempotencyKey",
    "KeyValueStore",
]
