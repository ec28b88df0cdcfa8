"""Redis adapter – shared key/value store for the idempotency gate."""
from coffee_passport.adapters.redis.store import RedisKeyValueStore

__all__ = ["RedisKeyValueStore"]
