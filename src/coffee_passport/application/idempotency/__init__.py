"""Application idempotency – duplicate suppression and single-flight locking."""
from coffee_passport.application.idempotency.gate import LOCK_MARKER, IdempotencyGate

__all__ = ["LOCK_MARKER", "IdempotencyGate"]
