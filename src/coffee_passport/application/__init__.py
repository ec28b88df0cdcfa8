"""Application layer – idempotency gate and EPCIS capture use case."""
