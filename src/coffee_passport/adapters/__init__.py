"""Adapters – Redis key/value store and FastAPI HTTP surface."""
