"""Composition root – builds the FastAPI application.

Run with::

    uvicorn coffee_passport.app:create_app --factory
"""
from __future__ import annotations

import contextlib
from typing import Any, AsyncIterator

from fastapi import FastAPI

from coffee_passport import __version__
from coffee_passport.adapters.fastapi import (
    FastAPICaptureRouter,
    FastAPICorrelationIdMiddleware,
    FastAPIExceptionMapper,
    FastAPIHealthRouter,
)
from coffee_passport.adapters.redis import RedisKeyValueStore
from coffee_passport.application.capture import (
    CaptureOrchestrator,
    CaptureService,
    EpcisEventValidator,
    EventIngestor,
    EventValidator,
    SignatureVerifier,
)
from coffee_passport.application.idempotency import IdempotencyGate
from coffee_passport.config import CaptureSettings, load_settings
from coffee_passport.kernel.messaging import KeyValueStore
from coffee_passport.observability.logging import JsonLoggerFactory, get_logger

logger = get_logger(__name__)


def build_orchestrator(
    settings: CaptureSettings,
    store: KeyValueStore,
    *,
    validator: EventValidator | None = None,
    ingestor: EventIngestor | None = None,
) -> CaptureOrchestrator:
    gate = IdempotencyGate(
        store,
        result_ttl_seconds=settings.result_ttl_seconds,
        lock_ttl_seconds=settings.lock_ttl_seconds,
        fail_open=settings.lock_fail_open,
    )
    service = CaptureService(validator or EpcisEventValidator(), ingestor)
    return CaptureOrchestrator(gate, service)


def create_app(
    settings: CaptureSettings | None = None,
    *,
    store: KeyValueStore | None = None,
    validator: EventValidator | None = None,
    ingestor: EventIngestor | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Wire settings, store, gate and routers into a FastAPI app.

    Without an explicit *store* the app connects to ``settings.redis_url``.
    """
    settings = settings or load_settings()
    if configure_logging:
        JsonLoggerFactory.configure(settings.log_level, json_output=settings.json_logs)

    kv_store: KeyValueStore = store if store is not None else RedisKeyValueStore(settings.redis_url)
    orchestrator = build_orchestrator(settings, kv_store, validator=validator, ingestor=ingestor)
    verifier = (
        SignatureVerifier(settings.hmac_secret, max_clock_skew_seconds=settings.max_clock_skew_seconds)
        if settings.signature_required
        else None
    )
    if verifier is None:
        logger.warning("capture.signature_disabled", reason="no hmac_secret configured")

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        close = getattr(kv_store, "close", None)
        if close is not None:
            await close()

    app = FastAPI(
        title="Coffee Digital Passport – EPCIS capture",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(FastAPICorrelationIdMiddleware)
    FastAPIExceptionMapper().register(app)
    app.include_router(FastAPICaptureRouter(orchestrator, verifier=verifier))

    readiness: list[Any] = []
    ping = getattr(kv_store, "ping", None)
    if ping is not None:
        readiness.append(ping)
    app.include_router(FastAPIHealthRouter(readiness_checks=readiness))

    app.state.settings = settings
    app.state.store = kv_store
    app.state.orchestrator = orchestrator
    return app


__all__ = ["build_orchestrator", "create_app"]
