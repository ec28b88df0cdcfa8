"""Tests for the FastAPI adapter – capture endpoint, middleware, error mapping."""
from __future__ import annotations

import asyncio
from email.utils import format_datetime
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from coffee_passport.app import create_app
from coffee_passport.application.capture import SignatureVerifier, ValidationResult
from coffee_passport.config import CaptureSettings
from coffee_passport.kernel.errors import ConflictError, InfrastructureError
from coffee_passport.testing.fakes import (
    FailingKeyValueStore,
    InMemoryKeyValueStore,
    RecordingEventValidator,
)
from coffee_passport.kernel.time import SystemClock

CAPTURE = "/api/epcis/capture"
BODY: dict[str, Any] = {"events": [{"type": "ObjectEvent"}]}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _headers(key: str = "abc123", org: str = "org-1", request_id: str = "req-1") -> dict[str, str]:
    return {"X-Idempotency-Key": key, "X-Org-ID": org, "X-Request-ID": request_id}


def _client(
    store: Any = None,
    validator: Any = None,
    **settings: Any,
) -> tuple[TestClient, Any]:
    store = store if store is not None else InMemoryKeyValueStore()
    app = create_app(
        CaptureSettings(**settings),
        store=store,
        validator=validator,
        configure_logging=False,
    )
    return TestClient(app), store


# ---------------------------------------------------------------------------
# POST /api/epcis/capture
# ---------------------------------------------------------------------------


class TestCaptureEndpoint:
    def test_accepted(self) -> None:
        client, _ = _client()
        resp = client.post(CAPTURE, json=BODY, headers=_headers())
        assert resp.status_code == 202
        assert resp.json() == {"accepted": True, "ingestedCount": 1, "ids": ["event-req-1-0"]}
        assert resp.headers["x-correlation-id"] == "req-1"

    def test_replay_returns_identical_body(self) -> None:
        validator = RecordingEventValidator()
        client, _ = _client(validator=validator)
        first = client.post(CAPTURE, json=BODY, headers=_headers(request_id="req-1"))
        second = client.post(CAPTURE, json=BODY, headers=_headers(request_id="req-2"))
        assert second.status_code == 202
        assert second.content == first.content
        assert validator.call_count == 1

    def test_generated_request_id_seeds_event_ids(self) -> None:
        client, _ = _client()
        resp = client.post(CAPTURE, json=BODY, headers={"X-Idempotency-Key": "k", "X-Org-ID": "o"})
        request_id = resp.headers["x-correlation-id"]
        assert resp.json()["ids"] == [f"event-{request_id}-0"]

    @pytest.mark.parametrize("body", [{"events": []}, {}, {"events": "nope"}])
    def test_empty_or_malformed_batch_is_400(self, body: dict[str, Any]) -> None:
        client, store = _client()
        resp = client.post(CAPTURE, json=body, headers=_headers())
        assert resp.status_code == 400
        assert resp.json()["code"] == "validation_error"
        assert store.all_keys() == []

    def test_non_json_body_is_400(self) -> None:
        client, _ = _client()
        resp = client.post(CAPTURE, content=b"{oops", headers=_headers())
        assert resp.status_code == 400

    def test_validation_errors_enumerated(self) -> None:
        client, store = _client()
        resp = client.post(CAPTURE, json={"events": [{"bad": "event"}, {"type": "X"}]}, headers=_headers())
        assert resp.status_code == 400
        body = resp.json()
        assert body["errors"] == ["events[0]: missing type", "events[1]: unsupported type 'X'"]
        assert body["correlation_id"] == "req-1"
        assert store.all_keys() == []

    @pytest.mark.parametrize("event_type", [["ObjectEvent"], {"a": 1}])
    def test_non_string_type_is_400(self, event_type: Any) -> None:
        client, store = _client()
        resp = client.post(CAPTURE, json={"events": [{"type": event_type}]}, headers=_headers())
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "validation_error"
        assert body["errors"] == [f"events[0]: unsupported type {event_type!r}"]
        assert store.all_keys() == []

    @pytest.mark.parametrize("missing", ["X-Idempotency-Key", "X-Org-ID"])
    def test_missing_required_header_is_400(self, missing: str) -> None:
        client, _ = _client()
        headers = _headers()
        del headers[missing]
        resp = client.post(CAPTURE, json=BODY, headers=headers)
        assert resp.status_code == 400

    def test_in_flight_duplicate_is_409_with_retry_after(self) -> None:
        client, store = _client()
        asyncio.run(store.set_if_not_exists("processing:org-1:abc123", "processing"))
        resp = client.post(CAPTURE, json=BODY, headers=_headers())
        assert resp.status_code == 409
        assert resp.json()["code"] == "processing_in_progress"
        assert resp.headers["retry-after"] == "1"

    def test_internal_failure_is_generic_500(self) -> None:
        client, store = _client(validator=RecordingEventValidator(error=RuntimeError("db password=x")))
        resp = client.post(CAPTURE, json=BODY, headers=_headers())
        assert resp.status_code == 500
        assert resp.json()["code"] == "capture_failed"
        assert "password" not in resp.text
        assert store.all_keys() == []

    def test_store_outage_does_not_reject_capture(self) -> None:
        client, _ = _client(store=FailingKeyValueStore())
        resp = client.post(CAPTURE, json=BODY, headers=_headers())
        assert resp.status_code == 202

    def test_scenario_missing_type_from_validator(self) -> None:
        validator = RecordingEventValidator(ValidationResult(is_valid=False, errors=["missing type"]))
        client, store = _client(validator=validator)
        resp = client.post(CAPTURE, json={"events": [{"bad": "event"}]}, headers=_headers())
        assert resp.status_code == 400
        assert "missing type" in resp.json()["errors"]
        assert store.all_keys() == []


class TestCaptureSignature:
    SECRET = "s3cret"

    def _signed(self, body: bytes, date: str | None = None) -> dict[str, str]:
        headers = _headers()
        headers["Content-Type"] = "application/json"
        headers["X-Signature"] = SignatureVerifier.sign(body, self.SECRET)
        headers["Date"] = date or format_datetime(SystemClock().now(), usegmt=True)
        return headers

    def test_valid_signature_accepted(self) -> None:
        client, _ = _client(hmac_secret=self.SECRET)
        raw = b'{"events":[{"type":"ObjectEvent"}]}'
        resp = client.post(CAPTURE, content=raw, headers=self._signed(raw))
        assert resp.status_code == 202

    def test_bad_signature_is_401_and_gate_untouched(self) -> None:
        client, store = _client(hmac_secret=self.SECRET)
        raw = b'{"events":[{"type":"ObjectEvent"}]}'
        headers = self._signed(raw)
        headers["X-Signature"] = "sha256=" + "0" * 64
        resp = client.post(CAPTURE, content=raw, headers=headers)
        assert resp.status_code == 401
        assert resp.json()["code"] == "signature_invalid"
        assert store.all_keys() == []

    def test_stale_date_is_401(self) -> None:
        client, _ = _client(hmac_secret=self.SECRET)
        raw = b'{"events":[{"type":"ObjectEvent"}]}'
        resp = client.post(CAPTURE, content=raw, headers=self._signed(raw, "Mon, 01 Jan 2001 00:00:00 GMT"))
        assert resp.status_code == 401

    def test_signature_ignored_when_no_secret(self) -> None:
        client, _ = _client()
        resp = client.post(CAPTURE, json=BODY, headers={**_headers(), "X-Signature": "garbage"})
        assert resp.status_code == 202


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_live(self) -> None:
        client, _ = _client()
        assert client.get("/health/live").json() == {"status": "ok"}

    def test_ready_pings_store(self) -> None:
        client, _ = _client()
        resp = client.get("/health/ready")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "checks": {"ping": True}}

    def test_ready_degraded_when_check_fails(self) -> None:
        from coffee_passport.adapters.fastapi import FastAPIHealthRouter

        async def redis() -> bool:
            return False

        app = FastAPI()
        app.include_router(FastAPIHealthRouter(readiness_checks=[redis]))
        resp = TestClient(app).get("/health/ready")
        assert resp.status_code == 503
        assert resp.json()["checks"] == {"redis": False}


# ---------------------------------------------------------------------------
# Middleware / exception mapper
# ---------------------------------------------------------------------------


class TestCorrelationMiddleware:
    def _app(self, captured: list[Any]) -> FastAPI:
        from coffee_passport.adapters.fastapi import FastAPICorrelationIdMiddleware
        from coffee_passport.observability.correlation import CorrelationContext

        app = FastAPI()
        app.add_middleware(FastAPICorrelationIdMiddleware)

        @app.get("/ping")
        async def ping() -> dict[str, str]:
            captured.append(CorrelationContext.get())
            return {"pong": "true"}

        return app

    def test_correlation_header_wins(self) -> None:
        captured: list[Any] = []
        client = TestClient(self._app(captured))
        resp = client.get("/ping", headers={"X-Correlation-ID": "c-1", "X-Request-ID": "r-1"})
        assert resp.headers["x-correlation-id"] == "c-1"
        assert captured[0].correlation_id == "c-1"

    def test_traceparent_fallback(self) -> None:
        client = TestClient(self._app([]))
        traceparent = "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"
        resp = client.get("/ping", headers={"traceparent": traceparent})
        assert resp.headers["x-correlation-id"] == "4bf92f3577b34da6a3ce929d0e0e4736"

    def test_org_recorded(self) -> None:
        captured: list[Any] = []
        TestClient(self._app(captured)).get("/ping", headers={"X-Org-ID": "org-9"})
        assert captured[0].org_id == "org-9"


class TestExceptionMapper:
    def _app(self, exc: Exception) -> FastAPI:
        from coffee_passport.adapters.fastapi import FastAPIExceptionMapper

        app = FastAPI()
        FastAPIExceptionMapper().register(app)

        @app.get("/boom")
        async def boom() -> None:
            raise exc

        return app

    def test_conflict_maps_to_409(self) -> None:
        resp = TestClient(self._app(ConflictError("busy"))).get("/boom")
        assert resp.status_code == 409
        assert "retry-after" not in resp.headers

    def test_infrastructure_maps_to_503(self) -> None:
        resp = TestClient(self._app(InfrastructureError("down"))).get("/boom")
        assert resp.status_code == 503
        assert resp.json() == {
            "code": "infrastructure_error",
            "message": "down",
            "detail": {},
            "correlation_id": None,
        }

    def test_status_for(self) -> None:
        from coffee_passport.adapters.fastapi import FastAPIExceptionMapper
        from coffee_passport.application.capture import ProcessingInProgressError

        mapper = FastAPIExceptionMapper()
        assert mapper.status_for(ProcessingInProgressError("k")) == 409
        assert mapper.status_for(RuntimeError()) == 500
