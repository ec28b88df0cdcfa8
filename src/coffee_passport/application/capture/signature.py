"""HMAC-SHA256 request signatures and ``Date`` clock-skew checks.

Signatures use the ``sha256=<hexdigest>`` form computed over the raw
request body.
"""
from __future__ import annotations

import hashlib
import hmac
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

from coffee_passport.application.capture.errors import SignatureError
from coffee_passport.kernel.time import Clock, SystemClock

__all__ = ["SignatureVerifier"]


class SignatureVerifier:
    """Verifies ``X-Signature`` and ``Date`` headers for a shared secret."""

    ALG = "sha256"

    def __init__(
        self,
        secret: str,
        *,
        max_clock_skew_seconds: int = 300,
        clock: Clock | None = None,
    ) -> None:
        if not secret:
            raise ValueError("secret must not be empty")
        self._secret = secret
        self._max_skew = max_clock_skew_seconds
        self._clock = clock or SystemClock()

    @classmethod
    def sign(cls, payload: bytes, secret: str) -> str:
        """Return a signature string of the form ``sha256=<hexdigest>``."""
        mac = hmac.new(secret.encode(), payload, hashlib.sha256)
        return f"{cls.ALG}={mac.hexdigest()}"

    def verify(self, payload: bytes, signature: str | None, date_header: str | None) -> None:
        """Raise :class:`SignatureError` unless both headers check out."""
        if not signature:
            raise SignatureError("Missing request signature")
        expected = self.sign(payload, self._secret)
        if not hmac.compare_digest(expected.encode(), signature.strip().lower().encode()):
            raise SignatureError("Request signature does not match")
        if not date_header:
            raise SignatureError("Missing Date header")
        sent_at = _parse_date(date_header)
        if sent_at is None:
            raise SignatureError("Unparseable Date header")
        skew = abs((self._clock.now() - sent_at).total_seconds())
        if skew > self._max_skew:
            raise SignatureError(
                "Request date outside allowed clock skew",
                detail={"max_clock_skew_seconds": self._max_skew},
            )


def _parse_date(value: str) -> datetime | None:
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
