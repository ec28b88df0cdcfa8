"""Config settings – CaptureSettings for the EPCIS capture API."""
from __future__ import annotations

import dataclasses
from typing import Any

from coffee_passport.config.settings.base import Settings
from coffee_passport.config.settings.factory import SettingsFactory
from coffee_passport.config.settings.loaders import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    SettingsLoader,
)
from coffee_passport.config.validation import InvalidSettingValueError
from coffee_passport.kernel.messaging import (
    DEFAULT_LOCK_TTL_SECONDS,
    DEFAULT_RESULT_TTL_SECONDS,
)


@dataclasses.dataclass
class CaptureSettings(Settings):
    """Runtime configuration, read from ``COFFEE_PASSPORT_*`` variables."""

    _prefix = "COFFEE_PASSPORT"

    redis_url: str = "redis://localhost:6379/0"
    result_ttl_seconds: int = DEFAULT_RESULT_TTL_SECONDS
    lock_ttl_seconds: int = DEFAULT_LOCK_TTL_SECONDS
    lock_fail_open: bool = True
    log_level: str = "INFO"
    json_logs: bool = True
    hmac_secret: str = ""
    max_clock_skew_seconds: int = 300

    def _validate(self) -> None:
        for name in ("result_ttl_seconds", "lock_ttl_seconds", "max_clock_skew_seconds"):
            value = getattr(self, name)
            if value <= 0:
                raise InvalidSettingValueError(name, value, "must be a positive number of seconds")
        if not self.redis_url:
            raise InvalidSettingValueError("redis_url", self.redis_url, "must not be empty")

    @property
    def signature_required(self) -> bool:
        return bool(self.hmac_secret)


def load_settings(env_file: str | None = None, **overrides: Any) -> CaptureSettings:
    """Build :class:`CaptureSettings` from the environment (and *env_file*)."""
    loader: SettingsLoader = (
        DotenvSettingsLoader(env_file) if env_file is not None else EnvSettingsLoader()
    )
    return SettingsFactory.create(CaptureSettings, loaders=[loader], overrides=overrides or None)


__all__ = ["CaptureSettings", "load_settings"]
