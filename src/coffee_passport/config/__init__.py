"""Config – 12-factor settings and loaders."""

from coffee_passport.config.settings import (
    CaptureSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    Settings,
    SettingsFactory,
    SettingsLoader,
    load_settings,
)
from coffee_passport.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "CaptureSettings",
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
    "load_settings",
]
