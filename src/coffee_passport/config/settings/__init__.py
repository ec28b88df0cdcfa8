"""Config settings – 12-factor env-based configuration."""
from coffee_passport.config.settings.base import Settings
from coffee_passport.config.settings.capture import CaptureSettings, load_settings
from coffee_passport.config.settings.factory import SettingsFactory
from coffee_passport.config.settings.loaders import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    SettingsLoader,
)

__all__ = [
    "CaptureSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
    "load_settings",
]
