"""Config – 12-factor settings and loaders."""

from txoutbox.config.settings import EnvSettingsLoader, OutboxSettings, Settings, SettingsLoader
from txoutbox.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "OutboxSettings",
    "Settings",
    "SettingsLoader",
]
