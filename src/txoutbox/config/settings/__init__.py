"""Config settings – 12-factor env-based configuration."""
from txoutbox.config.settings.base import Settings
from txoutbox.config.settings.loaders import EnvSettingsLoader, SettingsLoader
from txoutbox.config.settings.outbox import OutboxSettings

__all__ = ["EnvSettingsLoader", "OutboxSettings", "Settings", "SettingsLoader"]
