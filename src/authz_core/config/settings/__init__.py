"""Config settings – 12-factor env-based configuration."""
from authz_core.config.settings.base import Settings
from authz_core.config.settings.authz import AuthzSettings
from authz_core.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["AuthzSettings", "DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsLoader"]
