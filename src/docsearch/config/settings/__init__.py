"""Config settings – 12-factor env-based configuration."""
from docsearch.config.settings.base import Settings
from docsearch.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsLoader"]
