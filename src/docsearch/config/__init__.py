"""Config – 12-factor settings and loaders."""

from docsearch.config.settings import DotenvSettingsLoader, EnvSettingsLoader, Settings, SettingsLoader
from docsearch.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
