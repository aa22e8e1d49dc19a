"""Config validation – errors raised while loading settings."""
from docsearch.config.validation.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
