"""Config validation errors."""
from docsearch.kernel.errors import ApplicationError

_SECRET_MARKERS = ("password", "secret", "token")
MASKED = "***"


def _is_secret(setting_name: str) -> bool:
    name = setting_name.lower()
    return any(marker in name for marker in _SECRET_MARKERS)


class ConfigError(ApplicationError):
    """Settings could not be loaded or failed validation."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A required setting has no value in the environment."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"Required setting '{setting_name}' is not set")
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting has a value that cannot be used.

    Values of credential settings (``OPENSEARCH_PASSWORD`` and the like) are
    masked in both the message and ``value``.
    """
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        if _is_secret(setting_name) and value is not None:
            value = MASKED
        super().__init__(f"Setting '{setting_name}' = {value!r} is invalid: {reason}")
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
