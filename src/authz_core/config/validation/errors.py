"""Config errors – raised while loading :class:`AuthzSettings`."""
from __future__ import annotations

from typing import Any

from authz_core.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """Settings could not be loaded. *setting* names the offending key when known."""

    default_code = "config_error"

    def __init__(self, message: str, *, setting: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, setting=setting, **kwargs)
        self.setting_name = setting


class MissingRequiredSettingError(ConfigError):
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"Required setting '{setting_name}' is missing", setting=setting_name)


class InvalidSettingValueError(ConfigError):
    """Present, parseable, but outside the accepted range."""

    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}",
            setting=setting_name,
        )
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
