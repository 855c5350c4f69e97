"""Config settings – AuthzSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from authz_core.config.settings.base import Settings
from authz_core.config.validation import InvalidSettingValueError
from authz_core.observability.logging.factory import LOG_FORMATS
from authz_core.resilience.retry import BackoffStrategy, backoff_for


@dataclasses.dataclass
class AuthzSettings(Settings):
    """Runtime configuration, read from ``AUTHZ_*`` environment variables.

    ``redis_url`` unset disables the real-time invalidation channel; a
    ``refresh_interval_seconds`` of ``0`` disables the periodic fallback
    refresh. A ``reconnect_max_delay_seconds`` above ``reconnect_delay_seconds``
    makes reconnects back off exponentially up to that ceiling.
    """

    _prefix: ClassVar[str] = "AUTHZ"

    api_base_url: str
    request_timeout_seconds: float = 10.0
    redis_url: str | None = None
    reconnect_delay_seconds: float = 5.0
    reconnect_max_delay_seconds: float = 0.0
    refresh_interval_seconds: float = 300.0
    sign_in_path: str = "/auth"
    log_level: str = "INFO"
    log_format: str = "json"

    def _validate(self) -> None:
        if not self.api_base_url:
            raise InvalidSettingValueError("api_base_url", self.api_base_url, "must not be empty")
        self.api_base_url = self.api_base_url.rstrip("/")
        if self.request_timeout_seconds <= 0:
            raise InvalidSettingValueError(
                "request_timeout_seconds", self.request_timeout_seconds, "must be > 0"
            )
        if self.reconnect_delay_seconds < 0:
            raise InvalidSettingValueError(
                "reconnect_delay_seconds", self.reconnect_delay_seconds, "must be >= 0"
            )
        if self.reconnect_max_delay_seconds < 0:
            raise InvalidSettingValueError(
                "reconnect_max_delay_seconds", self.reconnect_max_delay_seconds, "must be >= 0"
            )
        if self.refresh_interval_seconds < 0:
            raise InvalidSettingValueError(
                "refresh_interval_seconds", self.refresh_interval_seconds, "must be >= 0"
            )
        if not self.sign_in_path.startswith("/"):
            raise InvalidSettingValueError("sign_in_path", self.sign_in_path, "must start with '/'")
        if self.log_format not in LOG_FORMATS:
            raise InvalidSettingValueError("log_format", self.log_format, f"must be one of {LOG_FORMATS}")
        if not self.redis_url:
            self.redis_url = None

    @property
    def realtime_enabled(self) -> bool:
        return self.redis_url is not None

    @property
    def refresh_interval(self) -> float | None:
        return self.refresh_interval_seconds or None

    @property
    def reconnect_backoff(self) -> BackoffStrategy:
        return backoff_for(self.reconnect_delay_seconds, self.reconnect_max_delay_seconds or None)


__all__ = ["AuthzSettings"]
