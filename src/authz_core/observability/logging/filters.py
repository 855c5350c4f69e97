"""Masking of credentials in log payloads.

Keys are matched case-insensitively. Besides keyed secrets, any string
value carrying an ``Authorization`` style ``Bearer <token>`` is masked
down to its scheme, since HTTP errors tend to echo request headers.
"""
from __future__ import annotations

import re
from typing import Any

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset({
    "access_token",
    "api_key",
    "authorization",
    "credentials",
    "password",
    "refresh_token",
    "secret",
    "token",
})

_BEARER = re.compile(r"(?i)\b(bearer)\s+[A-Za-z0-9\-._~+/]+=*")


class SensitiveFieldsFilter:
    REDACTED = "[REDACTED]"

    def __init__(self, sensitive_fields: frozenset[str] | None = None) -> None:
        fields = sensitive_fields if sensitive_fields is not None else DEFAULT_SENSITIVE_FIELDS
        self._fields = frozenset(f.lower() for f in fields)

    def is_sensitive(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._fields

    def redact(self, data: dict[str, Any]) -> dict[str, Any]:
        """Mask sensitive top-level keys only."""
        return {key: self.REDACTED if self.is_sensitive(key) else value for key, value in data.items()}

    def redact_deep(self, data: dict[str, Any]) -> dict[str, Any]:
        """Mask sensitive keys at any depth, through lists and tuples too."""
        return self._scrub(data)

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                key: self.REDACTED if self.is_sensitive(key) else self._scrub(item)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple)):
            return type(value)(self._scrub(item) for item in value)
        if isinstance(value, str) and "earer" in value:
            return _BEARER.sub(rf"\1 {self.REDACTED}", value)
        return value


__all__ = ["DEFAULT_SENSITIVE_FIELDS", "SensitiveFieldsFilter"]
