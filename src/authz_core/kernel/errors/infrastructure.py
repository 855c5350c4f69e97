"""Infrastructure errors – the directory, role store or channel misbehaved."""
from __future__ import annotations

from typing import Any

from authz_core.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    default_code = "infrastructure_error"
    retryable = True


class DirectoryUnavailableError(InfrastructureError):
    """Timeout, transport failure or 5xx from the identity or role service."""

    default_code = "directory_unavailable"

    def __init__(
        self,
        service: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message or f"Service '{service}' is unavailable",
            service=service,
            status_code=status_code,
            **kwargs,
        )
        self.service = service
        self.status_code = status_code


class ChannelDisconnectedError(InfrastructureError):
    """The pub/sub transport refused a subscription or dropped it."""

    default_code = "channel_disconnected"

    def __init__(self, topic: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Channel '{topic}' disconnected", topic=topic, **kwargs)
        self.topic = topic


class SerializationError(InfrastructureError):
    """A payload from a collaborator could not be decoded."""

    default_code = "serialization_error"
    retryable = False

    def __init__(self, message: str, *, payload_type: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, payload_type=payload_type, **kwargs)
        self.payload_type = payload_type


__all__ = [
    "ChannelDisconnectedError",
    "DirectoryUnavailableError",
    "InfrastructureError",
    "SerializationError",
]
