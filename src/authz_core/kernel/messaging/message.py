"""Kernel messaging – permission-update event and channel ports."""
from __future__ import annotations

import abc
import dataclasses
import json
from typing import Any, AsyncIterator, Iterable

from authz_core.kernel.errors import SerializationError

PERMISSION_UPDATE = "PERMISSION_UPDATE"
USER_TOPIC_PREFIX = "permissions-updated:"

type RawMessage = bytes | str


def user_topic(user_id: str) -> str:
    """Per-user topic name carrying :class:`PermissionUpdateEvent`\\ s."""
    return f"{USER_TOPIC_PREFIX}{user_id}"


@dataclasses.dataclass(frozen=True)
class PermissionUpdateEvent:
    """``{"type": "PERMISSION_UPDATE", "userId": ...}``, the only message shape."""

    user_id: str
    type: str = PERMISSION_UPDATE

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "userId": self.user_id}

    def encode(self) -> bytes:
        return json.dumps(self.to_dict()).encode("utf-8")


def decode_event(raw: RawMessage) -> PermissionUpdateEvent | None:
    """Decode a raw channel payload.

    Returns ``None`` for well-formed messages of any other type. Raises
    :class:`SerializationError` when the payload is not a JSON object or a
    ``PERMISSION_UPDATE`` lacks a string ``userId``.
    """
    try:
        data: Any = json.loads(raw)
    except (TypeError, ValueError, UnicodeDecodeError) as exc:
        raise SerializationError(
            "Channel message is not valid JSON",
            payload_type="PermissionUpdateEvent",
            cause=exc,
        ) from exc
    if not isinstance(data, dict):
        raise SerializationError(
            "Channel message must be a JSON object",
            payload_type="PermissionUpdateEvent",
        )
    if data.get("type") != PERMISSION_UPDATE:
        return None
    user_id = data.get("userId")
    if not isinstance(user_id, str) or not user_id:
        raise SerializationError(
            "PERMISSION_UPDATE message without a userId",
            payload_type="PermissionUpdateEvent",
        )
    return PermissionUpdateEvent(user_id=user_id)


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------


class ChannelSubscription(abc.ABC):
    """One live subscription to a topic.

    Iterating yields raw payloads until the transport disconnects, at which
    point iteration either stops or raises
    :class:`~authz_core.kernel.errors.ChannelDisconnectedError`.
    """

    @abc.abstractmethod
    def __aiter__(self) -> AsyncIterator[RawMessage]: ...

    @abc.abstractmethod
    async def close(self) -> None:
        """Release the subscription. Must be safe to call more than once."""


class ChannelTransport(abc.ABC):
    """Port: open subscriptions on a pub/sub transport (Redis, WebSocket…)."""

    @abc.abstractmethod
    async def subscribe(self, topic: str) -> ChannelSubscription:
        """Open a subscription; raise ``ChannelDisconnectedError`` on failure."""


class PermissionUpdatePublisher(abc.ABC):
    """Port: announce that users' effective permissions changed."""

    @abc.abstractmethod
    async def notify_user(self, user_id: str) -> None: ...

    async def notify_users(self, user_ids: Iterable[str]) -> None:
        for user_id in dict.fromkeys(user_ids):
            await self.notify_user(user_id)


__all__ = [
    "ChannelSubscription",
    "ChannelTransport",
    "PERMISSION_UPDATE",
    "PermissionUpdateEvent",
    "PermissionUpdatePublisher",
    "RawMessage",
    "USER_TOPIC_PREFIX",
    "decode_event",
    "user_topic",
]
