"""Kernel messaging – permission-update events and pub/sub ports."""
from authz_core.kernel.messaging.message import (
    PERMISSION_UPDATE,
    USER_TOPIC_PREFIX,
    ChannelSubscription,
    ChannelTransport,
    PermissionUpdateEvent,
    PermissionUpdatePublisher,
    RawMessage,
    decode_event,
    user_topic,
)

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
