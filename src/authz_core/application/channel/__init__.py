"""Application channel – real-time permission invalidation."""
from authz_core.application.channel.channel import (
    DEFAULT_RECONNECT_DELAY,
    InvalidationChannel,
    SubscriptionHandle,
    UpdateHandler,
)
from authz_core.application.channel.state import ChannelState

__all__ = [
    "ChannelState",
    "DEFAULT_RECONNECT_DELAY",
    "InvalidationChannel",
    "SubscriptionHandle",
    "UpdateHandler",
]
