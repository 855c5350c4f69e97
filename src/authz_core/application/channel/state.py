"""Application channel – ChannelState."""
from __future__ import annotations

from enum import Enum


class ChannelState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    SUBSCRIBED = "subscribed"
    CLOSED = "closed"


__all__ = ["ChannelState"]
