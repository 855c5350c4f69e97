"""Application session – SessionState."""
from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"


__all__ = ["SessionState"]
