"""Application editor – EditorState."""
from __future__ import annotations

from enum import Enum


class EditorState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"
    ERROR = "error"


__all__ = ["EditorState"]
