"""Centralized enum definitions."""

from enum import Enum


class SessionStatus(str, Enum):
    """Lifecycle status of a translation session."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
