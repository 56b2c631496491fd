"""
Presence tracking for Messager.
"""

from messager.infrastructure.presence.presence_registry import (
    ConnectionLimitExceeded,
    PresenceEvent,
    PresenceListener,
    PresenceRegistry,
)

__all__ = [
    "ConnectionLimitExceeded",
    "PresenceEvent",
    "PresenceListener",
    "PresenceRegistry",
]
