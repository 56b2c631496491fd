"""
Emoji definitions for system reporting.

Usage:
    >>> from messager.reporter import Emoji
    >>> print(f"{Emoji.NETWORK.CONNECTED} WebSocket connected")
    🔗 WebSocket connected
"""

from typing import Dict


class ComponentEmoji:
    """Base class for emoji categories (class-level constants only)."""

    @classmethod
    def get_all(cls) -> Dict[str, str]:
        """
        Get all emoji definitions from this category.

        Returns:
            Dictionary mapping emoji name to emoji character
        """
        return {
            name: value
            for name, value in vars(cls).items()
            if not name.startswith("_") and isinstance(value, str)
        }


class SystemEmoji(ComponentEmoji):
    """System lifecycle and configuration."""

    STARTUP = "🚀"
    SHUTDOWN = "🛑"
    READY = "✅"
    CONFIG_ERROR = "❌"
    HEARTBEAT = "❤️"
    CLEANUP = "🧹"


class NetworkEmoji(ComponentEmoji):
    """Connections and data flow."""

    CONNECTED = "🔗"
    DISCONNECT = "🔌"
    BROADCAST = "📡"
    TIMEOUT = "⏱️"


class MessageEmoji(ComponentEmoji):
    """Chat message lifecycle."""

    DELIVERED = "📬"
    QUEUED = "📭"
    REACTION = "😀"
    DELETED = "🗑️"
    TYPING = "⌨️"
    MAIL = "✉️"


class SecurityEmoji(ComponentEmoji):
    """Authentication and authorization."""

    KEY = "🔑"
    GRANTED = "🟢"
    DENIED = "⛔"
    EXPIRED = "⌛"
    REFRESH = "🔄"


class ErrorEmoji(ComponentEmoji):
    """Error levels."""

    ERROR = "❌"
    EXCEPTION = "💥"
    FORBIDDEN = "🚫"


class Emoji:
    """
    Central emoji registry with semantic categories.

    Categories are reached through the upper-case attributes
    (Emoji.NETWORK.CONNECTED).
    """

    SYSTEM = SystemEmoji
    NETWORK = NetworkEmoji
    MESSAGE = MessageEmoji
    SECURITY = SecurityEmoji
    ERROR = ErrorEmoji
