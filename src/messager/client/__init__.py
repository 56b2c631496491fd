"""
Python client for the Messager API.
"""

from messager.client.conversation import (
    Confirmed,
    Conversation,
    ConversationEntry,
    Optimistic,
)
from messager.client.session_client import (
    SendFailedError,
    SessionClient,
    SessionClientError,
    SessionExpiredError,
)

__all__ = [
    "Confirmed",
    "Conversation",
    "ConversationEntry",
    "Optimistic",
    "SendFailedError",
    "SessionClient",
    "SessionClientError",
    "SessionExpiredError",
]
