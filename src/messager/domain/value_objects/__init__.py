"""
Domain value objects for Messager.
"""

from messager.domain.value_objects.email_address import EmailAddress
from messager.domain.value_objects.message_payload import MessagePayload
from messager.domain.value_objects.message_status import DeliveryState, MessageStatus
from messager.domain.value_objects.token_kind import TokenKind

__all__ = [
    "DeliveryState",
    "EmailAddress",
    "MessagePayload",
    "MessageStatus",
    "TokenKind",
]
