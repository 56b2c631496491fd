"""
Application DTOs.
"""

from messager.application.dto.auth_dto import AuthResult
from messager.application.dto.delivery_dto import (
    DeliveryReceipt,
    message_deleted_event,
    message_reaction_event,
    message_status_event,
    new_message_event,
)

__all__ = [
    "AuthResult",
    "DeliveryReceipt",
    "message_deleted_event",
    "message_reaction_event",
    "message_status_event",
    "new_message_event",
]
