"""
DTOs for message delivery.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from messager.domain.entities import Message
from messager.domain.value_objects import DeliveryState, MessageStatus


@dataclass
class DeliveryReceipt:
    """
    Result of a send.

    Attributes:
        message: Persisted message
        status: SENT or DELIVERED
        state: Terminal delivery state (PUSHED_LIVE or QUEUED_OFFLINE)
        recipient_connections: Number of recipient connections reached
        trace: Every state the send passed through, PENDING first
    """

    message: Message
    status: MessageStatus
    state: DeliveryState
    recipient_connections: int = 0
    trace: Tuple[DeliveryState, ...] = ()

    @property
    def delivered(self) -> bool:
        return self.status == MessageStatus.DELIVERED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message.to_dict(),
            "status": self.status.value,
            "clientMessageId": self.message.client_message_id,
        }


def new_message_event(message: Message) -> Dict[str, Any]:
    """Build the new-message event pushed to live connections."""
    return {
        "type": "new-message",
        "message": message.to_dict(),
        "recipientId": message.recipient_id,
    }


def message_status_event(message: Message) -> Dict[str, Any]:
    """Build the message-status event reported to the sender."""
    return {
        "type": "message-status",
        "messageId": message.id,
        "clientMessageId": message.client_message_id,
        "status": message.status.value,
    }


def message_reaction_event(message: Message) -> Dict[str, Any]:
    return {
        "type": "message-reaction",
        "messageId": message.id,
        "reactions": [r.to_dict() for r in message.reactions],
    }


def message_deleted_event(message_id: str) -> Dict[str, Any]:
    return {"type": "message-deleted", "messageId": message_id}
