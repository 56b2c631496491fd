"""
Message entity - a one-to-one chat message with reactions.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from messager.domain.value_objects import MessageStatus


@dataclass(frozen=True)
class Reaction:
    """A single emoji reaction by one user."""

    user_id: str
    emoji: str

    def to_dict(self) -> Dict[str, str]:
        return {"userId": self.user_id, "emoji": self.emoji}


class Message:
    """
    Message entity.

    Mutable only through reactions, the sent -> delivered status
    transition and deletion by its sender.

    Attributes:
        id: Server-assigned identifier
        sender_id: Sending identity
        recipient_id: Receiving identity
        text: Optional text body
        image: Optional image reference
        created_at: Persistence timestamp
        reactions: Reactions in the order they were added
        status: SENT until a live recipient connection received it
        client_message_id: Correlation id supplied by the sending client
    """

    def __init__(
        self,
        sender_id: str,
        recipient_id: str,
        text: Optional[str] = None,
        image: Optional[str] = None,
        client_message_id: Optional[str] = None,
        message_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        reactions: Optional[List[Reaction]] = None,
        status: MessageStatus = MessageStatus.SENT,
    ):
        self.id: str = message_id or uuid4().hex
        self.sender_id = sender_id
        self.recipient_id = recipient_id
        self.text = text
        self.image = image
        self.client_message_id = client_message_id
        self.created_at: datetime = created_at or datetime.now(timezone.utc)
        self.reactions: List[Reaction] = list(reactions or [])
        self.status = status

    def is_participant(self, user_id: str) -> bool:
        """Check whether user is the sender or the recipient."""
        return user_id in (self.sender_id, self.recipient_id)

    def peer_of(self, user_id: str) -> str:
        """Return the other participant."""
        return self.recipient_id if user_id == self.sender_id else self.sender_id

    def add_reaction(self, user_id: str, emoji: str) -> bool:
        """
        Add a reaction.

        Returns:
            False if this user already reacted with this emoji
        """
        reaction = Reaction(user_id=user_id, emoji=emoji)
        if reaction in self.reactions:
            return False
        self.reactions.append(reaction)
        return True

    def remove_reaction(self, user_id: str, emoji: str) -> bool:
        """
        Remove a user's own reaction.

        Returns:
            False if no such reaction existed
        """
        reaction = Reaction(user_id=user_id, emoji=emoji)
        if reaction not in self.reactions:
            return False
        self.reactions.remove(reaction)
        return True

    def mark_delivered(self) -> bool:
        """Advance SENT to DELIVERED. Returns False if already past SENT."""
        if self.status != MessageStatus.SENT:
            return False
        self.status = MessageStatus.DELIVERED
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire format."""
        return {
            "_id": self.id,
            "senderId": self.sender_id,
            "receiverId": self.recipient_id,
            "text": self.text,
            "image": self.image,
            "createdAt": self.created_at.isoformat(),
            "reactions": [r.to_dict() for r in self.reactions],
            "status": self.status.value,
            "clientMessageId": self.client_message_id,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Message):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (
            f"Message(id={self.id}, {self.sender_id}->{self.recipient_id}, "
            f"status={self.status.value})"
        )
