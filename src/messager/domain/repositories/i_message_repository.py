"""
Message repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from messager.domain.entities import Message


class IMessageRepository(ABC):
    """
    Interface for message persistence operations.

    Implementations serialize writes per message; callers add no
    locking over the store.
    """

    @abstractmethod
    async def create(self, message: Message) -> Message:
        """
        Persist a new message.

        Args:
            message: Message entity to store

        Returns:
            Stored message with its durable ID and timestamp
        """

    @abstractmethod
    async def get_by_id(self, message_id: str) -> Optional[Message]:
        """Get message by ID, or None if it does not exist."""

    @abstractmethod
    async def update(self, message: Message) -> Message:
        """
        Store the mutable fields (reactions, status) of a message.

        Raises:
            NotFoundError: If the message no longer exists
        """

    @abstractmethod
    async def delete(self, message_id: str) -> bool:
        """
        Delete message by ID.

        Returns:
            True if deleted, False if not found
        """

    @abstractmethod
    async def list_conversation(self, user_a: str, user_b: str) -> List[Message]:
        """
        List messages exchanged between two users in persistence order.
        """

    @abstractmethod
    async def list_chat_partner_ids(self, user_id: str) -> List[str]:
        """
        List IDs of users sharing a message with user_id.

        Most recent conversation first.
        """
