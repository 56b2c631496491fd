"""
Use case for fetching the message history between two users.
"""

from typing import List, Optional

from messager.application.dto import message_status_event
from messager.domain.entities import Message
from messager.domain.exceptions import NotFoundError
from messager.domain.repositories import IMessageRepository, IUserRepository
from messager.domain.value_objects import MessageStatus
from messager.infrastructure.presence import PresenceRegistry
from messager.reporter import Emoji, SystemReporter


class GetConversationUseCase:
    """
    Returns a conversation in persistence order.

    Doubles as the lazy delivery path: messages addressed to the reader
    that are still SENT become DELIVERED and their sender is notified.
    """

    def __init__(
        self,
        message_repository: IMessageRepository,
        user_repository: IUserRepository,
        presence_registry: PresenceRegistry,
        reporter: Optional[SystemReporter] = None,
    ):
        self.message_repository = message_repository
        self.user_repository = user_repository
        self.presence_registry = presence_registry
        self.reporter = reporter

    async def execute(self, user_id: str, other_id: str) -> List[Message]:
        """
        Fetch history between user_id (the reader) and other_id.

        Raises:
            NotFoundError: other_id does not exist
        """
        if await self.user_repository.get_by_id(other_id) is None:
            raise NotFoundError("User", other_id)

        messages = await self.message_repository.list_conversation(user_id, other_id)

        newly_delivered = [
            m
            for m in messages
            if m.recipient_id == user_id and m.status == MessageStatus.SENT
        ]
        for message in newly_delivered:
            message.mark_delivered()
            try:
                await self.message_repository.update(message)
            except Exception as e:
                if self.reporter:
                    self.reporter.warning(
                        f"Could not store delivered status for {message.id}: {e}",
                        context="GetConversation",
                    )
                continue
            self.presence_registry.push_to_user(
                message.sender_id, message_status_event(message)
            )

        if newly_delivered and self.reporter:
            self.reporter.debug(
                f"{Emoji.MESSAGE.DELIVERED} {len(newly_delivered)} queued messages "
                f"delivered to {user_id} via history",
                context="GetConversation",
            )

        return messages
