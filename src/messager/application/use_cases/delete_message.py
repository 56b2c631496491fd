"""
Use case for deleting a message.
"""

from typing import Optional

from messager.application.dto import message_deleted_event
from messager.application.use_cases._message_access import load_message
from messager.domain.exceptions import ForbiddenError, NotFoundError, PersistenceError
from messager.domain.repositories import IMessageRepository
from messager.infrastructure.presence import PresenceRegistry
from messager.reporter import Emoji, SystemReporter


class DeleteMessageUseCase:
    """Deletes a message on behalf of its sender, then notifies both sides."""

    def __init__(
        self,
        message_repository: IMessageRepository,
        presence_registry: PresenceRegistry,
        reporter: Optional[SystemReporter] = None,
    ):
        self.message_repository = message_repository
        self.presence_registry = presence_registry
        self.reporter = reporter

    async def execute(self, message_id: str, requester_id: str) -> str:
        """
        Delete a message.

        Args:
            message_id: Message to delete
            requester_id: Authenticated identity asking for the delete

        Returns:
            ID of the deleted message

        Raises:
            NotFoundError: Message does not exist
            ForbiddenError: Requester is not the sender (message unchanged)
            PersistenceError: Store failed
        """
        message = await load_message(self.message_repository, message_id)

        if message.sender_id != requester_id:
            if self.reporter:
                self.reporter.warning(
                    f"{Emoji.ERROR.FORBIDDEN} Delete denied: message={message_id}, "
                    f"requester={requester_id}",
                    context="DeleteMessage",
                    verbose_level=2,
                )
            raise ForbiddenError(
                "Only the sender can delete this message",
                user_id=requester_id,
                resource=message_id,
            )

        try:
            deleted = await self.message_repository.delete(message_id)
        except Exception as e:
            raise PersistenceError("Failed to delete message") from e

        if not deleted:
            raise NotFoundError("Message", message_id)

        event = message_deleted_event(message_id)
        self.presence_registry.push_to_user(message.sender_id, event)
        self.presence_registry.push_to_user(message.recipient_id, event)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.MESSAGE.DELETED} Message deleted: {message_id}",
                context="DeleteMessage",
                verbose_level=2,
            )

        return message_id
