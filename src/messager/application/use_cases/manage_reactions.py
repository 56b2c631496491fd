"""
Use case for adding and removing emoji reactions.
"""

from typing import Optional

from messager.application.dto import message_reaction_event
from messager.application.use_cases._message_access import load_message, save_message
from messager.domain.entities import Message
from messager.domain.exceptions import ForbiddenError, ValidationError
from messager.domain.repositories import IMessageRepository
from messager.infrastructure.presence import PresenceRegistry
from messager.reporter import Emoji, SystemReporter

MAX_EMOJI_LENGTH = 32


class ManageReactionsUseCase:
    """
    Reaction add/remove, persisted then fanned out to both participants.

    Only the two participants may react; a user only ever removes their
    own reaction.
    """

    def __init__(
        self,
        message_repository: IMessageRepository,
        presence_registry: PresenceRegistry,
        reporter: Optional[SystemReporter] = None,
    ):
        self.message_repository = message_repository
        self.presence_registry = presence_registry
        self.reporter = reporter

    async def add(self, message_id: str, reactor_id: str, emoji: str) -> Message:
        """
        Add a reaction. Adding the same emoji twice is a no-op.

        Raises:
            ValidationError: Empty or oversized emoji code
            NotFoundError: Message does not exist
            ForbiddenError: Reactor is not a participant
        """
        emoji = self._validate_emoji(emoji)
        message = await self._load_for(message_id, reactor_id)

        if message.add_reaction(reactor_id, emoji):
            message = await save_message(self.message_repository, message)
            self._fan_out(message, f"added {emoji} by {reactor_id}")
        return message

    async def remove(self, message_id: str, reactor_id: str, emoji: str) -> Message:
        """
        Remove the reactor's own reaction. Missing reactions are a no-op.

        Raises:
            ValidationError: Empty or oversized emoji code
            NotFoundError: Message does not exist
            ForbiddenError: Reactor is not a participant
        """
        emoji = self._validate_emoji(emoji)
        message = await self._load_for(message_id, reactor_id)

        if message.remove_reaction(reactor_id, emoji):
            message = await save_message(self.message_repository, message)
            self._fan_out(message, f"removed {emoji} by {reactor_id}")
        return message

    @staticmethod
    def _validate_emoji(emoji: str) -> str:
        emoji = (emoji or "").strip()
        if not emoji:
            raise ValidationError("Emoji is required")
        if len(emoji) > MAX_EMOJI_LENGTH:
            raise ValidationError("Emoji code too long")
        return emoji

    async def _load_for(self, message_id: str, reactor_id: str) -> Message:
        message = await load_message(self.message_repository, message_id)
        if not message.is_participant(reactor_id):
            raise ForbiddenError(
                "Only conversation participants can react",
                user_id=reactor_id,
                resource=message_id,
            )
        return message

    def _fan_out(self, message: Message, action: str) -> None:
        event = message_reaction_event(message)
        self.presence_registry.push_to_user(message.sender_id, event)
        self.presence_registry.push_to_user(message.recipient_id, event)

        if self.reporter:
            self.reporter.debug(
                f"{Emoji.MESSAGE.REACTION} Reaction {action} on {message.id}",
                context="ManageReactions",
            )
