"""
Use case for listing contacts and active chats.
"""

from typing import List

from messager.domain.entities import User
from messager.domain.repositories import IMessageRepository, IUserRepository


class ListContactsUseCase:
    """Contact and chat-partner listings for the sidebar."""

    def __init__(
        self,
        user_repository: IUserRepository,
        message_repository: IMessageRepository,
    ):
        self.user_repository = user_repository
        self.message_repository = message_repository

    async def all_contacts(self, user_id: str) -> List[User]:
        """Every registered user except user_id."""
        return await self.user_repository.list_all(exclude_id=user_id)

    async def chat_partners(self, user_id: str) -> List[User]:
        """Users with at least one message exchanged, most recent first."""
        partner_ids = await self.message_repository.list_chat_partner_ids(user_id)
        return await self.user_repository.get_many(partner_ids)
