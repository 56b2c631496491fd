"""
In-memory message repository.
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from messager.domain.entities import Message
from messager.domain.exceptions import NotFoundError
from messager.domain.repositories import IMessageRepository


class InMemoryMessageRepository(IMessageRepository):
    """
    Process-local message store.

    Messages keep insertion order, which is also persistence order.
    create() assigns the timestamp from the clock so stored order and
    created_at agree.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._messages: Dict[str, Message] = {}
        self._lock = asyncio.Lock()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def create(self, message: Message) -> Message:
        async with self._lock:
            message.created_at = self._clock()
            self._messages[message.id] = message
        return message

    async def get_by_id(self, message_id: str) -> Optional[Message]:
        return self._messages.get(message_id)

    async def update(self, message: Message) -> Message:
        async with self._lock:
            if message.id not in self._messages:
                raise NotFoundError("Message", message.id)
            self._messages[message.id] = message
        return message

    async def delete(self, message_id: str) -> bool:
        async with self._lock:
            return self._messages.pop(message_id, None) is not None

    async def list_conversation(self, user_a: str, user_b: str) -> List[Message]:
        pair = {user_a, user_b}
        return [
            m
            for m in self._messages.values()
            if {m.sender_id, m.recipient_id} == pair
        ]

    async def list_chat_partner_ids(self, user_id: str) -> List[str]:
        partners: List[str] = []
        for message in reversed(list(self._messages.values())):
            if not message.is_participant(user_id):
                continue
            peer = message.peer_of(user_id)
            if peer not in partners:
                partners.append(peer)
        return partners
