"""
SQLAlchemy message repository.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy import and_, delete, or_, select

from messager.domain.entities import Message, Reaction
from messager.domain.exceptions import NotFoundError
from messager.domain.repositories import IMessageRepository
from messager.domain.value_objects import MessageStatus
from messager.infrastructure.persistence.database import Database
from messager.infrastructure.persistence.models import MessageModel


class SqlAlchemyMessageRepository(IMessageRepository):
    """
    Message store backed by a SQL database.

    Ordering follows the autoincrement seq column, i.e. the order in
    which create() committed.
    """

    def __init__(
        self,
        database: Database,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.database = database
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def create(self, message: Message) -> Message:
        message.created_at = self._clock()
        async with self.database.session() as session:
            session.add(
                MessageModel(
                    id=message.id,
                    sender_id=message.sender_id,
                    recipient_id=message.recipient_id,
                    text=message.text,
                    image=message.image,
                    client_message_id=message.client_message_id,
                    status=message.status.value,
                    reactions=[r.to_dict() for r in message.reactions],
                    created_at=message.created_at,
                )
            )
        return message

    async def get_by_id(self, message_id: str) -> Optional[Message]:
        async with self.database.session() as session:
            result = await session.execute(
                select(MessageModel).where(MessageModel.id == message_id)
            )
            model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def update(self, message: Message) -> Message:
        async with self.database.session() as session:
            result = await session.execute(
                select(MessageModel).where(MessageModel.id == message.id)
            )
            model = result.scalar_one_or_none()
            if model is None:
                raise NotFoundError("Message", message.id)

            model.text = message.text
            model.image = message.image
            model.status = message.status.value
            model.reactions = [r.to_dict() for r in message.reactions]
        return message

    async def delete(self, message_id: str) -> bool:
        async with self.database.session() as session:
            result = await session.execute(
                delete(MessageModel).where(MessageModel.id == message_id)
            )
        return result.rowcount > 0

    async def list_conversation(self, user_a: str, user_b: str) -> List[Message]:
        stmt = (
            select(MessageModel)
            .where(
                or_(
                    and_(
                        MessageModel.sender_id == user_a,
                        MessageModel.recipient_id == user_b,
                    ),
                    and_(
                        MessageModel.sender_id == user_b,
                        MessageModel.recipient_id == user_a,
                    ),
                )
            )
            .order_by(MessageModel.seq)
        )
        async with self.database.session() as session:
            models = (await session.execute(stmt)).scalars().all()
        return [self._to_entity(m) for m in models]

    async def list_chat_partner_ids(self, user_id: str) -> List[str]:
        stmt = (
            select(MessageModel.sender_id, MessageModel.recipient_id)
            .where(
                or_(
                    MessageModel.sender_id == user_id,
                    MessageModel.recipient_id == user_id,
                )
            )
            .order_by(MessageModel.seq.desc())
        )
        async with self.database.session() as session:
            rows = (await session.execute(stmt)).all()

        partners: List[str] = []
        for sender_id, recipient_id in rows:
            peer = recipient_id if sender_id == user_id else sender_id
            if peer not in partners:
                partners.append(peer)
        return partners

    def _to_entity(self, model: MessageModel) -> Message:
        return Message(
            sender_id=model.sender_id,
            recipient_id=model.recipient_id,
            text=model.text,
            image=model.image,
            client_message_id=model.client_message_id,
            message_id=model.id,
            created_at=model.created_at,
            reactions=[
                Reaction(user_id=r["userId"], emoji=r["emoji"])
                for r in model.reactions
            ],
            status=MessageStatus(model.status),
        )
