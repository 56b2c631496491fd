"""
SQLAlchemy user repository.
"""

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from messager.domain.entities import User
from messager.domain.exceptions import DuplicateEmailError, NotFoundError
from messager.domain.repositories import IUserRepository
from messager.infrastructure.persistence.database import Database
from messager.infrastructure.persistence.models import UserModel


class SqlAlchemyUserRepository(IUserRepository):
    """
    User store backed by a SQL database.

    Email uniqueness is enforced by the unique index, so concurrent
    signups are serialized by the database rather than in process.
    """

    def __init__(self, database: Database):
        self.database = database

    async def create(self, user: User) -> User:
        try:
            async with self.database.session() as session:
                session.add(
                    UserModel(
                        id=user.id,
                        full_name=user.full_name,
                        email=user.email,
                        password_hash=user.password_hash,
                        profile_pic=user.profile_pic,
                        created_at=user.created_at,
                    )
                )
        except IntegrityError as e:
            raise DuplicateEmailError() from e
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        async with self.database.session() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.id == user_id)
            )
            model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        async with self.database.session() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.email == email.strip().lower())
            )
            model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_all(self, exclude_id: Optional[str] = None) -> List[User]:
        stmt = select(UserModel).order_by(UserModel.seq)
        if exclude_id is not None:
            stmt = stmt.where(UserModel.id != exclude_id)
        async with self.database.session() as session:
            models = (await session.execute(stmt)).scalars().all()
        return [self._to_entity(m) for m in models]

    async def get_many(self, user_ids: List[str]) -> List[User]:
        if not user_ids:
            return []
        async with self.database.session() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.id.in_(user_ids))
            )
            found = {m.id: self._to_entity(m) for m in result.scalars()}
        return [found[uid] for uid in user_ids if uid in found]

    async def update(self, user: User) -> User:
        async with self.database.session() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.id == user.id)
            )
            model = result.scalar_one_or_none()
            if model is None:
                raise NotFoundError("User", user.id)

            model.full_name = user.full_name
            model.profile_pic = user.profile_pic
            model.password_hash = user.password_hash
        return user

    async def delete(self, user_id: str) -> bool:
        async with self.database.session() as session:
            result = await session.execute(
                delete(UserModel).where(UserModel.id == user_id)
            )
        return result.rowcount > 0

    def _to_entity(self, model: UserModel) -> User:
        return User(
            full_name=model.full_name,
            email=model.email,
            password_hash=model.password_hash,
            profile_pic=model.profile_pic,
            user_id=model.id,
            created_at=model.created_at,
        )
