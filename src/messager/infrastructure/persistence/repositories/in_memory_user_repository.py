"""
In-memory user repository.
"""

import asyncio
from typing import Dict, List, Optional

from messager.domain.entities import User
from messager.domain.exceptions import DuplicateEmailError, NotFoundError
from messager.domain.repositories import IUserRepository


class InMemoryUserRepository(IUserRepository):
    """
    Process-local user store.

    Emails are unique; the lock serializes create() so two concurrent
    signups with the same email cannot both succeed.
    """

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._by_email: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def create(self, user: User) -> User:
        async with self._lock:
            if user.email in self._by_email:
                raise DuplicateEmailError()
            self._users[user.id] = user
            self._by_email[user.email] = user.id
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        user_id = self._by_email.get(email.strip().lower())
        return self._users.get(user_id) if user_id else None

    async def list_all(self, exclude_id: Optional[str] = None) -> List[User]:
        return [u for u in self._users.values() if u.id != exclude_id]

    async def get_many(self, user_ids: List[str]) -> List[User]:
        return [self._users[uid] for uid in user_ids if uid in self._users]

    async def update(self, user: User) -> User:
        async with self._lock:
            if user.id not in self._users:
                raise NotFoundError("User", user.id)
            self._users[user.id] = user
        return user

    async def delete(self, user_id: str) -> bool:
        async with self._lock:
            user = self._users.pop(user_id, None)
            if user is None:
                return False
            self._by_email.pop(user.email, None)
            return True
