"""
Argon2 password hasher.
"""

import asyncio
from typing import Any

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from messager.domain.services import IPasswordHasher


class Argon2PasswordHasher(IPasswordHasher):
    """
    Async-friendly wrapper over argon2-cffi.

    Hashing is CPU bound, so it runs in the default executor to keep
    the event loop responsive.
    """

    def __init__(self, **params: Any) -> None:
        """
        Args:
            **params: Passed to argon2.PasswordHasher (time_cost, memory_cost...)
        """
        self._hasher = PasswordHasher(**params)

    async def hash(self, password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._hasher.hash, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                None, self._hasher.verify, password_hash, password
            )
        except (VerificationError, InvalidHashError):
            return False
