"""
Password hasher service interface.
"""

from abc import ABC, abstractmethod


class IPasswordHasher(ABC):
    """Hashes and verifies user passwords."""

    @abstractmethod
    async def hash(self, password: str) -> str:
        """Return an encoded hash of password."""

    @abstractmethod
    async def verify(self, password: str, password_hash: str) -> bool:
        """Return True if password matches password_hash."""
