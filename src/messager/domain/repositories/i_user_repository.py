"""
User repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from messager.domain.entities import User


class IUserRepository(ABC):
    """Interface for user persistence operations."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Create new user.

        Args:
            user: User entity to create

        Returns:
            Created user entity

        Raises:
            DuplicateEmailError: If the email is already registered
        """

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User identity

        Returns:
            User entity if found, None otherwise
        """

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by normalized email.

        Args:
            email: Lowercase email address

        Returns:
            User entity if found, None otherwise
        """

    @abstractmethod
    async def list_all(self, exclude_id: Optional[str] = None) -> List[User]:
        """
        List users ordered by registration.

        Args:
            exclude_id: Optional user ID to leave out

        Returns:
            List of user entities
        """

    @abstractmethod
    async def get_many(self, user_ids: List[str]) -> List[User]:
        """
        Get several users, preserving the order of user_ids.

        Unknown IDs are skipped.
        """

    @abstractmethod
    async def update(self, user: User) -> User:
        """
        Store changed profile fields of an existing user.

        Raises:
            NotFoundError: If the user does not exist
        """

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """
        Remove a user.

        Returns:
            True if a user was removed
        """
