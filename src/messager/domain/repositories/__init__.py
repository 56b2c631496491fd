"""
Repository interfaces (ports) for Messager.
"""

from messager.domain.repositories.i_message_repository import IMessageRepository
from messager.domain.repositories.i_user_repository import IUserRepository

__all__ = ["IMessageRepository", "IUserRepository"]
