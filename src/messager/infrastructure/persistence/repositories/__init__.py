"""
Repository implementations.
"""

from messager.infrastructure.persistence.repositories.in_memory_message_repository import (
    InMemoryMessageRepository,
)
from messager.infrastructure.persistence.repositories.in_memory_user_repository import (
    InMemoryUserRepository,
)
from messager.infrastructure.persistence.repositories.sqlalchemy_message_repository import (
    SqlAlchemyMessageRepository,
)
from messager.infrastructure.persistence.repositories.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)

__all__ = [
    "InMemoryMessageRepository",
    "InMemoryUserRepository",
    "SqlAlchemyMessageRepository",
    "SqlAlchemyUserRepository",
]
