"""
Persistence adapters for Messager.
"""

from messager.infrastructure.persistence.database import Database
from messager.infrastructure.persistence.repositories import (
    InMemoryMessageRepository,
    InMemoryUserRepository,
    SqlAlchemyMessageRepository,
    SqlAlchemyUserRepository,
)

__all__ = [
    "Database",
    "InMemoryMessageRepository",
    "InMemoryUserRepository",
    "SqlAlchemyMessageRepository",
    "SqlAlchemyUserRepository",
]
