"""
Domain entities for Messager.
"""

from messager.domain.entities.connection import Connection
from messager.domain.entities.message import Message, Reaction
from messager.domain.entities.user import User

__all__ = ["Connection", "Message", "Reaction", "User"]
