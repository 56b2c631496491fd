"""
Connection entity - one live real-time channel of an authenticated user.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4


class Connection(ABC):
    """
    A live bidirectional channel between one identity and the server.

    Subclasses implement push() as a non-blocking, FIFO enqueue so
    fan-out never waits on a slow socket.

    Attributes:
        id: Unique connection identifier
        user_id: Identity verified during the handshake
        connected_at: Connection timestamp
    """

    def __init__(
        self,
        user_id: str,
        connection_id: Optional[UUID] = None,
        connected_at: Optional[datetime] = None,
    ):
        self.id: UUID = connection_id or uuid4()
        self.user_id: str = user_id
        self.connected_at: datetime = connected_at or datetime.now(timezone.utc)

    @abstractmethod
    def push(self, event: Dict[str, Any]) -> bool:
        """
        Queue an event for delivery on this connection.

        Returns:
            False if the connection is closed and the event was dropped
        """

    def __eq__(self, other) -> bool:
        if not isinstance(other, Connection):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id}, user_id={self.user_id})"
