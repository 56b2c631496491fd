"""
Presence registry: authenticated identity -> live connections.

Source of truth for "who is online". All operations are synchronous,
so under the asyncio event loop each one runs atomically with respect
to concurrent connects and disconnects.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set
from uuid import UUID

from messager.domain.entities import Connection
from messager.domain.exceptions import UnauthenticatedError
from messager.reporter import Emoji, SystemReporter


@dataclass(frozen=True)
class PresenceEvent:
    """An online/offline transition of one identity."""

    user_id: str
    online: bool
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "presence-update", "userId": self.user_id, "online": self.online}


PresenceListener = Callable[[PresenceEvent], None]


class ConnectionLimitExceeded(Exception):
    """Raised when a user already holds the maximum number of connections."""

    def __init__(self, message: str, limit: int):
        super().__init__(message)
        self.limit = limit


class PresenceRegistry:
    """
    Tracks the set of live connections held by each identity.

    An identity is online while its set is non-empty. Listeners are
    called synchronously, in transition order, whenever an identity
    comes online or goes offline.
    """

    def __init__(
        self,
        max_connections_per_user: int = 0,
        reporter: Optional[SystemReporter] = None,
    ):
        self._by_user: Dict[str, Dict[UUID, Connection]] = {}
        self._by_id: Dict[UUID, Connection] = {}
        self._listeners: List[PresenceListener] = []
        self.max_connections_per_user = max_connections_per_user
        self.reporter = reporter

    # ============================================================
    # Listeners
    # ============================================================

    def add_listener(self, listener: PresenceListener) -> None:
        """Register a presence transition listener."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: PresenceListener) -> None:
        """Unregister a presence transition listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: PresenceEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                if self.reporter:
                    self.reporter.error(
                        f"{Emoji.ERROR.ERROR} Presence listener failed for "
                        f"user={event.user_id}: {e}",
                        context="PresenceRegistry",
                    )

    # ============================================================
    # Connect / disconnect
    # ============================================================

    def on_connect(self, user_id: str, connection: Connection) -> bool:
        """
        Admit an authenticated connection.

        Args:
            user_id: Identity verified during the handshake
            connection: Connection handle for that identity

        Returns:
            True if the identity just came online

        Raises:
            UnauthenticatedError: If no verified identity is given
            ConnectionLimitExceeded: If the per-user limit is reached
        """
        if not user_id or connection.user_id != user_id:
            raise UnauthenticatedError("Connection has no verified identity")

        if connection.id in self._by_id:
            return False

        connections = self._by_user.get(user_id)
        if (
            connections
            and self.max_connections_per_user > 0
            and len(connections) >= self.max_connections_per_user
        ):
            if self.reporter:
                self.reporter.warning(
                    f"{Emoji.ERROR.FORBIDDEN} Per-user connection limit exceeded "
                    f"(user={user_id}, limit={self.max_connections_per_user})",
                    context="PresenceRegistry",
                )
            raise ConnectionLimitExceeded(
                f"User connection limit reached: {self.max_connections_per_user}",
                limit=self.max_connections_per_user,
            )

        came_online = connections is None
        if came_online:
            connections = self._by_user[user_id] = {}
        connections[connection.id] = connection
        self._by_id[connection.id] = connection

        if self.reporter:
            self.reporter.info(
                f"{Emoji.NETWORK.CONNECTED} Connection added: user={user_id}, "
                f"connection={connection.id}, user_conns={len(connections)}, "
                f"total={self.get_total_connections()}",
                context="PresenceRegistry",
                verbose_level=2,
            )

        if came_online:
            self._emit(PresenceEvent(user_id=user_id, online=True))
        return came_online

    def on_disconnect(self, connection: Connection) -> Optional[str]:
        """
        Remove a connection handle.

        Args:
            connection: Handle to remove (unknown handles are ignored)

        Returns:
            The identity if it just went offline, None otherwise
        """
        known = self._by_id.pop(connection.id, None)
        if known is None:
            return None

        user_id = known.user_id
        connections = self._by_user.get(user_id, {})
        connections.pop(connection.id, None)

        went_offline = not connections
        if went_offline:
            self._by_user.pop(user_id, None)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.NETWORK.DISCONNECT} Connection removed: user={user_id}, "
                f"connection={connection.id}, user_conns={len(connections)}, "
                f"total={self.get_total_connections()}",
                context="PresenceRegistry",
                verbose_level=2,
            )

        if went_offline:
            self._emit(PresenceEvent(user_id=user_id, online=False))
            return user_id
        return None

    # ============================================================
    # Queries
    # ============================================================

    def is_online(self, user_id: str) -> bool:
        """True iff the identity holds at least one connection."""
        return bool(self._by_user.get(user_id))

    def broadcast_presence_snapshot(self) -> Set[str]:
        """Return the set of currently online identities."""
        return set(self._by_user)

    def get_connections(self, user_id: str) -> List[Connection]:
        """Snapshot of an identity's connections, in connect order."""
        return list(self._by_user.get(user_id, {}).values())

    def get_all_connections(self) -> List[Connection]:
        """Snapshot of every live connection."""
        return list(self._by_id.values())

    def get_total_connections(self) -> int:
        """Get total number of live connections."""
        return len(self._by_id)

    def get_user_connection_count(self, user_id: str) -> int:
        """Get connection count for a specific identity."""
        return len(self._by_user.get(user_id, {}))

    def get_stats(self) -> Dict[str, int]:
        """Registry counters for health reporting."""
        return {
            "connections": self.get_total_connections(),
            "online_users": len(self._by_user),
        }

    # ============================================================
    # Fan-out
    # ============================================================

    def push_to_user(self, user_id: str, event: Dict[str, Any]) -> int:
        """
        Push an event to every connection of an identity.

        Returns:
            Number of connections the event was queued on
        """
        return sum(1 for conn in self.get_connections(user_id) if conn.push(event))

    def push_to_all(
        self, event: Dict[str, Any], exclude_user: Optional[str] = None
    ) -> int:
        """
        Push an event to every live connection.

        Args:
            event: Event payload
            exclude_user: Optional identity whose connections are skipped

        Returns:
            Number of connections the event was queued on
        """
        return sum(
            1
            for conn in self.get_all_connections()
            if conn.user_id != exclude_user and conn.push(event)
        )
