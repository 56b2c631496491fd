"""
Client-side conversation state with optimistic sends.

Entries start as Optimistic (client correlation id only) and become
Confirmed (server id) once the server acknowledges them, either through
the send response or through the echoed new-message event, whichever
arrives first. Reconciliation is keyed on the correlation id; content
and timestamps are never compared.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

STATUS_RANK = {"sending": 0, "sent": 1, "delivered": 2, "seen": 3}


@dataclass(frozen=True)
class Optimistic:
    """Entry not yet acknowledged by the server."""

    local_id: str


@dataclass(frozen=True)
class Confirmed:
    """Entry persisted by the server."""

    server_id: str


EntryRef = Union[Optimistic, Confirmed]


@dataclass
class ConversationEntry:
    """One message as shown in a conversation view."""

    ref: EntryRef
    sender_id: str
    text: Optional[str] = None
    image: Optional[str] = None
    status: str = "sending"
    created_at: Optional[str] = None
    client_message_id: Optional[str] = None
    reactions: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_pending(self) -> bool:
        return isinstance(self.ref, Optimistic)

    @property
    def server_id(self) -> Optional[str]:
        return self.ref.server_id if isinstance(self.ref, Confirmed) else None

    def advance_status(self, status: str) -> None:
        """Move status forward; stale reports never downgrade it."""
        if STATUS_RANK.get(status, -1) > STATUS_RANK.get(self.status, -1):
            self.status = status


class Conversation:
    """
    Ordered message list between the local user and one peer.

    Args:
        owner_id: Local user id
        peer_id: Other participant id
    """

    def __init__(self, owner_id: str, peer_id: str):
        self.owner_id = owner_id
        self.peer_id = peer_id
        self._entries: List[ConversationEntry] = []

    @property
    def entries(self) -> List[ConversationEntry]:
        return list(self._entries)

    def add_optimistic(
        self, text: Optional[str] = None, image: Optional[str] = None
    ) -> str:
        """
        Append a pending entry for an outgoing message.

        Returns:
            Correlation id to send as clientMessageId
        """
        correlation_id = uuid.uuid4().hex
        self._entries.append(
            ConversationEntry(
                ref=Optimistic(correlation_id),
                sender_id=self.owner_id,
                text=text,
                image=image,
                client_message_id=correlation_id,
            )
        )
        return correlation_id

    def confirm(self, correlation_id: str, message: Dict[str, Any]) -> ConversationEntry:
        """
        Replace the pending entry with the server's message.

        If the echo already confirmed it, only the status is advanced.
        """
        existing = self._find_server(message["_id"])
        if existing is not None:
            existing.advance_status(message.get("status", "sent"))
            self._drop_pending(correlation_id)
            return existing

        pending = self._find_pending(correlation_id)
        if pending is None:
            entry = self._entry_from(message)
            self._entries.append(entry)
            return entry

        self._fill(pending, message)
        return pending

    def rollback(self, correlation_id: str) -> bool:
        """Remove a pending entry after a failed send."""
        return self._drop_pending(correlation_id)

    def apply_incoming(self, message: Dict[str, Any]) -> ConversationEntry:
        """
        Apply a new-message event (from the peer, or the echo of our own send).

        Deduplicates by server id, then by correlation id.
        """
        existing = self._find_server(message["_id"])
        if existing is not None:
            existing.advance_status(message.get("status", "sent"))
            existing.reactions = list(message.get("reactions", existing.reactions))
            return existing

        correlation_id = message.get("clientMessageId")
        if correlation_id:
            pending = self._find_pending(correlation_id)
            if pending is not None:
                self._fill(pending, message)
                return pending

        entry = self._entry_from(message)
        self._entries.append(entry)
        return entry

    def apply_status(
        self, message_id: str, status: str, correlation_id: Optional[str] = None
    ) -> bool:
        """Apply a message-status event. Returns False if the message is unknown."""
        entry = self._find_server(message_id)
        if entry is None and correlation_id:
            entry = self._find_pending(correlation_id)
            if entry is not None:
                entry.ref = Confirmed(message_id)
        if entry is None:
            return False
        entry.advance_status(status)
        return True

    def apply_reactions(self, message_id: str, reactions: List[Dict[str, Any]]) -> bool:
        entry = self._find_server(message_id)
        if entry is None:
            return False
        entry.reactions = list(reactions)
        return True

    def remove(self, message_id: str) -> bool:
        """Apply a message-deleted event."""
        for index, entry in enumerate(self._entries):
            if entry.server_id == message_id:
                del self._entries[index]
                return True
        return False

    # ============================================================
    # Lookups
    # ============================================================

    def _find_server(self, server_id: str) -> Optional[ConversationEntry]:
        for entry in self._entries:
            if entry.server_id == server_id:
                return entry
        return None

    def _find_pending(self, correlation_id: str) -> Optional[ConversationEntry]:
        for entry in self._entries:
            if isinstance(entry.ref, Optimistic) and entry.ref.local_id == correlation_id:
                return entry
        return None

    def _drop_pending(self, correlation_id: str) -> bool:
        pending = self._find_pending(correlation_id)
        if pending is None:
            return False
        self._entries.remove(pending)
        return True

    @staticmethod
    def _fill(entry: ConversationEntry, message: Dict[str, Any]) -> None:
        entry.ref = Confirmed(message["_id"])
        entry.text = message.get("text")
        entry.image = message.get("image")
        entry.created_at = message.get("createdAt")
        entry.reactions = list(message.get("reactions", []))
        entry.advance_status(message.get("status", "sent"))

    @staticmethod
    def _entry_from(message: Dict[str, Any]) -> ConversationEntry:
        entry = ConversationEntry(
            ref=Confirmed(message["_id"]),
            sender_id=message.get("senderId", ""),
            client_message_id=message.get("clientMessageId"),
        )
        Conversation._fill(entry, message)
        return entry
