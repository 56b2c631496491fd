"""
Unit tests for client-side Conversation reconciliation.
"""

from messager.client import Confirmed, Conversation, Optimistic


def server_message(message_id, correlation_id=None, sender="alice", status="sent"):
    return {
        "_id": message_id,
        "senderId": sender,
        "receiverId": "bob" if sender == "alice" else "alice",
        "text": "hi",
        "image": None,
        "createdAt": "2024-01-01T12:00:00+00:00",
        "reactions": [],
        "status": status,
        "clientMessageId": correlation_id,
    }


class TestConversation:
    """Unit tests for Conversation."""

    def test_add_optimistic(self):
        """Test optimistic entries are pending with status sending."""
        conversation = Conversation("alice", "bob")

        correlation_id = conversation.add_optimistic(text="hi")

        [entry] = conversation.entries
        assert entry.ref == Optimistic(correlation_id)
        assert entry.is_pending
        assert entry.status == "sending"
        assert entry.sender_id == "alice"

    def test_confirm(self):
        """Test confirm swaps the ref to the server id."""
        conversation = Conversation("alice", "bob")
        correlation_id = conversation.add_optimistic(text="hi")

        entry = conversation.confirm(correlation_id, server_message("m1", correlation_id))

        assert entry.ref == Confirmed("m1")
        assert entry.status == "sent"
        assert len(conversation.entries) == 1

    def test_echo_before_response(self):
        """Test the echoed event and the send response yield one entry."""
        conversation = Conversation("alice", "bob")
        correlation_id = conversation.add_optimistic(text="hi")

        conversation.apply_incoming(
            server_message("m1", correlation_id, status="delivered")
        )
        conversation.confirm(correlation_id, server_message("m1", correlation_id))

        [entry] = conversation.entries
        assert entry.server_id == "m1"
        assert entry.status == "delivered"

    def test_response_before_echo(self):
        """Test the echo after the response does not duplicate."""
        conversation = Conversation("alice", "bob")
        correlation_id = conversation.add_optimistic(text="hi")

        conversation.confirm(correlation_id, server_message("m1", correlation_id))
        conversation.apply_incoming(server_message("m1", correlation_id))

        assert len(conversation.entries) == 1

    def test_identical_texts_reconcile_by_correlation_id(self):
        """Test two optimistic entries with the same text confirm separately."""
        conversation = Conversation("alice", "bob")
        first = conversation.add_optimistic(text="hi")
        second = conversation.add_optimistic(text="hi")

        conversation.confirm(second, server_message("m2", second))

        entries = conversation.entries
        assert entries[0].ref == Optimistic(first)
        assert entries[1].ref == Confirmed("m2")

    def test_rollback(self):
        """Test rollback removes only the pending entry."""
        conversation = Conversation("alice", "bob")
        conversation.apply_incoming(server_message("m0", sender="bob"))
        correlation_id = conversation.add_optimistic(text="hi")

        assert conversation.rollback(correlation_id) is True
        assert conversation.rollback(correlation_id) is False
        assert [e.server_id for e in conversation.entries] == ["m0"]

    def test_incoming_from_peer_appends(self):
        """Test peer messages are appended once."""
        conversation = Conversation("alice", "bob")

        conversation.apply_incoming(server_message("m1", sender="bob"))
        conversation.apply_incoming(server_message("m1", sender="bob"))

        assert [e.sender_id for e in conversation.entries] == ["bob"]

    def test_status_never_downgrades(self):
        """Test a late sent report does not undo delivered."""
        conversation = Conversation("alice", "bob")
        conversation.apply_incoming(server_message("m1"))

        assert conversation.apply_status("m1", "delivered") is True
        conversation.apply_status("m1", "sent")

        assert conversation.entries[0].status == "delivered"
        assert conversation.apply_status("unknown", "delivered") is False

    def test_status_confirms_pending_entry(self):
        """Test a status event can confirm a pending entry by correlation id."""
        conversation = Conversation("alice", "bob")
        correlation_id = conversation.add_optimistic(text="hi")

        conversation.apply_status("m1", "sent", correlation_id=correlation_id)

        assert conversation.entries[0].ref == Confirmed("m1")

    def test_reactions_and_remove(self):
        """Test reaction updates and deletions by server id."""
        conversation = Conversation("alice", "bob")
        conversation.apply_incoming(server_message("m1"))

        reactions = [{"userId": "bob", "emoji": "👍"}]
        assert conversation.apply_reactions("m1", reactions) is True
        assert conversation.entries[0].reactions == reactions

        assert conversation.remove("m1") is True
        assert conversation.remove("m1") is False
        assert conversation.entries == []
