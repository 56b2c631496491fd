"""
Unit tests for message actions.

Tests reactions, deletion ownership, conversation history and contact
listings.
"""

from unittest.mock import AsyncMock

import pytest
from conftest import FakeClock, FakeConnection, make_user

from messager.application.use_cases import (
    DeleteMessageUseCase,
    GetConversationUseCase,
    ListContactsUseCase,
    ManageReactionsUseCase,
    SendMessageUseCase,
)
from messager.domain.exceptions import (
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from messager.infrastructure.persistence import (
    InMemoryMessageRepository,
    InMemoryUserRepository,
)
from messager.infrastructure.presence import PresenceRegistry


@pytest.fixture
async def users() -> InMemoryUserRepository:
    repo = InMemoryUserRepository()
    for user_id in ("alice", "bob", "carol"):
        await repo.create(make_user(user_id))
    return repo


@pytest.fixture
def messages() -> InMemoryMessageRepository:
    return InMemoryMessageRepository(clock=FakeClock())


@pytest.fixture
def registry() -> PresenceRegistry:
    return PresenceRegistry()


@pytest.fixture
def send(messages, users, registry) -> SendMessageUseCase:
    return SendMessageUseCase(messages, users, registry)


@pytest.fixture
async def message(send):
    receipt = await send.execute("alice", "bob", text="hello bob")
    return receipt.message


class TestManageReactions:
    """Unit tests for ManageReactionsUseCase."""

    @pytest.fixture
    def reactions(self, messages, registry) -> ManageReactionsUseCase:
        return ManageReactionsUseCase(messages, registry)

    async def test_add_reaction_fans_out_to_both(self, reactions, registry, message):
        """Test a reaction is stored and pushed to sender and recipient."""
        alice, bob = FakeConnection("alice"), FakeConnection("bob")
        registry.on_connect("alice", alice)
        registry.on_connect("bob", bob)

        updated = await reactions.add(message.id, "bob", "👍")

        assert [r.to_dict() for r in updated.reactions] == [
            {"userId": "bob", "emoji": "👍"}
        ]
        expected = {
            "type": "message-reaction",
            "messageId": message.id,
            "reactions": [{"userId": "bob", "emoji": "👍"}],
        }
        assert alice.events == [expected]
        assert bob.events == [expected]

    async def test_duplicate_reaction_is_noop(self, reactions, registry, message):
        """Test reacting twice with the same emoji pushes once."""
        bob = FakeConnection("bob")
        registry.on_connect("bob", bob)

        await reactions.add(message.id, "bob", "👍")
        updated = await reactions.add(message.id, "bob", "👍")

        assert len(updated.reactions) == 1
        assert len(bob.events) == 1

    async def test_remove_own_reaction(self, reactions, message):
        """Test removing only affects the caller's reaction."""
        await reactions.add(message.id, "bob", "🔥")
        await reactions.add(message.id, "alice", "🔥")

        updated = await reactions.remove(message.id, "bob", "🔥")

        assert [r.user_id for r in updated.reactions] == ["alice"]

    async def test_non_participant_forbidden(self, reactions, message):
        """Test a third user cannot react."""
        with pytest.raises(ForbiddenError):
            await reactions.add(message.id, "carol", "👍")

    @pytest.mark.parametrize("emoji", ["", "   ", "x" * 33])
    async def test_invalid_emoji(self, reactions, message, emoji):
        """Test empty or oversized emoji is rejected."""
        with pytest.raises(ValidationError):
            await reactions.add(message.id, "bob", emoji)

    async def test_unknown_message(self, reactions):
        """Test reacting to a missing message raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await reactions.add("missing", "bob", "👍")


class TestDeleteMessage:
    """Unit tests for DeleteMessageUseCase."""

    @pytest.fixture
    def delete(self, messages, registry) -> DeleteMessageUseCase:
        return DeleteMessageUseCase(messages, registry)

    async def test_sender_deletes(self, delete, messages, registry, message):
        """Test sender can delete and both parties are notified."""
        alice, bob = FakeConnection("alice"), FakeConnection("bob")
        registry.on_connect("alice", alice)
        registry.on_connect("bob", bob)

        assert await delete.execute(message.id, "alice") == message.id

        assert await messages.get_by_id(message.id) is None
        event = {"type": "message-deleted", "messageId": message.id}
        assert alice.events == [event]
        assert bob.events == [event]

    async def test_recipient_cannot_delete(self, delete, messages, message):
        """Test recipient delete is forbidden and the message is unchanged."""
        with pytest.raises(ForbiddenError):
            await delete.execute(message.id, "bob")

        stored = await messages.get_by_id(message.id)
        assert stored is not None
        assert stored.text == "hello bob"

    async def test_stranger_cannot_delete(self, delete, message):
        """Test non-participant delete is forbidden."""
        with pytest.raises(ForbiddenError):
            await delete.execute(message.id, "carol")

    async def test_delete_twice(self, delete, message):
        """Test deleting an already deleted message raises NotFoundError."""
        await delete.execute(message.id, "alice")

        with pytest.raises(NotFoundError):
            await delete.execute(message.id, "alice")

    async def test_store_failure(self, registry, message, messages):
        """Test store errors become PersistenceError."""
        messages.delete = AsyncMock(side_effect=ConnectionError("db down"))

        with pytest.raises(PersistenceError):
            await DeleteMessageUseCase(messages, registry).execute(message.id, "alice")


class TestConversationAndContacts:
    """Unit tests for GetConversationUseCase and ListContactsUseCase."""

    async def test_history_in_order(self, send, messages, users, registry):
        """Test history returns both directions in persistence order."""
        await send.execute("alice", "bob", text="1")
        await send.execute("bob", "alice", text="2")
        await send.execute("alice", "carol", text="other chat")
        await send.execute("alice", "bob", text="3")

        history = await GetConversationUseCase(messages, users, registry).execute(
            "alice", "bob"
        )

        assert [m.text for m in history] == ["1", "2", "3"]

    async def test_history_unknown_user(self, messages, users, registry):
        """Test history with an unknown user raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await GetConversationUseCase(messages, users, registry).execute(
                "alice", "ghost"
            )

    async def test_reader_own_messages_not_marked(self, send, messages, users, registry):
        """Test fetching history does not mark the reader's own sends delivered."""
        await send.execute("alice", "bob", text="x")

        history = await GetConversationUseCase(messages, users, registry).execute(
            "alice", "bob"
        )

        assert history[0].status.value == "sent"

    async def test_contacts_exclude_self(self, messages, users):
        """Test all_contacts lists everyone but the caller."""
        contacts = await ListContactsUseCase(users, messages).all_contacts("alice")

        assert sorted(u.id for u in contacts) == ["bob", "carol"]

    async def test_chat_partners_most_recent_first(self, send, messages, users):
        """Test chat partners are ordered by last message."""
        await send.execute("alice", "bob", text="hi bob")
        await send.execute("carol", "alice", text="hi alice")

        partners = await ListContactsUseCase(users, messages).chat_partners("alice")

        assert [u.id for u in partners] == ["carol", "bob"]
