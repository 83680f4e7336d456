"""Unit tests for conversation stores and the chat workspace."""
import asyncio

import pytest
from conftest import Delayed, FakeEndpoint, completion_body

from reasonchat.config import ChatSettings
from reasonchat.conversation import (
    ChatWorkspace,
    InMemoryConversationStore,
    Message,
    Role,
    create_conversation_store,
)


class TestInMemoryStore:
    """Tests for InMemoryConversationStore."""

    @pytest.mark.asyncio
    async def test_create_and_get(self):
        store = InMemoryConversationStore()

        conversation = await store.create()

        assert conversation.title == "New Conversation"
        assert await store.get(conversation.id) is conversation
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_create_with_title(self):
        store = InMemoryConversationStore()

        conversation = await store.create("Trip planning")

        assert conversation.title == "Trip planning"

    @pytest.mark.asyncio
    async def test_list_most_recent_first(self):
        store = InMemoryConversationStore()
        older = await store.create()
        newer = await store.create()
        older.append(Message(role=Role.USER, content="bump"))
        await store.save(older)

        listed = await store.list_conversations()

        assert [c.id for c in listed] == [older.id, newer.id]

    @pytest.mark.asyncio
    async def test_delete(self):
        store = InMemoryConversationStore()
        conversation = await store.create()

        assert await store.delete(conversation.id) is True
        assert await store.delete(conversation.id) is False
        assert await store.list_conversations() == []

    def test_backend_type(self):
        assert InMemoryConversationStore().backend_type == "memory"


class TestStoreFactory:
    """Tests for create_conversation_store."""

    def test_memory_backend(self):
        store = create_conversation_store("memory")

        assert isinstance(store, InMemoryConversationStore)

    def test_unsupported_backend(self):
        with pytest.raises(ValueError, match="Unsupported conversation store"):
            create_conversation_store("postgres")


@pytest.fixture
def workspace(registry):
    endpoint = FakeEndpoint(completion_body("Hi"))
    settings = ChatSettings(system_prompt="Be brief.")
    return endpoint, ChatWorkspace(InMemoryConversationStore(), registry, endpoint.client, settings)


class TestChatWorkspace:
    """Tests for opening, closing and deleting conversations."""

    @pytest.mark.asyncio
    async def test_new_conversation(self, workspace):
        endpoint, ws = workspace

        manager = await ws.new_conversation(model_id="gemma2-9b-it")
        await manager.send_user_message("Hello")
        await ws.aclose()

        assert manager.model.id == "gemma2-9b-it"
        assert endpoint.requests[0]["messages"][0] == {"role": "system", "content": "Be brief."}
        assert [c.id for c in await ws.list_conversations()] == [manager.conversation.id]

    @pytest.mark.asyncio
    async def test_open_returns_live_manager(self, workspace):
        _, ws = workspace
        manager = await ws.new_conversation()

        again = await ws.open(manager.conversation.id)
        await ws.aclose()

        assert again is manager

    @pytest.mark.asyncio
    async def test_open_unknown(self, workspace):
        _, ws = workspace

        with pytest.raises(KeyError):
            await ws.open("missing")

    @pytest.mark.asyncio
    async def test_conversations_are_independent(self, workspace):
        _, ws = workspace
        first = await ws.new_conversation()
        second = await ws.new_conversation()

        await first.send_user_message("Hello")
        await ws.aclose()

        assert len(first.conversation.messages) == 2
        assert second.conversation.messages == []

    @pytest.mark.asyncio
    async def test_close_keeps_transcript(self, workspace):
        _, ws = workspace
        manager = await ws.new_conversation()
        await manager.send_user_message("Hello")
        conversation_id = manager.conversation.id

        await ws.close(conversation_id)
        reopened = await ws.open(conversation_id)
        await ws.aclose()

        assert reopened is not manager
        assert [m.content for m in reopened.conversation.messages] == ["Hello", "Hi"]
        assert reopened.state.error is None
        assert not reopened.state.is_loading

    @pytest.mark.asyncio
    async def test_close_cancels_outstanding_send(self, registry):
        endpoint = FakeEndpoint(Delayed(5.0, completion_body()))
        ws = ChatWorkspace(InMemoryConversationStore(), registry, endpoint.client)
        manager = await ws.new_conversation()
        send = asyncio.create_task(manager.send_user_message("Hello"))
        await endpoint.received.wait()

        await ws.close(manager.conversation.id)

        assert await send is None
        assert [m.role for m in manager.conversation.messages] == [Role.USER]

    @pytest.mark.asyncio
    async def test_delete(self, workspace):
        _, ws = workspace
        manager = await ws.new_conversation()

        assert await ws.delete(manager.conversation.id) is True
        assert await ws.list_conversations() == []
        with pytest.raises(KeyError):
            await ws.open(manager.conversation.id)
