from collections.abc import Callable

from ..config import ChatSettings
from ..llm import CompletionClient
from ..logging import get_logger
from ..registry import ModelRegistry
from .base import ConversationStore
from .manager import ConversationManager
from .models import Conversation

logger = get_logger(__name__)

ClientFactory = Callable[[], CompletionClient]


class ChatWorkspace:
    """Set of conversations with at most one live manager each.

    Opening a conversation creates its ChatState (through a
    ConversationManager with its own completion client); closing it
    cancels any outstanding send and discards that state. The registry
    is shared by every manager.
    """

    def __init__(
        self,
        store: ConversationStore,
        registry: ModelRegistry,
        client_factory: ClientFactory,
        settings: ChatSettings | None = None,
    ):
        self._store = store
        self._registry = registry
        self._client_factory = client_factory
        self._settings = settings or ChatSettings()
        self._managers: dict[str, ConversationManager] = {}
        self._clients: dict[str, CompletionClient] = {}

    @property
    def registry(self) -> ModelRegistry:
        return self._registry

    @property
    def store(self) -> ConversationStore:
        return self._store

    async def new_conversation(self, model_id: str | None = None) -> ConversationManager:
        """Create a conversation and open it."""
        conversation = await self._store.create()
        return await self.open(conversation.id, model_id=model_id)

    async def open(self, conversation_id: str, model_id: str | None = None) -> ConversationManager:
        """Return the live manager for a stored conversation.

        Raises:
            KeyError: If the conversation does not exist
        """
        manager = self._managers.get(conversation_id)
        if manager is not None:
            if model_id is not None:
                manager.model_id = model_id
            return manager

        conversation = await self._store.get(conversation_id)
        if conversation is None:
            raise KeyError(f"Unknown conversation: {conversation_id}")

        client = self._client_factory()
        manager = ConversationManager(
            client,
            self._registry,
            conversation,
            model_id=model_id,
            reasoning_format=self._settings.reasoning_format,
            system_prompt=self._settings.system_prompt,
        )
        self._managers[conversation_id] = manager
        self._clients[conversation_id] = client
        logger.debug("conversation_opened", conversation_id=conversation_id)
        return manager

    async def close(self, conversation_id: str) -> None:
        """Cancel outstanding work and discard the conversation's chat state."""
        manager = self._managers.pop(conversation_id, None)
        client = self._clients.pop(conversation_id, None)
        if manager is not None:
            await manager.close()
            await self._store.save(manager.conversation)
        if client is not None:
            await client.close()

    async def delete(self, conversation_id: str) -> bool:
        await self.close(conversation_id)
        return await self._store.delete(conversation_id)

    async def list_conversations(self) -> list[Conversation]:
        return await self._store.list_conversations()

    async def aclose(self) -> None:
        for conversation_id in list(self._managers):
            await self.close(conversation_id)
