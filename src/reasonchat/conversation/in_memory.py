"""In-memory conversation store.

Dict-based storage; conversations are lost when the process exits.
"""

from .base import ConversationStore
from .models import DEFAULT_TITLE, Conversation


class InMemoryConversationStore(ConversationStore):
    """Session-only conversation store, suitable for a single process or tests."""

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}

    async def create(self, title: str | None = None) -> Conversation:
        conversation = Conversation(title=title or DEFAULT_TITLE)
        self._conversations[conversation.id] = conversation
        return conversation

    async def get(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    async def list_conversations(self) -> list[Conversation]:
        return sorted(
            self._conversations.values(),
            key=lambda c: c.updated_at,
            reverse=True,
        )

    async def save(self, conversation: Conversation) -> None:
        self._conversations[conversation.id] = conversation

    async def delete(self, conversation_id: str) -> bool:
        return self._conversations.pop(conversation_id, None) is not None

    @property
    def backend_type(self) -> str:
        return "memory"
