"""Abstract base class for conversation stores.

This module defines the interface the chat engine uses to keep its
conversations. The abstraction hides:
- Where transcripts live (process memory, an external service)
- Ordering of the conversation list
"""

from abc import ABC, abstractmethod

from .models import Conversation


class ConversationStore(ABC):
    """Abstract conversation store.

    The core never persists conversations itself; a durable backend is an
    external collaborator implementing this interface.
    """

    @abstractmethod
    async def create(self, title: str | None = None) -> Conversation:
        """Create and store an empty conversation."""

    @abstractmethod
    async def get(self, conversation_id: str) -> Conversation | None:
        """Return a conversation, or None if unknown."""

    @abstractmethod
    async def list_conversations(self) -> list[Conversation]:
        """All conversations, most recently updated first."""

    @abstractmethod
    async def save(self, conversation: Conversation) -> None:
        """Store (or replace) a conversation."""

    @abstractmethod
    async def delete(self, conversation_id: str) -> bool:
        """Remove a conversation. Returns False if it did not exist."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
