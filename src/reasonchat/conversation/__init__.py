"""Conversation module.

Hides how user turns become completion requests, how replies are folded
into the transcript, and where conversations are kept.
"""

from .base import ConversationStore
from .factory import create_conversation_store
from .in_memory import InMemoryConversationStore
from .manager import ChatListener, ConversationManager
from .models import ChatEvent, ChatState, Conversation, Message, Role, derive_title
from .workspace import ChatWorkspace

__all__ = [
    "ChatEvent",
    "ChatListener",
    "ChatState",
    "ChatWorkspace",
    "Conversation",
    "ConversationManager",
    "ConversationStore",
    "InMemoryConversationStore",
    "Message",
    "Role",
    "create_conversation_store",
    "derive_title",
]
