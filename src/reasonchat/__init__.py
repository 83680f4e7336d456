"""
reasonchat: a chat engine for hosted completion models with reasoning traces.

Each subpackage hides one design decision: which models exist (registry),
how reasoning is recognized (reasoning), how the endpoint is reached
(llm), and how turns become a transcript (conversation).
"""

__version__ = "0.1.0"

from .config import ChatSettings, load_settings
from .conversation import (
    ChatEvent,
    ChatState,
    ChatWorkspace,
    Conversation,
    ConversationManager,
    Message,
    Role,
    create_conversation_store,
)
from .errors import ChatError, CompletionError, FailureKind, MessageValidationError
from .llm import ClientConfig, CompletionClient, create_completion_client
from .reasoning import ReasoningFormat, parse_reasoning
from .registry import ModelCategory, ModelConfig, ModelRegistry, RegistryConfig, create_model_registry

__all__ = [
    "ChatError",
    "ChatEvent",
    "ChatSettings",
    "ChatState",
    "ChatWorkspace",
    "ClientConfig",
    "CompletionClient",
    "CompletionError",
    "Conversation",
    "ConversationManager",
    "FailureKind",
    "Message",
    "MessageValidationError",
    "ModelCategory",
    "ModelConfig",
    "ModelRegistry",
    "ReasoningFormat",
    "RegistryConfig",
    "Role",
    "create_completion_client",
    "create_conversation_store",
    "create_model_registry",
    "load_settings",
    "parse_reasoning",
]
