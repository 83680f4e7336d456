"""Data models for conversations and their live chat state."""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..errors import FailureKind
from ..llm import StreamFragment

DEFAULT_TITLE = "New Conversation"
TITLE_MAX_LENGTH = 30


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(BaseModel):
    """One turn in a conversation.

    ``content`` never holds a parsed-out reasoning trace; that lives in
    ``reasoning``. ``truncated`` marks an assistant reply whose stream
    broke off before completion.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    role: Role
    content: str
    reasoning: str | None = None
    timestamp: datetime = Field(default_factory=_now)
    truncated: bool = False


def derive_title(messages: list[Message]) -> str:
    """Title from the first user message, truncated to 30 characters."""
    for message in messages:
        if message.role is Role.USER:
            title = message.content.strip()
            if len(title) > TITLE_MAX_LENGTH:
                return title[:TITLE_MAX_LENGTH] + "..."
            return title or DEFAULT_TITLE
    return DEFAULT_TITLE


class Conversation(BaseModel):
    """Ordered, append-only transcript.

    Messages are only ever added through ``append``, which keeps ids unique,
    timestamps non-decreasing and ``updated_at`` at or after ``created_at``.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str = DEFAULT_TITLE
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    def append(self, message: Message) -> Message:
        """Append a message, returning the instance actually stored.

        A timestamp earlier than the previous message's (clock skew) is
        raised to it.

        Raises:
            ValueError: If the message id is already present
        """
        if any(m.id == message.id for m in self.messages):
            raise ValueError(f"Duplicate message id {message.id!r} in conversation {self.id!r}")
        if self.messages and message.timestamp < self.messages[-1].timestamp:
            message = message.model_copy(update={"timestamp": self.messages[-1].timestamp})

        self.messages.append(message)
        if self.title == DEFAULT_TITLE and message.role is Role.USER:
            self.title = derive_title(self.messages)
        self.updated_at = max(_now(), message.timestamp, self.updated_at, self.created_at)
        return message

    def last_user_message(self) -> Message | None:
        for message in reversed(self.messages):
            if message.role is Role.USER:
                return message
        return None


class ChatState(BaseModel):
    """Snapshot of a conversation's transient state for the interface."""

    model_config = ConfigDict(frozen=True)

    conversation_id: str
    messages: tuple[Message, ...] = ()
    is_loading: bool = False
    error: str | None = None
    error_kind: FailureKind | None = None


class ChatEvent(BaseModel):
    """Published to subscribers on every state transition or stream fragment."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["state", "fragment"]
    state: ChatState
    fragment: StreamFragment | None = None
