"""Request, response and streaming models for the completion client."""

from collections.abc import AsyncGenerator, AsyncIterator, Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..reasoning import ReasoningFormat

TransportRole = Literal["system", "user", "assistant"]


class ClientConfig(BaseModel):
    """Connection and reliability settings for a CompletionClient.

    Attributes:
        endpoint: Base URL of an OpenAI-compatible API; requests are POSTed
            to ``<endpoint>/chat/completions``
        max_retries: Additional attempts after the first for transient failures
        retry_delay: Fixed delay in seconds between attempts
        timeout: Per-attempt deadline in seconds (also the per-fragment
            deadline while streaming)
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str = "https://api.groq.com/openai/v1"
    max_retries: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=1.0, ge=0.0)
    timeout: float = Field(default=60.0, gt=0.0)


class TransportMessage(BaseModel):
    """A role/content pair as sent on the wire."""

    model_config = ConfigDict(frozen=True)

    role: TransportRole
    content: str


class CompletionRequest(BaseModel):
    """One logical completion request."""

    model_config = ConfigDict(frozen=True)

    model: str
    messages: list[TransportMessage] = Field(min_length=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, gt=0)
    stream: bool = False
    reasoning_format: ReasoningFormat | None = None

    def to_body(self) -> dict[str, Any]:
        """Build the JSON request body."""
        body: dict[str, Any] = {
            "model": self.model,
            "messages": [m.model_dump() for m in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if self.stream:
            body["stream"] = True
        if self.reasoning_format is not None:
            body["reasoning_format"] = self.reasoning_format.value
        return body


class ResponseMessage(BaseModel):
    role: str
    content: str
    reasoning: str | None = None


class Choice(BaseModel):
    """One completion choice.

    Some servers put the reasoning trace on the message instead of the
    choice; it is lifted to ``reasoning`` either way.
    """

    message: ResponseMessage
    reasoning: str | None = None
    finish_reason: str | None = None

    @model_validator(mode="after")
    def _lift_message_reasoning(self) -> "Choice":
        if self.reasoning is None and self.message.reasoning is not None:
            self.reasoning = self.message.reasoning
        return self

    @property
    def role(self) -> str:
        return self.message.role

    @property
    def content(self) -> str:
        return self.message.content


class CompletionResponse(BaseModel):
    """Validated success body of a completion request."""

    id: str
    choices: list[Choice] = Field(min_length=1)
    model: str | None = None
    usage: dict[str, Any] | None = None

    @property
    def first(self) -> Choice:
        return self.choices[0]


class StreamFragment(BaseModel):
    """Incremental piece of a streamed reply."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["content", "reasoning"]
    text: str


class CompletionStream:
    """One-shot async iterator over the fragments of a streamed reply.

    Content and reasoning are accumulated as fragments pass through, so
    after iteration (or after a failure) the text delivered so far is
    available on ``content`` and ``reasoning``.

    Usage:
        stream = await client.stream(request)
        async for fragment in stream:
            print(fragment.text, end="")
        print(stream.finish_reason)
    """

    def __init__(
        self,
        fragments: Callable[["CompletionStream"], AsyncGenerator[StreamFragment, None]],
    ):
        """Initialize with a factory producing the fragment iterator.

        Args:
            fragments: Called once with this stream; the iterator it returns
                may record ``finish_reason`` and check ``cancelled``
        """
        self._fragments = fragments
        self._content: list[str] = []
        self._reasoning: list[str] = []
        self._started = False
        self._done = False
        self.cancelled = False
        self.finish_reason: str | None = None

    @property
    def content(self) -> str:
        return "".join(self._content)

    @property
    def reasoning(self) -> str | None:
        return "".join(self._reasoning) if self._reasoning else None

    @property
    def done(self) -> bool:
        """True once the transport signalled completion."""
        return self._done

    def cancel(self) -> None:
        """Stop delivering fragments; iteration ends at the next fragment."""
        self.cancelled = True

    def __aiter__(self) -> AsyncIterator[StreamFragment]:
        if self._started:
            raise RuntimeError("CompletionStream can only be iterated once")
        self._started = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[StreamFragment]:
        source = self._fragments(self)
        try:
            async for fragment in source:
                if self.cancelled:
                    return
                if fragment.kind == "content":
                    self._content.append(fragment.text)
                else:
                    self._reasoning.append(fragment.text)
                yield fragment
            self._done = not self.cancelled
        finally:
            await source.aclose()
