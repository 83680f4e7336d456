import asyncio
from collections.abc import Callable

from ..errors import ChatError, CompletionError, MessageValidationError
from ..llm import CompletionClient, CompletionRequest, StreamFragment, TransportMessage
from ..logging import get_logger
from ..reasoning import ReasoningFormat, parse_reasoning
from ..registry import ModelConfig, ModelRegistry
from .models import ChatEvent, ChatState, Conversation, Message, Role

logger = get_logger(__name__)

ChatListener = Callable[[ChatEvent], None]


class ConversationManager:
    """Runs user turns for one conversation and owns its chat state.

    State machine: Idle -> Sending -> Idle (success or failure). Retries
    happen inside the completion client and are not visible here.

    Only the latest send matters: starting a send while another is
    outstanding cancels the older one and its eventual result is dropped.
    A failed turn keeps the user's message; only the reply is missing.

    Interfaces observe the manager through ``subscribe`` instead of being
    called into directly.
    """

    def __init__(
        self,
        client: CompletionClient,
        registry: ModelRegistry,
        conversation: Conversation | None = None,
        *,
        model_id: str | None = None,
        reasoning_format: ReasoningFormat | str = ReasoningFormat.PARSED,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        """Initialize the manager.

        Args:
            client: Completion client used only by this conversation
            registry: Shared model registry
            conversation: Conversation to continue (a new one by default)
            model_id: Selected model; unknown ids resolve to the default
            reasoning_format: How reasoning traces are surfaced
            system_prompt: Prepended to requests when the history has no
                system message
            temperature: Overrides the registry default
            max_tokens: Overrides the registry default
        """
        self._client = client
        self._registry = registry
        self._conversation = conversation or Conversation()
        self.model_id = model_id
        self.reasoning_format = ReasoningFormat(reasoning_format)
        self.system_prompt = system_prompt
        self.temperature = (
            temperature if temperature is not None else registry.config.default_temperature
        )
        self.max_tokens = max_tokens if max_tokens is not None else registry.config.default_max_tokens

        self._is_loading = False
        self._error: ChatError | None = None
        self._listeners: list[ChatListener] = []
        self._pending: asyncio.Task[Message | None] | None = None
        self._generation = 0

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def model(self) -> ModelConfig:
        """Configuration of the model the next send will use."""
        return self._registry.resolve(self.model_id)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> str | None:
        return self._error.describe() if self._error else None

    @property
    def state(self) -> ChatState:
        return ChatState(
            conversation_id=self._conversation.id,
            messages=tuple(self._conversation.messages),
            is_loading=self._is_loading,
            error=self.error,
            error_kind=self._error.kind if self._error else None,
        )

    def subscribe(self, listener: ChatListener) -> Callable[[], None]:
        """Register a listener for state and fragment events.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def send_user_message(self, text: str, stream: bool = False) -> Message | None:
        """Send one user turn and wait for its reply.

        Args:
            text: What the user typed
            stream: Deliver the reply incrementally as fragment events

        Returns:
            The appended assistant message, or None if the turn failed,
            was rejected, or was superseded by a newer send
        """
        if not text or not text.strip():
            self._reject(MessageValidationError("Cannot send an empty message"))
            return None

        self._conversation.append(Message(role=Role.USER, content=text))
        return await self._start_turn(self._history(), stream)

    async def regenerate(self, stream: bool = False) -> Message | None:
        """Request a new reply to the last user message.

        The previous reply stays in the transcript and the new one is
        appended after it; no user message is added.
        """
        last = self._conversation.last_user_message()
        if last is None:
            self._reject(MessageValidationError("There is no user message to answer again"))
            return None

        history = self._history()
        if history[-1].role != Role.USER.value:
            history.append(TransportMessage(role=Role.USER.value, content=last.content))
        return await self._start_turn(history, stream)

    def cancel(self) -> bool:
        """Stop the outstanding send without recording an error.

        Returns:
            True if a send was cancelled
        """
        if self._pending is None or self._pending.done():
            return False
        self._generation += 1
        self._pending.cancel()
        self._client.cancel()
        self._is_loading = False
        logger.info("send_cancelled", conversation_id=self._conversation.id)
        self._publish()
        return True

    async def close(self) -> None:
        """Cancel outstanding work and drop all listeners."""
        pending = self._pending
        self.cancel()
        if pending is not None:
            await asyncio.gather(pending, return_exceptions=True)
        self._listeners.clear()

    async def _supersede(self, previous: asyncio.Task[Message | None]) -> None:
        logger.info("send_superseded", conversation_id=self._conversation.id)
        self._generation += 1
        previous.cancel()
        # The older turn must release its request or stream before a new one starts
        await asyncio.gather(previous, return_exceptions=True)

    def _reject(self, error: ChatError) -> None:
        self._error = error
        logger.info("send_rejected", conversation_id=self._conversation.id, kind=error.kind.value)
        self._publish()

    async def _start_turn(self, history: list[TransportMessage], stream: bool) -> Message | None:
        while self._pending is not None and not self._pending.done():
            await self._supersede(self._pending)

        self._generation += 1
        generation = self._generation
        self._is_loading = True
        self._error = None
        self._publish()

        model = self.model
        request = CompletionRequest(
            model=model.id,
            messages=self._with_system_prompt(history),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            stream=stream,
            reasoning_format=(
                self.reasoning_format if self._registry.is_reasoning_capable(model.id) else None
            ),
        )
        task = asyncio.create_task(self._run_turn(generation, model, request))
        self._pending = task
        try:
            return await task
        except asyncio.CancelledError:
            if generation != self._generation:
                return None
            raise
        finally:
            if self._pending is task:
                self._pending = None

    async def _run_turn(
        self, generation: int, model: ModelConfig, request: CompletionRequest
    ) -> Message | None:
        try:
            if request.stream:
                content, reasoning = await self._stream_reply(request)
            else:
                response = await self._client.complete(request)
                content, reasoning = response.first.content, response.first.reasoning
        except CompletionError as exc:
            if generation == self._generation:
                self._fail(exc, model)
            return None
        except asyncio.CancelledError:
            if generation == self._generation:
                self._is_loading = False
                self._publish()
            raise

        # A newer send may have started while this one was settling
        if generation != self._generation:
            return None

        message = self._conversation.append(self._assistant_message(model, content, reasoning))
        self._is_loading = False
        self._publish()
        return message

    async def _stream_reply(self, request: CompletionRequest) -> tuple[str, str | None]:
        stream = await self._client.stream(request)
        async for fragment in stream:
            self._publish(fragment)
        return stream.content, stream.reasoning

    def _fail(self, error: CompletionError, model: ModelConfig) -> None:
        if error.partial_content or error.partial_reasoning:
            self._conversation.append(
                self._assistant_message(
                    model,
                    error.partial_content or "",
                    error.partial_reasoning,
                    truncated=True,
                )
            )
        self._error = error
        self._is_loading = False
        logger.warning(
            "send_failed",
            conversation_id=self._conversation.id,
            kind=error.kind.value,
            attempts=error.attempts,
            exhausted=error.exhausted,
        )
        self._publish()

    def _assistant_message(
        self,
        model: ModelConfig,
        content: str,
        reasoning: str | None,
        truncated: bool = False,
    ) -> Message:
        reasoning_format = (
            self.reasoning_format
            if self._registry.is_reasoning_capable(model.id)
            else ReasoningFormat.RAW
        )
        reply = parse_reasoning(content, reasoning, reasoning_format)
        return Message(
            role=Role.ASSISTANT,
            content=reply.content,
            reasoning=reply.reasoning,
            truncated=truncated,
        )

    def _history(self) -> list[TransportMessage]:
        return [
            TransportMessage(role=m.role.value, content=m.content)
            for m in self._conversation.messages
        ]

    def _with_system_prompt(self, history: list[TransportMessage]) -> list[TransportMessage]:
        if not self.system_prompt or any(m.role == Role.SYSTEM.value for m in history):
            return history
        return [TransportMessage(role=Role.SYSTEM.value, content=self.system_prompt), *history]

    def _publish(self, fragment: StreamFragment | None = None) -> None:
        if not self._listeners:
            return
        event = ChatEvent(
            kind="fragment" if fragment is not None else "state",
            state=self.state,
            fragment=fragment,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("chat_listener_failed", conversation_id=self._conversation.id)
