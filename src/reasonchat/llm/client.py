import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any, TypeVar

import httpx
from openai import APIConnectionError, APIError, APIStatusError, APITimeoutError, AsyncOpenAI, AsyncStream
from openai.types.chat import ChatCompletionChunk
from pydantic import SecretStr, ValidationError

from ..errors import (
    CompletionError,
    CompletionTimeout,
    MalformedResponse,
    NetworkError,
    error_for_status,
)
from ..logging import get_logger
from .models import ClientConfig, CompletionRequest, CompletionResponse, CompletionStream, StreamFragment

logger = get_logger(__name__)

T = TypeVar("T")

COMPLETIONS_PATH = "/chat/completions"


def classify_transport_error(exc: Exception) -> CompletionError:
    """Map an SDK or httpx exception onto the failure taxonomy."""
    if isinstance(exc, CompletionError):
        return exc
    if isinstance(exc, (APITimeoutError, httpx.TimeoutException, asyncio.TimeoutError)):
        return CompletionTimeout("Completion request timed out")
    if isinstance(exc, APIStatusError):
        return error_for_status(exc.status_code, f"Completion endpoint returned {exc.status_code}")
    if isinstance(exc, (APIConnectionError, httpx.TransportError)):
        return NetworkError(f"Cannot reach completion endpoint: {type(exc).__name__}")
    if isinstance(exc, (APIError, httpx.HTTPError, ValueError)):
        return MalformedResponse(f"Malformed completion payload: {type(exc).__name__}")
    raise TypeError(f"Unclassifiable transport error: {exc!r}") from exc


def parse_completion_body(response: httpx.Response) -> CompletionResponse:
    """Validate a success body against the expected response shape.

    Raises:
        MalformedResponse: If the body is not JSON or does not match the shape
    """
    try:
        return CompletionResponse.model_validate_json(response.content)
    except ValidationError as exc:
        raise MalformedResponse(
            f"Unexpected completion response shape ({exc.error_count()} errors)",
            status_code=response.status_code,
        ) from exc


class CompletionClient:
    """Client for one OpenAI-compatible chat completions endpoint.

    Hidden design decisions:
    - Which HTTP stack carries the request (the OpenAI SDK, with its own
      retries disabled)
    - Retry policy: transient failures (timeout, connection error, 429,
      5xx) are retried up to ``max_retries`` times with a fixed delay;
      other 4xx and malformed bodies fail immediately
    - Per-attempt deadlines
    - Validation of the response shape

    Only one call is outstanding per client: starting a new call cancels
    the one still in flight, so retries of an abandoned call never overlap
    with a newer request.

    Supports async context manager protocol:
        async with CompletionClient(config, api_key) as client:
            response = await client.complete(request)
    """

    def __init__(
        self,
        config: ClientConfig,
        api_key: str | SecretStr,
        http_client: httpx.AsyncClient | None = None,
        **client_kwargs: Any,
    ):
        """Initialize the client.

        Args:
            config: Endpoint and reliability settings
            api_key: Bearer credential for the endpoint
            http_client: Optional shared httpx client (also used to inject
                transports in tests)
            **client_kwargs: Additional kwargs for AsyncOpenAI
        """
        if isinstance(api_key, SecretStr):
            api_key = api_key.get_secret_value()
        self._config = config
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=config.endpoint,
            max_retries=0,
            timeout=config.timeout,
            http_client=http_client,
            **client_kwargs,
        )
        self._inflight: asyncio.Task[Any] | None = None
        self._active_stream: CompletionStream | None = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def busy(self) -> bool:
        """True while a call is waiting on the endpoint."""
        return self._inflight is not None and not self._inflight.done()

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Run one non-streaming completion exchange.

        Args:
            request: Completion request (its ``stream`` flag is ignored)

        Returns:
            Validated response with at least one choice

        Raises:
            CompletionError: Classified terminal failure
        """
        if request.stream:
            request = request.model_copy(update={"stream": False})
        return await self._run(request, lambda: self._post_completion(request))

    async def stream(self, request: CompletionRequest) -> CompletionStream:
        """Open a streaming completion.

        Opening the stream follows the same retry and timeout rules as
        ``complete``. Once open, a failure is terminal: iteration raises a
        CompletionError whose ``partial_content`` holds what was delivered.

        Returns:
            One-shot CompletionStream of content and reasoning fragments
        """
        if not request.stream:
            request = request.model_copy(update={"stream": True})
        source = await self._run(request, lambda: self._open_stream(request))
        stream = CompletionStream(self._fragments(source))
        self._active_stream = stream
        return stream

    def cancel(self) -> None:
        """Abandon the outstanding call and stop any active stream."""
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        if self._active_stream is not None:
            self._active_stream.cancel()
            self._active_stream = None

    async def close(self) -> None:
        """Cancel outstanding work and close the underlying HTTP client."""
        self.cancel()
        await self._client.close()

    async def __aenter__(self) -> "CompletionClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _run(self, request: CompletionRequest, attempt: Callable[[], Awaitable[T]]) -> T:
        previous = self._inflight
        self.cancel()
        if previous is not None:
            # The abandoned attempt must be gone before a new request goes out
            await asyncio.gather(previous, return_exceptions=True)
        logger.debug(
            "completion_request",
            model=request.model,
            messages=len(request.messages),
            stream=request.stream,
        )
        task = asyncio.create_task(self._with_retries(attempt))
        self._inflight = task
        try:
            return await task
        finally:
            if self._inflight is task:
                self._inflight = None

    async def _with_retries(self, attempt: Callable[[], Awaitable[T]]) -> T:
        attempts = 0
        while True:
            attempts += 1
            try:
                return await asyncio.wait_for(attempt(), timeout=self._config.timeout)
            except (CompletionError, asyncio.TimeoutError) as exc:
                error = classify_transport_error(exc)

            error.attempts = attempts
            if not error.retryable:
                logger.warning(
                    "completion_failed",
                    kind=error.kind.value,
                    attempts=attempts,
                    status_code=error.status_code,
                )
                raise error
            if attempts > self._config.max_retries:
                error.exhausted = True
                logger.warning(
                    "completion_retries_exhausted",
                    kind=error.kind.value,
                    attempts=attempts,
                    status_code=error.status_code,
                )
                raise error

            logger.info(
                "completion_retry",
                attempt=attempts,
                kind=error.kind.value,
                delay=self._config.retry_delay,
            )
            await asyncio.sleep(self._config.retry_delay)

    async def _post_completion(self, request: CompletionRequest) -> CompletionResponse:
        try:
            response = await self._client.post(
                COMPLETIONS_PATH,
                body=request.to_body(),
                cast_to=httpx.Response,
            )
        except (APIError, httpx.HTTPError) as exc:
            raise classify_transport_error(exc) from exc
        return parse_completion_body(response)

    async def _open_stream(self, request: CompletionRequest) -> AsyncStream[ChatCompletionChunk]:
        try:
            return await self._client.post(
                COMPLETIONS_PATH,
                body=request.to_body(),
                cast_to=ChatCompletionChunk,
                stream=True,
                stream_cls=AsyncStream[ChatCompletionChunk],
            )
        except (APIError, httpx.HTTPError) as exc:
            raise classify_transport_error(exc) from exc

    def _fragments(
        self, source: AsyncStream[ChatCompletionChunk]
    ) -> Callable[[CompletionStream], AsyncGenerator[StreamFragment, None]]:
        timeout = self._config.timeout

        async def generate(stream: CompletionStream) -> AsyncGenerator[StreamFragment, None]:
            chunks = source.__aiter__()
            try:
                while True:
                    try:
                        chunk = await asyncio.wait_for(chunks.__anext__(), timeout=timeout)
                    except StopAsyncIteration:
                        return
                    except (APIError, httpx.HTTPError, asyncio.TimeoutError, ValueError) as exc:
                        error = classify_transport_error(exc)
                        error.attempts = 1
                        error.partial_content = stream.content
                        error.partial_reasoning = stream.reasoning
                        logger.warning(
                            "completion_stream_interrupted",
                            kind=error.kind.value,
                            delivered=len(error.partial_content),
                        )
                        raise error from exc

                    for choice in chunk.choices[:1]:
                        reasoning = getattr(choice.delta, "reasoning", None)
                        if reasoning:
                            yield StreamFragment(kind="reasoning", text=reasoning)
                        if choice.delta.content:
                            yield StreamFragment(kind="content", text=choice.delta.content)
                        if choice.finish_reason:
                            stream.finish_reason = choice.finish_reason
            finally:
                await source.close()

        return generate
