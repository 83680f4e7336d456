from typing import Any

import httpx
from pydantic import SecretStr

from .client import CompletionClient
from .models import ClientConfig


def create_completion_client(
    api_key: str | SecretStr,
    config: ClientConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
    **overrides: Any,
) -> CompletionClient:
    """Create a completion client.

    Args:
        api_key: Bearer credential (required)
        config: Client configuration (defaults to the Groq endpoint)
        http_client: Optional shared httpx client
        **overrides: ClientConfig field overrides (endpoint, max_retries,
            retry_delay, timeout)

    Returns:
        Initialized CompletionClient

    Raises:
        TypeError: If api_key is empty

    Examples:
        >>> client = create_completion_client(
        ...     "gsk_...",
        ...     endpoint="https://api.groq.com/openai/v1",
        ...     max_retries=2,
        ... )
    """
    secret = api_key.get_secret_value() if isinstance(api_key, SecretStr) else api_key
    if not secret:
        raise TypeError("Completion client requires a non-empty api_key")

    base = config or ClientConfig()
    if overrides:
        base = ClientConfig.model_validate({**base.model_dump(), **overrides})
    return CompletionClient(base, api_key, http_client=http_client)
