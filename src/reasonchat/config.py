"""Configuration for reasonchat.

All settings are gathered into one explicit ChatSettings value that is
handed to each component at construction; nothing reads the environment
after ``load_settings`` returns.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr

from .llm import ClientConfig
from .reasoning import ReasoningFormat
from .registry import RegistryConfig

DEFAULT_SYSTEM_PROMPT = """You are a helpful, adaptable assistant.
- Match the length, tone and level of detail to the question.
- Format code in fenced Markdown blocks with the language named.
- When debugging, explain the cause before giving the fix.
- If a request is ambiguous, ask one clarifying question.
"""

# Environment variable -> (section, field)
_ENV_FIELDS: dict[str, tuple[str | None, str]] = {
    "REASONCHAT_ENDPOINT": ("client", "endpoint"),
    "REASONCHAT_MAX_RETRIES": ("client", "max_retries"),
    "REASONCHAT_RETRY_DELAY": ("client", "retry_delay"),
    "REASONCHAT_TIMEOUT": ("client", "timeout"),
    "REASONCHAT_DEFAULT_MODEL": ("registry", "default_model"),
    "REASONCHAT_TEMPERATURE": ("registry", "default_temperature"),
    "REASONCHAT_MAX_TOKENS": ("registry", "default_max_tokens"),
    "REASONCHAT_REASONING_FORMAT": (None, "reasoning_format"),
    "REASONCHAT_SYSTEM_PROMPT": (None, "system_prompt"),
    "REASONCHAT_LOG_LEVEL": (None, "log_level"),
}


class ChatSettings(BaseModel):
    """Complete configuration for a chat deployment.

    Attributes:
        api_key: Bearer credential for the completion endpoint
        registry: Model catalogue and generation defaults
        client: Endpoint and retry/timeout settings
        reasoning_format: Initial reasoning surfacing policy
        system_prompt: Prepended when a conversation has no system message
        log_level: Minimum structlog level
    """

    api_key: SecretStr | None = None
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    reasoning_format: ReasoningFormat = ReasoningFormat.PARSED
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    log_level: str = "info"


def load_settings(
    env_file: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ChatSettings:
    """Load settings from environment variables.

    Args:
        env_file: Optional .env file loaded before reading ``os.environ``
        environ: Explicit mapping to read instead of the process
            environment (no .env loading happens in that case)

    Returns:
        Validated ChatSettings

    Raises:
        pydantic.ValidationError: If a value is out of range or malformed

    Environment variables:
        GROQ_API_KEY: Completion endpoint credential
        REASONCHAT_ENDPOINT: OpenAI-compatible base URL
        REASONCHAT_DEFAULT_MODEL: Default model id
        REASONCHAT_REASONING_MODELS: Comma-separated reasoning-capable ids
        REASONCHAT_MAX_RETRIES / REASONCHAT_RETRY_DELAY / REASONCHAT_TIMEOUT
        REASONCHAT_TEMPERATURE / REASONCHAT_MAX_TOKENS
        REASONCHAT_REASONING_FORMAT: parsed, raw or hidden
        REASONCHAT_SYSTEM_PROMPT / REASONCHAT_LOG_LEVEL
    """
    if environ is None:
        load_dotenv(env_file)
        environ = os.environ

    data: dict[str, Any] = {"client": {}, "registry": {}}
    for name, (section, field) in _ENV_FIELDS.items():
        value = environ.get(name)
        if value is None or value == "":
            continue
        if section is None:
            data[field] = value
        else:
            data[section][field] = value

    reasoning_models = environ.get("REASONCHAT_REASONING_MODELS")
    if reasoning_models:
        data["registry"]["reasoning_models"] = frozenset(
            m.strip() for m in reasoning_models.split(",") if m.strip()
        )

    api_key = environ.get("GROQ_API_KEY")
    if api_key:
        data["api_key"] = api_key
    return ChatSettings.model_validate(data)
