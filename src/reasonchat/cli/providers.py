"""Factory functions for CLI.

Centralizes creation of the registry, clients and workspace from loaded
settings. Hides configuration details from command implementations.
"""

from rich.console import Console

from ..config import ChatSettings
from ..conversation import ChatWorkspace, create_conversation_store
from ..llm import CompletionClient, create_completion_client
from ..registry import ModelRegistry

_console = Console()


def get_registry(settings: ChatSettings) -> ModelRegistry:
    """Create the model registry from settings."""
    return ModelRegistry(settings.registry)


def require_api_key(settings: ChatSettings, console: Console | None = None) -> str:
    """Return the credential, exiting when it is not configured.

    Raises:
        SystemExit: If GROQ_API_KEY is not set
    """
    import typer

    con = console or _console
    if settings.api_key is None or not settings.api_key.get_secret_value():
        con.print("[red]Error: GROQ_API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)
    return settings.api_key.get_secret_value()


def get_workspace(settings: ChatSettings, console: Console | None = None) -> ChatWorkspace:
    """Create a chat workspace with an in-memory store.

    Each opened conversation gets its own completion client so that
    cancelling one conversation's send never touches another's.
    """
    api_key = require_api_key(settings, console)

    def client_factory() -> CompletionClient:
        return create_completion_client(api_key, settings.client)

    return ChatWorkspace(
        create_conversation_store("memory"),
        get_registry(settings),
        client_factory,
        settings,
    )
