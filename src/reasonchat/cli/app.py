"""Main CLI application using Typer."""
import asyncio

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from ..config import load_settings
from ..conversation import ChatEvent, ConversationManager, Role
from ..logging import configure_logging
from ..reasoning import ReasoningFormat
from ..registry import ModelCategory
from .providers import get_registry, get_workspace

app = typer.Typer(
    name="reasonchat",
    help="Chat with hosted completion models, with optional reasoning traces",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()

EXIT_COMMANDS = ("/quit", "/exit", "exit", "quit", "q")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level (overrides REASONCHAT_LOG_LEVEL)"
    )
):
    """Configure logging before any command runs."""
    settings = load_settings()
    configure_logging(log_level or settings.log_level)


@app.command()
def models(
    category: ModelCategory | None = typer.Option(
        None,
        "--category",
        "-c",
        case_sensitive=False,
        help="Only show models in this category"
    )
):
    """List the available models."""
    settings = load_settings()
    registry = get_registry(settings)
    entries = registry.models_by_category(category) if category else registry.models

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Category", style="yellow")
    table.add_column("Context", style="green")
    table.add_column("Reasoning", width=9)

    for model in entries:
        default = " (default)" if model.id == registry.default_model.id else ""
        table.add_row(
            model.id + default,
            model.name,
            model.category.value,
            model.specs.context_window if model.specs else "-",
            "yes" if registry.is_reasoning_capable(model.id) else "",
        )

    console.print(table)


def _print_reply(manager: ConversationManager, streamed: bool) -> None:
    state = manager.state
    if state.error:
        console.print(f"[red]Error: {state.error}[/red]")
    if not state.messages or state.messages[-1].role is not Role.ASSISTANT:
        return
    if streamed:
        console.print()
        return

    reply = state.messages[-1]
    if reply.reasoning:
        console.print(reply.reasoning, style="dim", markup=False, highlight=False)
        console.print()
    console.print(Markdown(reply.content))


def _print_fragment(event: ChatEvent) -> None:
    if event.kind != "fragment" or event.fragment is None:
        return
    style = "dim" if event.fragment.kind == "reasoning" else None
    console.print(event.fragment.text, end="", style=style, markup=False, highlight=False)


@app.command()
def chat(
    model: str = typer.Option(
        None,
        "--model",
        "-m",
        help="Model id (unknown ids fall back to the default)"
    ),
    reasoning_format: ReasoningFormat = typer.Option(
        None,
        "--reasoning-format",
        "-r",
        help="How reasoning traces are shown"
    ),
    stream: bool = typer.Option(
        True,
        "--stream/--no-stream",
        help="Print the reply as it is generated"
    )
):
    """Start an interactive chat session."""
    settings = load_settings()
    if reasoning_format is not None:
        settings = settings.model_copy(update={"reasoning_format": reasoning_format})

    async def _chat():
        workspace = get_workspace(settings, console)
        manager = await workspace.new_conversation(model_id=model)
        unsubscribe = manager.subscribe(_print_fragment) if stream else None

        console.print(f"[bold cyan]reasonchat[/bold cyan] [dim]model: {manager.model.id}[/dim]")
        console.print("[dim]Commands: /new, /regen, /model <id>, /quit\n[/dim]")

        try:
            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                command = user_input.strip()
                if command.lower() in EXIT_COMMANDS:
                    console.print("[dim]Goodbye![/dim]")
                    break

                if command == "/new":
                    if unsubscribe:
                        unsubscribe()
                    model_id = manager.model_id
                    await workspace.close(manager.conversation.id)
                    manager = await workspace.new_conversation(model_id=model_id)
                    unsubscribe = manager.subscribe(_print_fragment) if stream else None
                    console.print("[dim]Started a new conversation.[/dim]")
                    continue

                if command.startswith("/model"):
                    manager.model_id = command.removeprefix("/model").strip() or None
                    console.print(f"[dim]Model: {manager.model.id}[/dim]")
                    continue

                console.print()
                if command == "/regen":
                    await manager.regenerate(stream=stream)
                else:
                    await manager.send_user_message(user_input, stream=stream)
                _print_reply(manager, streamed=stream)
                console.print()
        finally:
            await workspace.aclose()

    asyncio.run(_chat())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
