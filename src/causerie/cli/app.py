"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from ..config import ChatSettings
from ..errors import ValidationError
from ..log import configure_logging
from ..transcript import ChangeKind, Role, TranscriptChange
from ..turn import TurnState
from .providers import get_client, get_controller

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="causerie",
    help="Terminal chat client streaming replies from Gemini",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _load_settings(
    model: str | None,
    temperature: float | None,
    log_level: str | None,
    log_file: Path | None,
) -> ChatSettings:
    try:
        return ChatSettings.from_env(
            model=model,
            temperature=temperature,
            log_level=log_level.lower() if log_level else None,
            log_file=log_file,
        )
    except ValueError as e:
        console.print(f"[red]Error: invalid configuration: {e}[/red]")
        raise typer.Exit(code=2)


ModelOption = typer.Option(
    None, "--model", "-m", help="Gemini model (default: CAUSERIE_MODEL or gemini-3-flash-preview)"
)
TemperatureOption = typer.Option(None, "--temperature", "-t", help="Sampling temperature (0.0-2.0)")
LogLevelOption = typer.Option(
    None, "--log-level", "-l", help="Log level: debug, info, warning or error"
)
LogFileOption = typer.Option(None, "--log-file", help="Write logs to this file")


@app.command()
def chat(
    model: str | None = ModelOption,
    temperature: float | None = TemperatureOption,
    log_level: str | None = LogLevelOption,
    log_file: Path | None = LogFileOption,
):
    """Launch the interactive TUI chat interface."""
    settings = _load_settings(model, temperature, log_level, log_file)
    # Without a log file only errors reach stderr, behind the TUI
    configure_logging(
        settings.log_level if settings.log_file else "error",
        log_file=settings.log_file,
    )

    async def _chat():
        from ..ui import run_chat_tui

        client = get_client(settings)
        try:
            await run_chat_tui(get_controller(settings, client))
        finally:
            await client.close()
            console.print("\n[dim]Au revoir ![/dim]")

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


@app.command()
def ask(
    question: str = typer.Argument(..., help="Message to send"),
    model: str | None = ModelOption,
    temperature: float | None = TemperatureOption,
    log_level: str | None = LogLevelOption,
    log_file: Path | None = LogFileOption,
):
    """Send one message and stream the reply to the console."""
    settings = _load_settings(model, temperature, log_level, log_file)
    configure_logging(settings.log_level, log_file=settings.log_file)

    async def _ask() -> TurnState:
        client = get_client(settings)
        controller = get_controller(settings, client)
        printed = 0

        def _print_delta(change: TranscriptChange) -> None:
            nonlocal printed
            message = change.message
            if message is None or message.role is not Role.ASSISTANT:
                return
            if change.kind is ChangeKind.UPDATED:
                console.print(message.content[printed:], end="", markup=False, highlight=False)
                printed = len(message.content)
            elif change.kind is ChangeKind.FINALIZED:
                console.print()
            elif change.kind is ChangeKind.FAILED:
                if printed:
                    console.print()
                console.print(message.content, style="red", markup=False)

        controller.transcript.subscribe(_print_delta)
        try:
            turn = await controller.run_turn(question)
            if turn.usage:
                console.print(f"[dim]Tokens: {turn.usage.get('total_tokens', 0):,}[/dim]")
            return turn.state
        finally:
            await client.close()

    try:
        state = asyncio.run(_ask())
    except ValidationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=2)
    except KeyboardInterrupt:
        raise typer.Exit(code=130)

    if state is TurnState.FAILED:
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
