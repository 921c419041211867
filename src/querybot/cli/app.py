"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_RELAY_URL
from ..conversation import ConversationController, ImageAttachment, RelayClient
from .providers import configure_logging, get_capture, get_output

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="querybot",
    help="Voice-capable chat assistant with an LLM completion relay",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

RELAY_URL_OPTION = typer.Option(
    DEFAULT_RELAY_URL,
    "--relay-url",
    "-r",
    help="Base URL of the completion relay"
)


@app.command()
def serve(
    host: str = typer.Option(DEFAULT_HOST, "--host", help="Interface to bind"),
    port: int = typer.Option(DEFAULT_PORT, "--port", "-p", help="Port to listen on"),
    log_level: str = typer.Option(
        "info",
        "--log-level",
        "-l",
        help="Log level: debug, info, warning, or error"
    ),
):
    """Run the completion relay HTTP service."""
    import uvicorn

    from ..relay import create_app

    configure_logging(log_level, console)
    relay_app = create_app()
    if not relay_app.state.relay.is_configured():
        console.print("[yellow]Warning: GROQ_API_KEY not set, requests will fail[/yellow]")

    console.print(f"[dim]Relay listening on http://{host}:{port}[/dim]")
    uvicorn.run(relay_app, host=host, port=port, log_level=log_level.lower())


@app.command(name="tui")
def tui_command(
    relay_url: str = RELAY_URL_OPTION,
    voice: bool = typer.Option(True, "--voice/--no-voice", help="Enable microphone input"),
    speak: bool = typer.Option(True, "--speak/--no-speak", help="Speak replies aloud"),
    log_level: str = typer.Option("error", "--log-level", "-l", help="Log level"),
):
    """Launch the interactive TUI chat interface."""
    from ..ui import run_textual_tui

    configure_logging(log_level, console)
    capture = get_capture(voice, console)
    output = get_output(speak, console)
    asyncio.run(run_textual_tui(relay_url=relay_url, capture=capture, output=output))


@app.command()
def chat(
    relay_url: str = RELAY_URL_OPTION,
    speak: bool = typer.Option(False, "--speak/--no-speak", help="Speak replies aloud"),
    image: Path | None = typer.Option(
        None,
        "--image",
        "-i",
        help="Image to attach to the first question"
    ),
    log_level: str = typer.Option("error", "--log-level", "-l", help="Log level"),
):
    """Interactive console chat through the relay.

    Type '/image PATH' to attach an image to the next question.
    """
    configure_logging(log_level, console)

    attachment = None
    if image is not None:
        try:
            attachment = ImageAttachment.from_path(image)
        except (OSError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)

    async def _chat():
        async with RelayClient(relay_url) as client:
            controller = ConversationController(relay=client, output=get_output(speak, console))
            if attachment is not None:
                controller.attach_image(attachment)
                console.print(f"[dim]Attached {attachment.filename}[/dim]")

            console.print("[bold cyan]QueryBot Chat[/bold cyan]")
            console.print("[dim]Type 'exit', 'quit', or 'q' to leave[/dim]\n")

            try:
                while True:
                    try:
                        user_input = console.input("[bold yellow]You:[/bold yellow] ")
                    except (KeyboardInterrupt, EOFError):
                        console.print("\n[dim]Goodbye![/dim]")
                        break

                    command = user_input.strip()
                    if not command:
                        continue
                    if command.lower() in ("exit", "quit", "q"):
                        console.print("[dim]Goodbye![/dim]")
                        break
                    if command.startswith("/image "):
                        try:
                            attachment = ImageAttachment.from_path(command[len("/image "):].strip())
                        except (OSError, ValueError) as e:
                            console.print(f"[red]Error: {e}[/red]")
                            continue
                        controller.attach_image(attachment)
                        console.print(f"[dim]Attached {attachment.filename}[/dim]")
                        continue

                    with console.status("Thinking..."):
                        reply = await controller.submit_turn(user_input, controller.pending_image)

                    if reply is None:
                        continue
                    style = "red" if reply.error else "green"
                    console.print(f"[bold {style}]QueryBot:[/bold {style}] ", end="")
                    console.print(reply.content, markup=False)
                    result = controller.last_result
                    if not reply.error and result is not None:
                        console.print(f"[dim]{result.model} | {result.tokens_used:,} tokens[/dim]\n")
            finally:
                controller.close()

    asyncio.run(_chat())


@app.command()
def health(relay_url: str = RELAY_URL_OPTION):
    """Check that the relay is reachable and configured."""
    import httpx

    async def _health():
        async with RelayClient(relay_url) as client:
            try:
                report = await client.health()
            except httpx.HTTPError as e:
                console.print(f"[red]x[/red] Relay at {relay_url}: UNREACHABLE ({e})")
                raise typer.Exit(code=1)

        table = Table(show_header=False, box=None)
        table.add_column("Check", style="bold cyan", width=15)
        table.add_column("Value")
        table.add_row("Relay", f"[green]+[/green] {relay_url}")
        if report.get("configured"):
            table.add_row("API key", "[green]+[/green] SET")
        else:
            table.add_row("API key", "[yellow]![/yellow] NOT SET")
        console.print(Panel(table, title="QueryBot Health", expand=False))

        if not report.get("configured"):
            raise typer.Exit(code=1)

    asyncio.run(_health())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
