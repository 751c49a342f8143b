"""Main CLI application using Typer."""
import asyncio
import sys

import typer
from dotenv import load_dotenv
from rich.console import Console

from .. import __version__
from ..errors import TerminalUnavailable
from .providers import get_default_model, get_model_server, get_registry

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="ollatui",
    help="Terminal client for chatting with a local Ollama server",
    add_completion=False,
)

# Console for rich output
console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ollatui {__version__}")
        raise typer.Exit()


def _require_terminal() -> None:
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise TerminalUnavailable("ollatui needs an interactive terminal")


@app.command()
def run(
    host: str | None = typer.Option(
        None,
        "--host",
        "-H",
        help="Ollama server address [env: OLLAMA_HOST]"
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Default chat model until one is picked in the Models tab [env: OLLAMA_MODEL]"
    ),
    registry: str | None = typer.Option(
        None,
        "--registry",
        "-r",
        help="Registry contract: 'ollama-library' or 'json' [env: OLLATUI_REGISTRY]"
    ),
    registry_url: str | None = typer.Option(
        None,
        "--registry-url",
        help="Registry base URL [env: OLLATUI_REGISTRY_URL]"
    ),
    search_debounce: float | None = typer.Option(
        None,
        "--search-debounce",
        min=0.1,
        help="Search automatically after this many idle seconds of typing"
    ),
    timeout: float = typer.Option(
        10.0,
        "--timeout",
        "-t",
        min=0.1,
        help="Connect/request timeout in seconds"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
):
    """Launch the interactive chat, models and search interface."""
    try:
        _require_terminal()
    except TerminalUnavailable as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    try:
        server = get_model_server(host, timeout)
        model_registry = get_registry(registry, registry_url, timeout)
    except (TypeError, ValueError) as e:
        raise typer.BadParameter(str(e)) from e

    async def _tui() -> int:
        from ..ui import run_tui

        async with server, model_registry:
            return await run_tui(
                server=server,
                registry=model_registry,
                default_model=get_default_model(model),
                search_debounce=search_debounce,
                log_level=log_level,
            )

    try:
        code = asyncio.run(_tui())
    except KeyboardInterrupt:
        code = 0
    except OSError as e:
        console.print(f"[red]Error: terminal unavailable: {e}[/red]")
        raise typer.Exit(code=1) from e
    raise typer.Exit(code=code)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
