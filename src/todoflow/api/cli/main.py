"""todoflow CLI entry point."""

from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from todoflow.api.cli.commands import chat, metrics, send, serve, todos
from todoflow.api.cli.log_config import configure_logging
from todoflow.application.settings import get_settings

# Provider API keys (OPENAI_API_KEY, ...) for litellm
load_dotenv()

app = typer.Typer(
    name="todoflow",
    help="todoflow - chat-driven todo agent",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.command("chat")(chat.chat)
app.command("send")(send.send)
app.command("serve")(serve.serve)
app.add_typer(todos.app, name="todos", help="Todo management")
app.add_typer(metrics.app, name="metrics", help="Interaction metrics")


@app.callback()
def main(
    ctx: typer.Context,
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Configuration profile"),
    config_dir: Optional[str] = typer.Option(None, "--config-dir", help="Profile directory"),
    agent_type: Optional[str] = typer.Option(None, "--agent", "-a", help="Active agent tag"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
):
    """todoflow CLI."""
    settings = get_settings()
    debug = debug or settings.debug
    configure_logging(debug)
    ctx.obj = {
        "profile": profile or settings.profile,
        "config_dir": config_dir or settings.config_dir,
        "agent_type": agent_type or settings.default_agent_type,
        "debug": debug,
    }


@app.command()
def version():
    """Show todoflow version."""
    from todoflow import __version__

    console.print(f"[bold blue]todoflow[/bold blue] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
