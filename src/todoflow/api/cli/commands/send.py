"""Send command - Run a single chat turn."""

import asyncio
import json

import typer

from todoflow.api.cli.output_formatter import TodoflowConsole
from todoflow.application.factory import TodoflowFactory


def send(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Message to send"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON"),
):
    """Send one message and print the agent's reply.

    Exits with code 1 when the turn was aborted.

    Examples:
        todoflow send "add buy milk"
        todoflow --agent work send "list my todos" --json
    """
    opts = ctx.obj or {}
    service = TodoflowFactory(opts.get("config_dir", "configs")).create_chat_service(
        opts.get("profile", "dev")
    )
    response = asyncio.run(service.handle(message, opts.get("agent_type", "default")))

    if as_json:
        typer.echo(json.dumps(response.to_dict(), ensure_ascii=False, default=str))
    else:
        tf_console = TodoflowConsole(debug=opts.get("debug", False))
        if response.success:
            tf_console.print_agent_message(response.message)
        else:
            tf_console.print_error(response.error or "Failed to process message")

    if not response.success:
        raise typer.Exit(code=1)
