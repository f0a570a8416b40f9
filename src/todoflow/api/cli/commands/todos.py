"""Todos command - Inspect the todo store."""

import asyncio
from typing import List, Optional

import typer

from todoflow.api.cli.output_formatter import TodoflowConsole
from todoflow.application.factory import TodoflowFactory

app = typer.Typer(help="Todo management")


@app.command("list")
def list_todos(
    ctx: typer.Context,
    all_agents: bool = typer.Option(False, "--all", help="Show todos of every agent"),
    completed: Optional[bool] = typer.Option(
        None, "--completed/--open", help="Filter by completion"
    ),
    label: Optional[List[str]] = typer.Option(None, "--label", "-l", help="Required label"),
):
    """List todos of the active agent."""
    opts = ctx.obj or {}
    factory = TodoflowFactory(opts.get("config_dir", "configs"))
    store = factory.create_store(factory.load_profile(opts.get("profile", "dev")))
    agent_type = None if all_agents else opts.get("agent_type", "default")

    result = asyncio.run(
        store.list_todos(agent_type=agent_type, completed=completed, labels=label or None)
    )
    tf_console = TodoflowConsole(debug=opts.get("debug", False))
    if not result.success:
        tf_console.print_error(result.error or "Failed to list todos")
        raise typer.Exit(code=1)
    tf_console.print_todos(result.todos or [], title=f"Todos ({agent_type or 'all agents'})")
