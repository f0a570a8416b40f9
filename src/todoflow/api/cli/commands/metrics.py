"""Metrics command - Summarize logged interactions."""

import json
from typing import Optional

import typer

from todoflow.api.cli.output_formatter import TodoflowConsole
from todoflow.application.factory import DEFAULT_METRICS_PATH, TodoflowFactory
from todoflow.infrastructure.metrics.interaction_log import (
    load_interactions,
    summarize_interactions,
)

app = typer.Typer(help="Interaction metrics")


@app.command("summary")
def summary(
    ctx: typer.Context,
    log_file: Optional[str] = typer.Option(
        None, "--file", "-f", help="JSONL interaction log (defaults to the profile's)"
    ),
    agent_type: Optional[str] = typer.Option(None, "--agent", help="Only this agent"),
    as_json: bool = typer.Option(False, "--json", help="Print as JSON"),
):
    """Show success rate, response times and todo counters."""
    opts = ctx.obj or {}
    if log_file is None:
        factory = TodoflowFactory(opts.get("config_dir", "configs"))
        metrics_config = factory.load_profile(opts.get("profile", "dev")).get("metrics", {})
        if metrics_config.get("type") != "jsonl":
            typer.echo("The active profile does not log interactions to a file.", err=True)
            raise typer.Exit(code=1)
        log_file = metrics_config.get("path", DEFAULT_METRICS_PATH)

    result = summarize_interactions(load_interactions(log_file), agent_type=agent_type)
    if as_json:
        typer.echo(json.dumps(result.to_dict()))
    else:
        TodoflowConsole(debug=opts.get("debug", False)).print_summary(result.to_dict())
