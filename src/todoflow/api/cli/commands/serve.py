"""Serve command - Run the HTTP API with uvicorn."""

from typing import Optional

import typer

from todoflow.application.settings import get_settings


def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Port"),
):
    """Start the todoflow HTTP API."""
    import uvicorn

    from todoflow.api.server import create_app

    settings = get_settings()
    uvicorn.run(create_app(), host=host or settings.host, port=port or settings.port)
