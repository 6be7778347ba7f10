"""
CLI: ``runit serve`` — start the HTTP API.
"""

from __future__ import annotations

import typer

from runit.cli.utils import build_settings, console
from runit.core.logging import configure_logging

# idle connection timeout, seconds
KEEP_ALIVE_TIMEOUT = 10


def serve(
    kubeconfig: str | None = typer.Option(
        None, "--kubeconfig", help="Absolute path to the kubeconfig file."
    ),
    in_cluster: bool | None = typer.Option(
        None, "--in-cluster/--out-of-cluster", help="Running inside Kubernetes cluster."
    ),
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """Start the runit REST API server."""
    import uvicorn

    from runit.api import create_app

    settings = build_settings(
        kubeconfig=kubeconfig,
        in_cluster=in_cluster,
        host=host,
        port=port,
        log_level=log_level,
    )
    configure_logging(level=settings.log_level, json_format=settings.json_logs)

    console.print(f"[bold green]Starting runit API[/bold green] on {settings.host}:{settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_keep_alive=KEEP_ALIVE_TIMEOUT,
    )
