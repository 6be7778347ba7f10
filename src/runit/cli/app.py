"""
Root Typer application for the runit CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from runit.cli.jobs import ping, submit
from runit.cli.serve import serve

app = Typer(
    name="runit",
    help="Submit Kubernetes Jobs and clean them up when they finish.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from runit import __version__

        typer.echo(f"runit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """runit: submit Kubernetes Jobs and clean them up."""


app.command("serve")(serve)
app.command("submit")(submit)
app.command("ping")(ping)
