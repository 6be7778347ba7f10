"""
CLI utility helpers: settings overrides, manifest loading, console output.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console

from runit.core.settings import RunitSettings

console = Console()
err_console = Console(stderr=True)


def build_settings(**overrides: Any) -> RunitSettings:
    """Settings from env/.env, with non-``None`` CLI options on top."""
    return RunitSettings(**{k: v for k, v in overrides.items() if v is not None})


def load_manifest(path: Path) -> dict[str, Any]:
    """Read a Job manifest from a JSON or YAML file.

    Exits with code 2 when the file does not hold a single mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        err_console.print(f"[bold red]Error[/bold red]: cannot read {path}: {exc}")
        raise typer.Exit(code=2) from exc

    try:
        if path.suffix == ".json":
            manifest = json.loads(text)
        else:
            manifest = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        err_console.print(f"[bold red]Error[/bold red]: {path} is not a valid manifest: {exc}")
        raise typer.Exit(code=2) from exc

    if not isinstance(manifest, dict):
        err_console.print(f"[bold red]Error[/bold red]: {path} must contain one Job object")
        raise typer.Exit(code=2)
    return manifest
