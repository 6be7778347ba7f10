"""
CLI: ``runit submit`` and ``runit ping``: one-shot cluster commands.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from runit.cli.utils import build_settings, console, err_console, load_manifest
from runit.core.errors import ClusterUnreachable, ConfigError
from runit.core.logging import configure_logging
from runit.core.settings import RunitSettings
from runit.execution import (
    JobCounters,
    JobSupervisor,
    LifecycleStatus,
    StubOrchestrator,
)
from runit.execution.kube import ClusterClientFactory
from runit.execution.supervisor import OrchestratorFactory

# status sequence replayed by --dry-run
DRY_RUN_STATUSES = [JobCounters(), JobCounters(active=1), JobCounters(succeeded=1)]


def _settings(**overrides: object) -> RunitSettings:
    settings = build_settings(**overrides)
    configure_logging(level=settings.log_level, json_format=settings.json_logs)
    return settings


def _factory(settings: RunitSettings, dry_run: bool) -> OrchestratorFactory:
    if dry_run:
        stub = StubOrchestrator(statuses=DRY_RUN_STATUSES)
        return lambda: stub
    return ClusterClientFactory(settings)


def submit(
    manifest: Path = typer.Argument(..., exists=True, dir_okay=False, help="Job manifest (JSON or YAML)"),
    kubeconfig: str | None = typer.Option(None, "--kubeconfig", help="Path to the kubeconfig file."),
    in_cluster: bool | None = typer.Option(None, "--in-cluster/--out-of-cluster"),
    poll_interval: float | None = typer.Option(
        None, "--poll-interval", min=0, help="Seconds between polls [default: 1.0]"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use an in-memory cluster"),
) -> None:
    """Submit one job and supervise it to cleanup in the foreground.

    Exits 0 when the job succeeded, 1 when it failed or was not created.
    """
    descriptor = load_manifest(manifest)
    settings = _settings(kubeconfig=kubeconfig, in_cluster=in_cluster, poll_interval=poll_interval)
    supervisor = JobSupervisor(_factory(settings, dry_run), poll_interval=settings.poll_interval)

    async def _run() -> LifecycleStatus | None:
        handle = await supervisor.create(descriptor)
        if handle is None:
            return None
        console.print(f"[bold]job {handle.name}[/bold] created in {handle.namespace}")
        return await supervisor.watch(handle)

    status = asyncio.run(_run())
    if status is None:
        err_console.print(f"[bold red]failed to create job[/bold red] {descriptor['metadata']['name']}")
        raise typer.Exit(code=1)
    if status is LifecycleStatus.SUCCEEDED:
        console.print("[bold green]finished[/bold green]")
        return
    err_console.print(f"[bold red]{status.value}[/bold red]")
    raise typer.Exit(code=1)


def ping(
    kubeconfig: str | None = typer.Option(None, "--kubeconfig", help="Path to the kubeconfig file."),
    in_cluster: bool | None = typer.Option(None, "--in-cluster/--out-of-cluster"),
) -> None:
    """Count pods across all namespaces."""
    settings = _settings(kubeconfig=kubeconfig, in_cluster=in_cluster)

    async def _count() -> int:
        orchestrator = _factory(settings, dry_run=False)()
        try:
            return await orchestrator.count_pods()
        finally:
            orchestrator.close()

    try:
        count = asyncio.run(_count())
    except (ConfigError, ClusterUnreachable) as exc:
        err_console.print(f"[bold red]can't talk to the cluster[/bold red]: {exc.message}")
        raise typer.Exit(code=1) from exc
    console.print(f"{count} pods running")
