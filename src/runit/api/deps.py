"""
FastAPI dependency injection — settings and the per-app supervisor.

Usage in routers::

    from runit.api.deps import Supervisor

    @router.post("/v1/jobs")
    async def create_job(supervisor: Supervisor):
        ...

The supervisor and the orchestrator factory are built once by
:func:`runit.api.app.create_app` and stashed on ``app.state``; these
dependencies only read them back.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from runit.core.settings import RunitSettings
from runit.execution.supervisor import JobSupervisor, OrchestratorFactory


@lru_cache(maxsize=1)
def get_settings() -> RunitSettings:
    """Cached settings, loaded once per process."""
    return RunitSettings()


def get_supervisor(request: Request) -> JobSupervisor:
    return request.app.state.supervisor


def get_orchestrator_factory(request: Request) -> OrchestratorFactory:
    return request.app.state.orchestrator_factory


# ── Convenience type aliases ─────────────────────────────────────────────

Supervisor = Annotated[JobSupervisor, Depends(get_supervisor)]
ClientFactory = Annotated[OrchestratorFactory, Depends(get_orchestrator_factory)]
