"""
FastAPI application factory.

``create_app()`` is the composition root of the HTTP service: it takes the
immutable settings, builds the cluster client factory and the job
supervisor once, and wires middleware, routers and error handling around
them.

Tags:
    runit, api, app-factory, composition-root, FastAPI

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from runit import __version__
from runit.api.deps import get_settings
from runit.api.middleware.auth import BasicAuthMiddleware
from runit.core.logging import get_logger
from runit.core.settings import RunitSettings
from runit.execution.kube import ClusterClientFactory
from runit.execution.supervisor import JobSupervisor, OrchestratorFactory

logger = get_logger("runit.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log application startup and shutdown."""
    settings: RunitSettings = app.state.settings
    logger.info(
        "api.starting",
        version=app.version,
        in_cluster=settings.in_cluster,
        auth=settings.auth_enabled,
        poll_interval=settings.poll_interval,
    )
    yield
    # the server cancels pending watchers on exit; each one still deletes its job
    logger.info("api.stopping", watchers=app.state.supervisor.active_count)


async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Catch-all for unhandled exceptions: plain-text 500."""
    logger.error("api.unhandled_error", path=request.url.path, exc_info=exc)
    return PlainTextResponse("internal server error\n", status_code=500)


def create_app(
    settings: RunitSettings | None = None,
    *,
    orchestrator_factory: OrchestratorFactory | None = None,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : RunitSettings | None
        Override settings (useful for testing). When ``None`` the cached
        singleton from :func:`get_settings` is used.
    orchestrator_factory : Callable[[], Orchestrator] | None
        Source of orchestrator clients. Defaults to a
        :class:`ClusterClientFactory` over ``settings``.
    """
    settings = settings or get_settings()
    factory = orchestrator_factory or ClusterClientFactory(settings)

    app = FastAPI(title="runit", version=__version__, lifespan=lifespan)

    app.state.settings = settings
    app.state.orchestrator_factory = factory
    app.state.supervisor = JobSupervisor(factory, poll_interval=settings.poll_interval)

    # ── Middleware ───────────────────────────────────────────────────
    app.add_middleware(
        BasicAuthMiddleware,
        username=settings.username,
        password=settings.password,
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from runit.api.routers import jobs, ping

    app.include_router(ping.router, tags=["ping"])
    app.include_router(jobs.router, tags=["jobs"])

    return app
