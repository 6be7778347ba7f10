"""
Ping router — liveness and cluster reachability.

Endpoints:
    GET /          Static greeting
    GET /v1/ping   Count pods across all namespaces
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from runit.api.deps import ClientFactory
from runit.core.errors import ClusterUnreachable, ConfigError
from runit.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

UNREACHABLE = "can't talk to the cluster\n"


@router.get("/", response_class=PlainTextResponse)
async def home() -> str:
    return "Run it!\n"


@router.get("/v1/ping", response_class=PlainTextResponse)
async def ping(factory: ClientFactory) -> str:
    """Report how many pods the cluster is running."""
    try:
        orchestrator = factory()
    except ConfigError as exc:
        logger.error("cluster.unreachable", **exc.to_dict())
        return UNREACHABLE

    try:
        count = await orchestrator.count_pods()
    except ClusterUnreachable as exc:
        logger.error("cluster.unreachable", **exc.to_dict())
        return UNREACHABLE
    finally:
        orchestrator.close()

    return f"{count} pods running\n"
