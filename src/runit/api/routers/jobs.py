"""
Jobs router — accept a Job manifest and hand it to the supervisor.

Endpoints:
    POST /v1/jobs   Submit a ``batch/v1`` Job manifest (JSON body)

The response is plain text and only says whether the job was created.
Progress, the final outcome and cleanup are reported in the logs, keyed by
the generated job name the response echoes back.

Tags:
    runit, api, jobs, submission
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from runit.api.deps import Supervisor
from runit.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/jobs")


def _is_manifest(body: object) -> bool:
    """True when the nested objects the name rewrite touches are mappings."""
    if not isinstance(body, dict):
        return False
    metadata = body.get("metadata", {})
    spec = body.get("spec", {})
    if not isinstance(metadata, dict) or not isinstance(spec, dict):
        return False
    template = spec.get("template", {})
    return isinstance(template, dict) and isinstance(template.get("metadata", {}), dict)


@router.post("", response_class=PlainTextResponse)
async def create_job(request: Request, supervisor: Supervisor) -> str:
    """Submit a job and return before it runs.

    Example:
        POST /v1/jobs
        {"metadata": {"name": "etl-batch", "namespace": "batch"},
         "spec": {"template": {"spec": {...}}}}

        Response:
        job etl-batch-3f0c…-… created
    """
    try:
        descriptor = await request.json()
    except ValueError:
        logger.warning("job.bad_request", client=request.client.host if request.client else None)
        return "failed to parse request body\n"
    if not _is_manifest(descriptor):
        logger.warning("job.bad_request", body_type=type(descriptor).__name__)
        return "failed to parse request body\n"

    handle = await supervisor.submit(descriptor)
    if handle is None:
        return f"failed to create job {descriptor['metadata']['name']}\n"
    return f"job {handle.name} created\n"
