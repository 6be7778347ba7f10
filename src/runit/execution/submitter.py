"""Submitter — hands a named descriptor to the orchestrator.

Only jobs the orchestrator acknowledges become eligible for watching and
cleanup. A rejected submission is logged against the attempted name and
reported to the caller as ``None``; it is never retried here.
"""

from __future__ import annotations

from runit.core.errors import SubmissionRejected
from runit.core.logging import get_logger
from runit.execution._types import Orchestrator, SubmissionHandle, WorkDescriptor

logger = get_logger(__name__)


class Submitter:
    """Create jobs through an :class:`Orchestrator`."""

    def __init__(self, orchestrator: Orchestrator) -> None:
        self._orchestrator = orchestrator

    async def submit(self, namespace: str, descriptor: WorkDescriptor) -> SubmissionHandle | None:
        """Create the job and return its handle, or ``None`` if rejected."""
        attempted = (descriptor.get("metadata") or {}).get("name")
        try:
            handle = await self._orchestrator.create_job(namespace, descriptor)
        except SubmissionRejected as exc:
            logger.error(
                "job.create_failed",
                job=attempted,
                namespace=namespace,
                **exc.to_dict(),
            )
            return None

        logger.info("job.created", job=handle.name, namespace=handle.namespace, uid=handle.uid)
        return handle
