"""Cleanup Guarantor — best-effort removal of a finished job.

The delete uses foreground propagation, so the API server removes the
job's pods before the job itself. A failed delete is logged once and left
alone; the job may then leak in the cluster.
"""

from __future__ import annotations

from runit.core.errors import CleanupFailed, ResourceAbsent
from runit.core.logging import get_logger
from runit.execution._types import Orchestrator, SubmissionHandle

logger = get_logger(__name__)


class CleanupGuarantor:
    """Delete a submitted job exactly as often as it is asked to: once."""

    def __init__(self, orchestrator: Orchestrator) -> None:
        self._orchestrator = orchestrator

    async def cleanup(self, handle: SubmissionHandle) -> bool:
        """Delete the job. Returns ``True`` when it is gone afterwards.

        A job that is already absent counts as removed. Never raises
        ``CleanupFailed``.
        """
        log = logger.bind(job=handle.name, namespace=handle.namespace)
        log.info("job.cleaning_up")
        try:
            await self._orchestrator.delete_job(handle.namespace, handle.name)
        except ResourceAbsent:
            log.warning("job.already_removed")
            return True
        except CleanupFailed as exc:
            log.error("job.remove_failed", **exc.to_dict())
            return False

        log.info("job.removed")
        return True
