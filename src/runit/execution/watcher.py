"""Lifecycle Watcher — polls a submitted job until it finishes.

State machine:

    .. code-block:: text

                 ┌────────────┐   active ≥ 1    ┌────────────┐
          ┌────▶ │  UNKNOWN   │ ──────────────▶ │   ACTIVE   │ ◀──┐
          │      └────────────┘ ◀────────────── └────────────┘ ───┘
          │        │   fetch error / zero counters    │
          └────────┘                                  │
                   │ succeeded ≥ 1      failed ≥ 1    │
                   ▼                        ▼         ▼
             ┌────────────┐          ┌────────────┐
             │ SUCCEEDED  │          │   FAILED   │      (terminal)
             └────────────┘          └────────────┘
                   │                        │
                   └──────────┬─────────────┘
                              ▼
                    CleanupGuarantor.cleanup()

Classification precedence is fixed: fetch error, active, succeeded, failed,
then the ``UNKNOWN`` catch-all. Only the two terminal states end the loop;
the orchestrator can report all-zero counters before the first pod starts.

Cleanup runs exactly once from a ``try/finally`` around the loop, including
when the loop raises or the task is cancelled.
"""

from __future__ import annotations

import asyncio

from runit.core.errors import StatusFetchFailed
from runit.core.logging import get_logger
from runit.execution._types import JobCounters, LifecycleStatus, Orchestrator, SubmissionHandle
from runit.execution.cleanup import CleanupGuarantor

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 1.0

_TICK_EVENTS = {
    LifecycleStatus.ACTIVE: "job.active",
    LifecycleStatus.SUCCEEDED: "job.finished",
    LifecycleStatus.FAILED: "job.failed",
    LifecycleStatus.UNKNOWN: "job.status_unrecognized",
}


def classify(counters: JobCounters | None) -> LifecycleStatus:
    """Collapse a status reading into a :class:`LifecycleStatus`.

    ``None`` stands for a failed fetch.

    Example:
        >>> classify(JobCounters(active=1, succeeded=1))
        <LifecycleStatus.ACTIVE: 'active'>
        >>> classify(JobCounters(succeeded=1, failed=1))
        <LifecycleStatus.SUCCEEDED: 'succeeded'>
    """
    if counters is None:
        return LifecycleStatus.UNKNOWN
    if counters.active >= 1:
        return LifecycleStatus.ACTIVE
    if counters.succeeded >= 1:
        return LifecycleStatus.SUCCEEDED
    if counters.failed >= 1:
        return LifecycleStatus.FAILED
    return LifecycleStatus.UNKNOWN


class LifecycleWatcher:
    """Poll one job at a fixed interval and clean it up when done.

    Parameters
    ----------
    orchestrator : Orchestrator
        Used for status reads. Each watch task should get its own.
    cleanup : CleanupGuarantor
        Invoked exactly once when :meth:`watch` exits.
    poll_interval : float
        Seconds slept between two non-terminal ticks. No backoff.
    """

    def __init__(
        self,
        orchestrator: Orchestrator,
        cleanup: CleanupGuarantor,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._orchestrator = orchestrator
        self._cleanup = cleanup
        self._poll_interval = poll_interval

    async def poll(self, handle: SubmissionHandle) -> LifecycleStatus:
        """Fetch and classify the job's status once."""
        try:
            counters = await self._orchestrator.get_job_status(handle.namespace, handle.name)
        except StatusFetchFailed as exc:
            logger.warning(
                "job.status_unavailable",
                job=handle.name,
                namespace=handle.namespace,
                **exc.to_dict(),
            )
            return classify(None)
        return classify(counters)

    async def watch(self, handle: SubmissionHandle) -> LifecycleStatus:
        """Poll until a terminal status, then clean up. Returns that status."""
        log = logger.bind(job=handle.name, namespace=handle.namespace)
        tick = 0
        try:
            while True:
                tick += 1
                status = await self.poll(handle)
                log.info(_TICK_EVENTS[status], tick=tick, status=status.value)
                if status.is_terminal:
                    return status
                await asyncio.sleep(self._poll_interval)
        finally:
            await self._cleanup.cleanup(handle)
