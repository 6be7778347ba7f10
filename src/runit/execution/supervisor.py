"""Job supervisor — name, submit, and hand off to a detached watcher.

``JobSupervisor.submit`` is the entry point of the HTTP layer. It returns as
soon as the orchestrator has accepted the job; watching and cleanup
continue in a background asyncio task whose outcome is visible only in
the logs.

    .. code-block:: text

        submit(descriptor)
          ├── assign_unique_name(descriptor)      ← mutates in place
          ├── Submitter.submit(ns, descriptor)
          │     └── rejected → log, return None   (no task, no delete)
          └── asyncio.create_task(watch(handle))
                ├── own orchestrator from the factory
                ├── LifecycleWatcher.watch(handle)
                │     └── finally: CleanupGuarantor.cleanup(handle)
                └── orchestrator.close()

The supervisor keeps strong references to its running tasks so the event
loop cannot garbage-collect them mid-poll. It exposes no cancel or join:
a watcher runs until a terminal state or until the event loop shuts down,
which cancels it and so still deletes the job.

The CLI uses ``create`` and ``watch`` directly to supervise one job in the
foreground.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable

from runit.core.errors import ConfigError
from runit.core.logging import get_logger
from runit.execution._types import LifecycleStatus, Orchestrator, SubmissionHandle, WorkDescriptor
from runit.execution.cleanup import CleanupGuarantor
from runit.execution.identity import assign_unique_name, descriptor_namespace
from runit.execution.submitter import Submitter
from runit.execution.watcher import DEFAULT_POLL_INTERVAL, LifecycleWatcher

logger = get_logger(__name__)

OrchestratorFactory = Callable[[], Orchestrator]


class JobSupervisor:
    """Fire-and-forget lifecycle supervision for submitted jobs.

    Parameters
    ----------
    orchestrator_factory : Callable[[], Orchestrator]
        Called once per submission and once per watcher task.
    poll_interval : float
        Seconds between two status polls of a watched job.
    """

    def __init__(
        self,
        orchestrator_factory: OrchestratorFactory,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._factory = orchestrator_factory
        self._poll_interval = poll_interval
        self._tasks: set[asyncio.Task[LifecycleStatus]] = set()

    async def submit(self, descriptor: WorkDescriptor) -> SubmissionHandle | None:
        """Name and create the job, then start watching it in the background.

        Returns the handle of the accepted job, or ``None`` when it was not
        created. In both cases ``descriptor`` carries the generated name.
        """
        handle = await self.create(descriptor)
        if handle is not None:
            self._spawn(handle)
        return handle

    async def create(self, descriptor: WorkDescriptor) -> SubmissionHandle | None:
        """Name and create the job without watching it."""
        name = assign_unique_name(descriptor)
        namespace = descriptor_namespace(descriptor)

        try:
            orchestrator = self._factory()
        except ConfigError as exc:
            logger.error("job.create_failed", job=name, namespace=namespace, **exc.to_dict())
            return None

        try:
            handle = await Submitter(orchestrator).submit(namespace, descriptor)
        finally:
            orchestrator.close()
        return handle

    async def watch(self, handle: SubmissionHandle) -> LifecycleStatus:
        """Watch ``handle`` to a terminal state in the current task, then clean up."""
        orchestrator = self._factory()
        try:
            watcher = LifecycleWatcher(
                orchestrator,
                CleanupGuarantor(orchestrator),
                poll_interval=self._poll_interval,
            )
            return await watcher.watch(handle)
        finally:
            orchestrator.close()

    @property
    def active_count(self) -> int:
        """Number of watcher tasks still polling."""
        return sum(1 for t in self._tasks if not t.done())

    def _spawn(self, handle: SubmissionHandle) -> None:
        task = asyncio.create_task(
            self.watch(handle),
            name=f"watch:{handle.namespace}/{handle.name}",
        )
        self._tasks.add(task)
        task.add_done_callback(functools.partial(self._on_done, handle))
        logger.debug("job.watch_started", job=handle.name, namespace=handle.namespace)

    def _on_done(self, handle: SubmissionHandle, task: asyncio.Task[LifecycleStatus]) -> None:
        self._tasks.discard(task)
        log = logger.bind(job=handle.name, namespace=handle.namespace, task=task.get_name())
        if task.cancelled():
            log.warning("job.watch_cancelled")
            return
        exc = task.exception()
        if exc is not None:
            # the job may still exist if the crash came before cleanup
            log.error("job.watch_crashed", exc_info=exc)
