"""In-memory orchestrator for tests and dry runs.

No cluster is contacted. Every created job replays a scripted sequence of
status readings; once the script is exhausted the last reading repeats.

    .. code-block:: text

        StubOrchestrator behavior:

        create_job(ns, manifest)
          ├── fail_submit=True → SubmissionRejected(status=422)
          └── otherwise        → job stored, handle returned

        get_job_status(ns, name)
          └── next item of the job's script
              (a StatusFetchFailed item is raised instead of returned)

        delete_job(ns, name)
          ├── fail_delete=True  → CleanupFailed(status=500)
          ├── unknown job       → ResourceAbsent(status=404)
          └── otherwise         → job removed

        Track usage:
          stub.created         → names passed to create_job
          stub.status_calls    → name → number of status reads
          stub.deleted         → (namespace, name) of every delete call

Example:
    >>> stub = StubOrchestrator(statuses=[JobCounters(active=1), JobCounters(succeeded=1)])
    >>> handle = await stub.create_job("default", manifest)
    >>> await stub.get_job_status("default", handle.name)
    JobCounters(active=1, succeeded=0, failed=0)
"""

from __future__ import annotations

import copy
import uuid
from collections import Counter
from collections.abc import Iterable, Sequence

from runit.core.errors import (
    CleanupFailed,
    ClusterUnreachable,
    ResourceAbsent,
    StatusFetchFailed,
    SubmissionRejected,
)
from runit.execution._types import JobCounters, SubmissionHandle, WorkDescriptor

StatusReading = JobCounters | StatusFetchFailed


class StubOrchestrator:
    """:class:`~runit.execution._types.Orchestrator` backed by dicts.

    One instance can be handed out by several factories at once; the
    recorded calls are then shared, which is what tests want to assert on.
    """

    def __init__(self, statuses: Sequence[StatusReading] | None = None) -> None:
        self.statuses: list[StatusReading] = list(statuses or [JobCounters(succeeded=1)])
        self.jobs: dict[tuple[str, str], WorkDescriptor] = {}
        self.scripts: dict[str, list[StatusReading]] = {}

        self.created: list[str] = []
        self.status_calls: Counter[str] = Counter()
        self.deleted: list[tuple[str, str]] = []
        self.closed: int = 0

        # Inject failures
        self.fail_submit: bool = False
        self.fail_delete: bool = False
        self.fail_ping: bool = False

    def script(self, name: str, statuses: Iterable[StatusReading]) -> None:
        """Override the status sequence for one job."""
        self.scripts[name] = list(statuses)

    async def create_job(self, namespace: str, descriptor: WorkDescriptor) -> SubmissionHandle:
        name = descriptor["metadata"]["name"]
        if self.fail_submit:
            raise SubmissionRejected(
                f"create job failed: 422 Unprocessable Entity ({name})",
                status=422,
                reason="Unprocessable Entity",
            )
        self.created.append(name)
        self.jobs[(namespace, name)] = copy.deepcopy(descriptor)
        self.scripts.setdefault(name, list(self.statuses))
        return SubmissionHandle(name=name, namespace=namespace, uid=str(uuid.uuid4()))

    async def get_job_status(self, namespace: str, name: str) -> JobCounters:
        self.status_calls[name] += 1
        script = self.scripts.get(name)
        if not script:
            raise StatusFetchFailed(
                f"read job status failed: 404 Not Found ({name})",
                status=404,
                reason="Not Found",
            )
        reading = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(reading, StatusFetchFailed):
            raise reading
        return reading

    async def delete_job(self, namespace: str, name: str) -> None:
        self.deleted.append((namespace, name))
        if self.fail_delete:
            raise CleanupFailed("delete job failed: 500 Internal Server Error", status=500)
        if self.jobs.pop((namespace, name), None) is None:
            raise ResourceAbsent("delete job failed: 404 Not Found", status=404, reason="Not Found")

    async def count_pods(self) -> int:
        if self.fail_ping:
            raise ClusterUnreachable("list pods failed: connection refused")
        return len(self.jobs)

    def close(self) -> None:
        self.closed += 1
