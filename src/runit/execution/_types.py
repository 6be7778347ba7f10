"""Types and protocols shared by the job lifecycle supervisor.

- Orchestrator: Protocol for the four cluster calls the supervisor needs
- WorkDescriptor: the Job manifest as received (an opaque JSON object)
- SubmissionHandle: reference to an accepted Job (name + namespace)
- JobCounters: the active/succeeded/failed counters of a Job status
- LifecycleStatus: the four-way classification of a poll tick

Architecture:

    .. code-block:: text

        WorkDescriptor ──create_job──▶ Orchestrator ──▶ SubmissionHandle
                                            │
        SubmissionHandle ──get_job_status──▶│──▶ JobCounters ──classify──▶ LifecycleStatus
                                            │
        SubmissionHandle ──delete_job──────▶│  (foreground propagation)

Design Notes:
    The Orchestrator protocol is async. The Kubernetes implementation runs
    the blocking client in a worker thread; the stub implementation answers
    from memory. Every call raises a subclass of
    ``runit.core.errors.OrchestratorError`` on failure and nothing else.

Tags:
    runit, execution, types, orchestrator-protocol
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

WorkDescriptor = dict[str, Any]
"""A ``batch/v1`` Job manifest, already decoded from JSON."""

DEFAULT_NAMESPACE = "default"


# ---------------------------------------------------------------------------
# Handles and status
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SubmissionHandle:
    """The supervisor's reference to a Job the orchestrator accepted.

    ``(name, namespace)`` uniquely identifies the Job for the lifetime of
    its watch loop. ``uid`` is informational and only used in logs.
    """

    name: str
    namespace: str
    uid: str | None = None


@dataclass(frozen=True)
class JobCounters:
    """Pod counters reported in a Job's status at poll time."""

    active: int = 0
    succeeded: int = 0
    failed: int = 0

    @classmethod
    def from_status(cls, status: Any) -> JobCounters:
        """Build from a ``V1JobStatus``-like object; ``None`` counters read as 0."""
        if status is None:
            return cls()
        return cls(
            active=getattr(status, "active", None) or 0,
            succeeded=getattr(status, "succeeded", None) or 0,
            failed=getattr(status, "failed", None) or 0,
        )


class LifecycleStatus(str, Enum):
    """Classification of one poll tick.

    ``UNKNOWN`` is a real state, not a default branch: it covers both a
    failed status fetch and counters that match no known pattern. Only
    ``SUCCEEDED`` and ``FAILED`` end supervision.
    """

    ACTIVE = "active"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        return self in (LifecycleStatus.SUCCEEDED, LifecycleStatus.FAILED)


# ---------------------------------------------------------------------------
# Orchestrator protocol
# ---------------------------------------------------------------------------

@runtime_checkable
class Orchestrator(Protocol):
    """The cluster surface consumed by runit.

    Implementations:
        KubeOrchestrator:  real cluster via the ``kubernetes`` client
        StubOrchestrator:  in-memory, scripted statuses (tests, dry runs)
    """

    async def create_job(self, namespace: str, descriptor: WorkDescriptor) -> SubmissionHandle:
        """Create the Job. Raises ``SubmissionRejected``."""
        ...

    async def get_job_status(self, namespace: str, name: str) -> JobCounters:
        """Read the Job's counters. Raises ``StatusFetchFailed``."""
        ...

    async def delete_job(self, namespace: str, name: str) -> None:
        """Delete the Job and its pods (foreground). Raises ``CleanupFailed``."""
        ...

    async def count_pods(self) -> int:
        """Count pods across all namespaces. Raises ``ClusterUnreachable``."""
        ...

    def close(self) -> None:
        """Release the underlying client."""
        ...


__all__ = [
    "DEFAULT_NAMESPACE",
    "JobCounters",
    "LifecycleStatus",
    "Orchestrator",
    "SubmissionHandle",
    "WorkDescriptor",
]
