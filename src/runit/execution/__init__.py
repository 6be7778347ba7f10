"""Job lifecycle supervision.

Modules:
    _types      - Orchestrator protocol, SubmissionHandle, JobCounters, LifecycleStatus
    identity    - collision-free job names
    submitter   - Submitter (create-job, log rejection)
    watcher     - classify() + LifecycleWatcher (poll loop, scoped cleanup)
    cleanup     - CleanupGuarantor (foreground delete, best effort)
    supervisor  - JobSupervisor (name → submit → detached watch task)
    kube        - KubeOrchestrator + ClusterClientFactory (kubernetes client)
    stub        - StubOrchestrator (in-memory, scripted statuses)

Tags:
    runit, execution, supervisor, kubernetes, jobs
"""

from runit.execution._types import (
    DEFAULT_NAMESPACE,
    JobCounters,
    LifecycleStatus,
    Orchestrator,
    SubmissionHandle,
    WorkDescriptor,
)
from runit.execution.cleanup import CleanupGuarantor
from runit.execution.identity import assign_unique_name, descriptor_namespace, unique_name
from runit.execution.stub import StubOrchestrator
from runit.execution.submitter import Submitter
from runit.execution.supervisor import JobSupervisor
from runit.execution.watcher import LifecycleWatcher, classify

__all__ = [
    "DEFAULT_NAMESPACE",
    "CleanupGuarantor",
    "JobCounters",
    "JobSupervisor",
    "LifecycleStatus",
    "LifecycleWatcher",
    "Orchestrator",
    "StubOrchestrator",
    "SubmissionHandle",
    "Submitter",
    "WorkDescriptor",
    "assign_unique_name",
    "classify",
    "descriptor_namespace",
    "unique_name",
]
