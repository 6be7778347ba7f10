"""Kubernetes orchestrator — the real cluster behind the supervisor.

``ClusterClientFactory`` resolves credentials once (in-cluster service
account or a kubeconfig file, per :class:`~runit.core.settings.RunitSettings`)
and hands out a fresh :class:`KubeOrchestrator` per caller. Each watcher
task owns its own ``ApiClient``; only the loaded ``Configuration`` is shared,
and it is never mutated after loading.

The official ``kubernetes`` client is synchronous. Every call goes through
``asyncio.to_thread`` so a slow API server never blocks the event loop.

    .. code-block:: text

        KubeOrchestrator
        ├── create_job(ns, manifest)   → BatchV1Api.create_namespaced_job
        ├── get_job_status(ns, name)   → BatchV1Api.read_namespaced_job_status
        ├── delete_job(ns, name)       → BatchV1Api.delete_namespaced_job
        │                                 (propagation_policy="Foreground")
        └── count_pods()               → CoreV1Api.list_pod_for_all_namespaces

Error mapping:
    ApiException(status=404) on delete  → ResourceAbsent
    ApiException(status=N)              → <call error>(status=N, reason=…)
    urllib3 HTTPError / OSError         → <call error>(status=None)
"""

from __future__ import annotations

import asyncio
import threading

import urllib3
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from runit.core.errors import (
    CleanupFailed,
    ClusterUnreachable,
    ConfigError,
    OrchestratorError,
    ResourceAbsent,
    StatusFetchFailed,
    SubmissionRejected,
)
from runit.core.logging import get_logger
from runit.core.settings import RunitSettings
from runit.execution._types import JobCounters, SubmissionHandle, WorkDescriptor

logger = get_logger(__name__)

DELETE_PROPAGATION = "Foreground"

_TRANSPORT_ERRORS = (urllib3.exceptions.HTTPError, OSError)


def _wrap(error_cls: type[OrchestratorError], action: str, exc: Exception) -> OrchestratorError:
    """Convert a client exception into a runit orchestrator error."""
    if isinstance(exc, ApiException):
        return error_cls(
            f"{action} failed: {exc.status} {exc.reason}",
            status=exc.status,
            reason=exc.reason,
            cause=exc,
        )
    return error_cls(f"{action} failed: {exc}", cause=exc)


def load_configuration(settings: RunitSettings) -> client.Configuration:
    """Resolve cluster credentials into a client ``Configuration``.

    Raises:
        ConfigError: no usable service account or kubeconfig.
    """
    configuration = client.Configuration()
    try:
        if settings.in_cluster:
            config.load_incluster_config(client_configuration=configuration)
        else:
            config.load_kube_config(
                config_file=settings.kubeconfig,
                client_configuration=configuration,
            )
    except (config.ConfigException, OSError) as exc:
        source = "in-cluster service account" if settings.in_cluster else settings.kubeconfig
        raise ConfigError(
            f"cannot load cluster credentials from {source}: {exc}",
            cause=exc,
        ) from exc
    logger.debug("cluster.config_loaded", in_cluster=settings.in_cluster, host=configuration.host)
    return configuration


class KubeOrchestrator:
    """:class:`~runit.execution._types.Orchestrator` over a real cluster."""

    def __init__(self, api_client: client.ApiClient) -> None:
        self._api_client = api_client
        self._batch = client.BatchV1Api(api_client)
        self._core = client.CoreV1Api(api_client)

    async def create_job(self, namespace: str, descriptor: WorkDescriptor) -> SubmissionHandle:
        try:
            job = await asyncio.to_thread(
                self._batch.create_namespaced_job, namespace, descriptor,
            )
        except (ApiException, *_TRANSPORT_ERRORS) as exc:
            raise _wrap(SubmissionRejected, "create job", exc).with_context(namespace=namespace) from exc
        return SubmissionHandle(
            name=job.metadata.name,
            namespace=job.metadata.namespace or namespace,
            uid=job.metadata.uid,
        )

    async def get_job_status(self, namespace: str, name: str) -> JobCounters:
        try:
            job = await asyncio.to_thread(
                self._batch.read_namespaced_job_status, name, namespace,
            )
        except (ApiException, *_TRANSPORT_ERRORS) as exc:
            raise _wrap(StatusFetchFailed, "read job status", exc).with_context(
                job=name, namespace=namespace,
            ) from exc
        return JobCounters.from_status(job.status)

    async def delete_job(self, namespace: str, name: str) -> None:
        options = client.V1DeleteOptions(propagation_policy=DELETE_PROPAGATION)
        try:
            await asyncio.to_thread(
                self._batch.delete_namespaced_job, name, namespace, body=options,
            )
        except ApiException as exc:
            error_cls = ResourceAbsent if exc.status == 404 else CleanupFailed
            raise _wrap(error_cls, "delete job", exc).with_context(job=name, namespace=namespace) from exc
        except _TRANSPORT_ERRORS as exc:
            raise _wrap(CleanupFailed, "delete job", exc).with_context(job=name, namespace=namespace) from exc

    async def count_pods(self) -> int:
        try:
            pods = await asyncio.to_thread(self._core.list_pod_for_all_namespaces)
        except (ApiException, *_TRANSPORT_ERRORS) as exc:
            raise _wrap(ClusterUnreachable, "list pods", exc) from exc
        return len(pods.items)

    def close(self) -> None:
        self._api_client.close()


class ClusterClientFactory:
    """Build :class:`KubeOrchestrator` instances from immutable settings.

    Credentials are loaded on first use and cached; a failed load is not
    cached, so a later call can succeed once the kubeconfig appears.
    Calling the factory is safe from several tasks at once.
    """

    def __init__(self, settings: RunitSettings) -> None:
        self._settings = settings
        self._configuration: client.Configuration | None = None
        self._lock = threading.Lock()

    @property
    def configuration(self) -> client.Configuration:
        with self._lock:
            if self._configuration is None:
                self._configuration = load_configuration(self._settings)
            return self._configuration

    def __call__(self) -> KubeOrchestrator:
        """Return a new orchestrator with its own ``ApiClient``.

        Raises:
            ConfigError: credentials cannot be resolved.
        """
        return KubeOrchestrator(client.ApiClient(self.configuration))

    def __repr__(self) -> str:
        mode = "in-cluster" if self._settings.in_cluster else self._settings.kubeconfig
        return f"ClusterClientFactory({mode!r})"
