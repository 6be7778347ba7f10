"""Tests for runit.execution.kube — kubernetes client adapter.

The ``kubernetes`` API objects are replaced with mocks; no cluster is
contacted.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import urllib3
from kubernetes import config
from kubernetes.client.exceptions import ApiException

from runit.core.errors import (
    CleanupFailed,
    ClusterUnreachable,
    ConfigError,
    ErrorCategory,
    ResourceAbsent,
    StatusFetchFailed,
    SubmissionRejected,
)
from runit.core.settings import RunitSettings
from runit.execution import JobCounters, Orchestrator, StubOrchestrator, SubmissionHandle
from runit.execution.kube import ClusterClientFactory, KubeOrchestrator


def _job(name: str = "etl-batch-1", namespace: str = "batch", **status) -> SimpleNamespace:
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, namespace=namespace, uid="uid-1"),
        status=SimpleNamespace(**{"active": None, "succeeded": None, "failed": None, **status}),
    )


@pytest.fixture
def orchestrator() -> KubeOrchestrator:
    orch = KubeOrchestrator(MagicMock())
    orch._batch = MagicMock()
    orch._core = MagicMock()
    return orch


class TestCreateJob:
    @pytest.mark.asyncio
    async def test_returns_handle(self, orchestrator):
        orchestrator._batch.create_namespaced_job.return_value = _job()
        body = {"metadata": {"name": "etl-batch-1"}}

        handle = await orchestrator.create_job("batch", body)

        assert handle == SubmissionHandle(name="etl-batch-1", namespace="batch", uid="uid-1")
        orchestrator._batch.create_namespaced_job.assert_called_once_with("batch", body)

    @pytest.mark.asyncio
    async def test_api_rejection(self, orchestrator):
        orchestrator._batch.create_namespaced_job.side_effect = ApiException(
            status=422, reason="Unprocessable Entity"
        )

        with pytest.raises(SubmissionRejected) as excinfo:
            await orchestrator.create_job("batch", {})

        assert excinfo.value.status == 422
        assert excinfo.value.category is ErrorCategory.VALIDATION
        assert excinfo.value.retryable is False
        assert excinfo.value.context == {"namespace": "batch"}

    @pytest.mark.asyncio
    async def test_forbidden(self, orchestrator):
        orchestrator._batch.create_namespaced_job.side_effect = ApiException(status=403, reason="Forbidden")

        with pytest.raises(SubmissionRejected) as excinfo:
            await orchestrator.create_job("batch", {})

        assert excinfo.value.category is ErrorCategory.AUTH


class TestGetJobStatus:
    @pytest.mark.asyncio
    async def test_counters(self, orchestrator):
        orchestrator._batch.read_namespaced_job_status.return_value = _job(active=1, failed=2)

        counters = await orchestrator.get_job_status("batch", "etl-batch-1")

        assert counters == JobCounters(active=1, succeeded=0, failed=2)
        orchestrator._batch.read_namespaced_job_status.assert_called_once_with("etl-batch-1", "batch")

    @pytest.mark.asyncio
    async def test_transport_error(self, orchestrator):
        orchestrator._batch.read_namespaced_job_status.side_effect = urllib3.exceptions.MaxRetryError(
            None, "/apis/batch/v1/namespaces/batch/jobs/etl-batch-1/status"
        )

        with pytest.raises(StatusFetchFailed) as excinfo:
            await orchestrator.get_job_status("batch", "etl-batch-1")

        assert excinfo.value.status is None
        assert excinfo.value.retryable is True
        assert excinfo.value.category is ErrorCategory.NETWORK
        assert excinfo.value.to_dict()["context"] == {"job": "etl-batch-1", "namespace": "batch"}


class TestDeleteJob:
    @pytest.mark.asyncio
    async def test_foreground_propagation(self, orchestrator):
        await orchestrator.delete_job("batch", "etl-batch-1")

        call = orchestrator._batch.delete_namespaced_job.call_args
        assert call.args == ("etl-batch-1", "batch")
        assert call.kwargs["body"].propagation_policy == "Foreground"

    @pytest.mark.asyncio
    async def test_not_found_is_resource_absent(self, orchestrator):
        orchestrator._batch.delete_namespaced_job.side_effect = ApiException(status=404, reason="Not Found")

        with pytest.raises(ResourceAbsent) as excinfo:
            await orchestrator.delete_job("batch", "etl-batch-1")

        assert excinfo.value.context == {"job": "etl-batch-1", "namespace": "batch"}

    @pytest.mark.asyncio
    async def test_server_error(self, orchestrator):
        orchestrator._batch.delete_namespaced_job.side_effect = ApiException(status=500, reason="Internal")

        with pytest.raises(CleanupFailed) as excinfo:
            await orchestrator.delete_job("batch", "etl-batch-1")

        assert not isinstance(excinfo.value, ResourceAbsent)
        assert excinfo.value.retryable is True

    @pytest.mark.asyncio
    async def test_connection_error(self, orchestrator):
        orchestrator._batch.delete_namespaced_job.side_effect = ConnectionRefusedError()

        with pytest.raises(CleanupFailed):
            await orchestrator.delete_job("batch", "etl-batch-1")


class TestCountPods:
    @pytest.mark.asyncio
    async def test_counts_items(self, orchestrator):
        orchestrator._core.list_pod_for_all_namespaces.return_value = SimpleNamespace(items=[1, 2, 3])
        assert await orchestrator.count_pods() == 3

    @pytest.mark.asyncio
    async def test_unreachable(self, orchestrator):
        orchestrator._core.list_pod_for_all_namespaces.side_effect = ApiException(status=401, reason="Unauthorized")
        with pytest.raises(ClusterUnreachable):
            await orchestrator.count_pods()


class TestClusterClientFactory:
    def test_out_of_cluster_uses_kubeconfig(self):
        settings = RunitSettings(in_cluster=False, kubeconfig="/etc/runit/kubeconfig")
        with patch("runit.execution.kube.config.load_kube_config") as load:
            orchestrator = ClusterClientFactory(settings)()

        assert isinstance(orchestrator, KubeOrchestrator)
        assert load.call_args.kwargs["config_file"] == "/etc/runit/kubeconfig"
        orchestrator.close()

    def test_in_cluster(self):
        settings = RunitSettings(in_cluster=True)
        with (
            patch("runit.execution.kube.config.load_incluster_config") as load_incluster,
            patch("runit.execution.kube.config.load_kube_config") as load_kube,
        ):
            ClusterClientFactory(settings)().close()

        load_incluster.assert_called_once()
        load_kube.assert_not_called()

    def test_configuration_loaded_once(self):
        factory = ClusterClientFactory(RunitSettings())
        with patch("runit.execution.kube.config.load_kube_config") as load:
            first, second = factory(), factory()

        assert load.call_count == 1
        assert first._api_client is not second._api_client
        first.close()
        second.close()

    def test_missing_credentials(self):
        factory = ClusterClientFactory(RunitSettings(kubeconfig="/nonexistent/kubeconfig"))
        with patch(
            "runit.execution.kube.config.load_kube_config",
            side_effect=config.ConfigException("Invalid kube-config file. No configuration found."),
        ):
            with pytest.raises(ConfigError, match="/nonexistent/kubeconfig"):
                factory()


class TestOrchestratorProtocol:
    def test_kube_orchestrator_conforms(self, orchestrator):
        assert isinstance(orchestrator, Orchestrator)

    def test_stub_conforms(self):
        assert isinstance(StubOrchestrator(), Orchestrator)

    def test_incomplete_client_rejected(self):
        class _ReadOnly:
            async def get_job_status(self, namespace, name):
                return JobCounters()

        assert not isinstance(_ReadOnly(), Orchestrator)
