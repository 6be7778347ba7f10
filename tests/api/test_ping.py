"""Tests for GET / and GET /v1/ping."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from runit.api import create_app
from runit.core.errors import ConfigError
from runit.execution import StubOrchestrator


@pytest.fixture
def client(settings, stub_factory):
    return TestClient(create_app(settings, orchestrator_factory=stub_factory))


class TestHome:
    def test_greeting(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.text == "Run it!\n"


class TestPing:
    def test_counts_pods(self, client, stub, manifest):
        stub.jobs[("batch", "a")] = manifest()
        stub.jobs[("batch", "b")] = manifest()

        resp = client.get("/v1/ping")

        assert resp.status_code == 200
        assert resp.text == "2 pods running\n"
        assert stub.closed == 1

    def test_empty_cluster(self, client):
        assert client.get("/v1/ping").text == "0 pods running\n"

    def test_cluster_unreachable(self, client, stub):
        stub.fail_ping = True

        resp = client.get("/v1/ping")

        assert resp.status_code == 200
        assert resp.text == "can't talk to the cluster\n"
        assert stub.closed == 1

    def test_no_credentials(self, settings):
        def factory() -> StubOrchestrator:
            raise ConfigError("no kubeconfig at kubeconfig")

        client = TestClient(create_app(settings, orchestrator_factory=factory))

        assert client.get("/v1/ping").text == "can't talk to the cluster\n"
