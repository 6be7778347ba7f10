"""
Shared pytest fixtures for runit tests.

This module provides:
- A scripted in-memory orchestrator (``stub``) and a factory returning it
- A minimal ``batch/v1`` Job manifest builder
- structlog reset between tests so log-capturing tests stay isolated
"""

import sys
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

# Ensure runit package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from runit.core.settings import RunitSettings
from runit.execution import JobSupervisor, StubOrchestrator


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    yield
    structlog.reset_defaults()


@pytest.fixture
def stub() -> StubOrchestrator:
    return StubOrchestrator()


@pytest.fixture
def stub_factory(stub: StubOrchestrator) -> Callable[[], StubOrchestrator]:
    return lambda: stub


@pytest.fixture
def supervisor(stub_factory: Callable[[], StubOrchestrator]) -> JobSupervisor:
    return JobSupervisor(stub_factory, poll_interval=0)


@pytest.fixture
def settings() -> RunitSettings:
    return RunitSettings(poll_interval=0, username=None, password=None)


def make_manifest(name: str = "etl-batch", namespace: str | None = "batch") -> dict[str, Any]:
    """Minimal Job manifest as a client would POST it."""
    metadata: dict[str, Any] = {"name": name}
    if namespace is not None:
        metadata["namespace"] = namespace
    return {
        "apiVersion": "batch/v1",
        "kind": "Job",
        "metadata": metadata,
        "spec": {
            "template": {
                "metadata": {"name": name},
                "spec": {
                    "containers": [{"name": "main", "image": "busybox", "command": ["true"]}],
                    "restartPolicy": "Never",
                },
            },
            "backoffLimit": 0,
        },
    }


@pytest.fixture
def manifest() -> Callable[..., dict[str, Any]]:
    return make_manifest
