"""Tests for runit.execution.cleanup: best-effort foreground delete."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from runit.execution import CleanupGuarantor, StubOrchestrator, SubmissionHandle


async def _created(stub: StubOrchestrator) -> SubmissionHandle:
    return await stub.create_job("batch", {"metadata": {"name": "etl-batch-1"}})


class TestCleanupGuarantor:
    @pytest.mark.asyncio
    async def test_removes_job(self):
        stub = StubOrchestrator()
        handle = await _created(stub)

        with capture_logs() as logs:
            assert await CleanupGuarantor(stub).cleanup(handle) is True

        assert stub.deleted == [("batch", "etl-batch-1")]
        assert ("batch", "etl-batch-1") not in stub.jobs
        assert [e["event"] for e in logs] == ["job.cleaning_up", "job.removed"]

    @pytest.mark.asyncio
    async def test_already_absent_is_not_fatal(self):
        stub = StubOrchestrator()
        handle = SubmissionHandle(name="etl-batch-gone", namespace="batch")

        with capture_logs() as logs:
            assert await CleanupGuarantor(stub).cleanup(handle) is True

        assert logs[-1]["event"] == "job.already_removed"
        assert logs[-1]["log_level"] == "warning"

    @pytest.mark.asyncio
    async def test_second_cleanup_tolerated(self):
        stub = StubOrchestrator()
        handle = await _created(stub)
        guarantor = CleanupGuarantor(stub)

        assert await guarantor.cleanup(handle) is True
        assert await guarantor.cleanup(handle) is True
        assert len(stub.deleted) == 2

    @pytest.mark.asyncio
    async def test_failure_logged_once_not_retried(self):
        stub = StubOrchestrator()
        handle = await _created(stub)
        stub.fail_delete = True

        with capture_logs() as logs:
            assert await CleanupGuarantor(stub).cleanup(handle) is False

        assert len(stub.deleted) == 1
        failure = logs[-1]
        assert failure["event"] == "job.remove_failed"
        assert failure["log_level"] == "error"
        assert failure["status"] == 500
        assert failure["job"] == "etl-batch-1"
        # the job leaks
        assert ("batch", "etl-batch-1") in stub.jobs
