"""Tests for runit.core.logging."""

from __future__ import annotations

import json
import logging

from runit.core.logging import configure_logging, get_logger


class TestConfigureLogging:
    def test_json_output(self, caplog):
        caplog.set_level(logging.INFO)
        configure_logging(level="INFO", json_format=True, service="runit-test")

        get_logger("runit.test").info("job.created", job="etl-batch-1", namespace="batch")

        event = json.loads(caplog.records[-1].getMessage())
        assert event["event"] == "job.created"
        assert event["job"] == "etl-batch-1"
        assert event["namespace"] == "batch"
        assert event["level"] == "info"
        assert event["logger"] == "runit.test"
        assert event["service.name"] == "runit-test"
        assert "timestamp" in event

    def test_level_filter(self, caplog):
        caplog.set_level(logging.DEBUG)
        configure_logging(level="WARNING", json_format=True)
        logger = get_logger("runit.test")

        logger.info("job.active", job="etl-batch-1")
        logger.warning("job.status_unavailable", job="etl-batch-1")

        events = [json.loads(r.getMessage())["event"] for r in caplog.records]
        assert events == ["job.status_unavailable"]

    def test_console_output(self, caplog):
        caplog.set_level(logging.INFO)
        configure_logging(level="INFO", json_format=False, add_timestamp=False)

        get_logger("runit.test").info("job.finished", job="etl-batch-1")

        assert "job.finished" in caplog.records[-1].getMessage()
