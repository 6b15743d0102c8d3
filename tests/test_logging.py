"""Tests for the JSON-line project logger."""

import io
import json
import logging

import pytest

from utils.logging import LOGGER_NAME, configure_logging, log_event


@pytest.fixture
def stream():
    buf = io.StringIO()
    yield buf
    # le logger suivant repart de la configuration par défaut
    logging.getLogger(LOGGER_NAME).handlers = []


class TestLogging:
    def test_event_is_one_json_line(self, stream):
        configure_logging(level="DEBUG", stream=stream, force=True)
        log_event("SYNC_CREATE", status="committed", device_id="dev-1")
        line = json.loads(stream.getvalue().strip())
        assert line["event"] == "SYNC_CREATE"
        assert line["status"] == "committed"
        assert line["level"] == "INFO"
        assert line["logger"] == LOGGER_NAME

    def test_level_from_environment(self, stream, monkeypatch):
        monkeypatch.setenv("ASSET_TRACKER_LOG_LEVEL", "warning")
        logger = configure_logging(stream=stream, force=True)
        assert logger.level == logging.WARNING
        log_event("SYNC_LOAD", status="committed")
        log_event("SYNC_DELETE", level=logging.WARNING, status="failed")
        lines = [json.loads(s) for s in stream.getvalue().splitlines()]
        assert [entry["event"] for entry in lines] == ["SYNC_DELETE"]

    def test_configured_once_without_force(self, stream):
        first = configure_logging(stream=stream, force=True)
        handlers = list(first.handlers)
        assert configure_logging(level="DEBUG").handlers == handlers
