"""Pytest configuration and fixtures."""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def mock_logger():
    """Create a logger whose records reach caplog."""
    logger = logging.getLogger("test.event_display")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def settings(tmp_path):
    """Create settings bound to loopback with a log file under tmp_path."""
    from event_display.config import Settings

    return Settings(
        log_file_path=tmp_path / "app.log",
        host="127.0.0.1",
        port=0,
    )


@pytest.fixture
def structured_event():
    """A structured-mode CloudEvent as sent over HTTP."""
    return {
        "specversion": "1.0",
        "type": "sample.created",
        "source": "https://example.com/samples",
        "id": "evt-1",
        "datacontenttype": "application/json",
        "priority": 1,
        "data": {"id": 2},
    }


@pytest.fixture
def structured_headers():
    """Headers for a structured-mode request."""
    return {"Content-Type": "application/cloudevents+json"}


@pytest.fixture
def binary_headers():
    """Headers for a binary-mode request."""
    return {
        "ce-specversion": "1.0",
        "ce-type": "dev.knative.eventing.samples.heartbeat",
        "ce-source": "https://knative.dev/heartbeats",
        "ce-id": "2b72d7bf-c38f-4a98-a433-608fbcdd2596",
        "ce-time": "2019-10-18T15:23:20.809775Z",
        "ce-beats": "true",
        "Content-Type": "application/json",
    }


@pytest.fixture
def logged(caplog):
    """Return the messages logged so far by the test logger."""
    caplog.set_level(logging.DEBUG, logger="test.event_display")

    def messages(name="test.event_display"):
        return [r.getMessage() for r in caplog.records if r.name == name]

    return messages
