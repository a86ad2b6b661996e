"""
Tests for structured JSON logging.
"""
import json
import logging

from vitals_tracker.core.logging_config import (
    JSONFormatter,
    clear_request_id,
    get_request_id,
    set_request_id,
)


def make_log_record(message="Health record saved", **extra):
    record = logging.LogRecord(
        name="vitals_tracker.services.health_service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_fields():
    entry = json.loads(JSONFormatter().format(make_log_record()))
    assert entry["level"] == "INFO"
    assert entry["logger"] == "vitals_tracker.services.health_service"
    assert entry["message"] == "Health record saved"
    assert entry["timestamp"].endswith("Z")
    assert "request_id" not in entry


def test_extra_fields_are_nested():
    entry = json.loads(JSONFormatter().format(make_log_record(record_id="abc123")))
    assert entry["extra"] == {"record_id": "abc123"}


def test_request_id_from_context():
    set_request_id("req-1")
    try:
        entry = json.loads(JSONFormatter().format(make_log_record()))
        assert entry["request_id"] == "req-1"
    finally:
        clear_request_id()
    assert get_request_id() is None
