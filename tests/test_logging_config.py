"""Tests for JSON and text log formatters."""

from __future__ import annotations

import json
import logging
import sys

from ns1.logging_config import JSONFormatter, TextFormatter, setup_logging
from ns1.rest.request_context import bind_call


def _make_record(msg: str = "hello", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="ns1.rest.client",
        level=level,
        pathname="client.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_output_structure():
    data = json.loads(JSONFormatter().format(_make_record("test message")))
    assert data["level"] == "INFO"
    assert data["logger"] == "ns1.rest.client"
    assert data["message"] == "test message"
    assert "timestamp" in data
    assert "request_id" not in data


def test_json_includes_call_context():
    with bind_call("GET", "https://api.nsone.net/v1/zones") as ctx:
        data = json.loads(JSONFormatter().format(_make_record("in call")))
    assert data["request_id"] == ctx.request_id
    assert data["http_method"] == "GET"
    assert data["url"] == "https://api.nsone.net/v1/zones"


def test_json_includes_extra_fields():
    record = _make_record("sleeping")
    record.wait_seconds = 6.0
    data = json.loads(JSONFormatter().format(record))
    assert data["wait_seconds"] == 6.0


def test_json_exception_formatting():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _make_record("error")
        record.exc_info = sys.exc_info()
    data = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in data["exception"]


def test_text_format_with_request_id():
    with bind_call("PUT", "https://api.nsone.net/v1/zones/a.com") as ctx:
        output = TextFormatter().format(_make_record("hello text"))
    assert f"[{ctx.request_id[:12]}]" in output
    assert "hello text" in output


def test_text_format_without_request_id():
    output = TextFormatter().format(_make_record("no rid"))
    assert "[" not in output
    assert "ns1.rest.client - no rid" in output


def test_setup_logging_json():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("warning", "json", debug=True)
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("ns1").level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("ns1").setLevel(logging.NOTSET)
