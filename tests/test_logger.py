import json
import logging

from anisub.logger import DATE_FORMAT, REQUEST_ID, TEXT_FORMAT, JSONFormatter, RequestIdFilter, setup_logging


def _record(msg="hello"):
    return logging.LogRecord("anisub.test", logging.INFO, __file__, 1, msg, None, None)


def test_json_formatter_includes_request_id():
    token = REQUEST_ID.set("rid-1")
    try:
        payload = json.loads(JSONFormatter().format(_record()))
    finally:
        REQUEST_ID.reset(token)
    assert payload["level"] == "INFO"
    assert payload["logger"] == "anisub.test"
    assert payload["msg"] == "hello"
    assert payload["rid"] == "rid-1"


def test_json_formatter_without_request_id():
    payload = json.loads(JSONFormatter().format(_record()))
    assert "rid" not in payload


def test_setup_logging_replaces_handlers():
    root = setup_logging(level="debug", json_logs=True)
    setup_logging(level="debug", json_logs=True)
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
    setup_logging()


def test_text_format_tags_request_id():
    formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)
    record = _record()
    token = REQUEST_ID.set("abc123")
    try:
        RequestIdFilter().filter(record)
    finally:
        REQUEST_ID.reset(token)
    assert formatter.format(record).endswith("[anisub.test] [rid=abc123] hello")

    plain = _record()
    RequestIdFilter().filter(plain)
    assert formatter.format(plain).endswith("[anisub.test] hello")
