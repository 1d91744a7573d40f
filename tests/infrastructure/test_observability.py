"""Structured Logging — verifies JSONFormatter output."""

import json
import logging

from catalog_api.infrastructure.observability import JSONFormatter


def _record(**extra):
    record = logging.LogRecord(
        "catalog_api.test", logging.WARNING, __file__, 1, "guard rejected", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "WARNING"
    assert log["logger"] == "catalog_api.test"
    assert log["message"] == "guard rejected"
    assert "timestamp" in log


def test_json_formatter_surfaces_known_extras_only():
    log = json.loads(JSONFormatter().format(
        _record(path="/api/v1/books", status_code=401, unrelated="x"),
    ))
    assert log["path"] == "/api/v1/books"
    assert log["status_code"] == 401
    assert "unrelated" not in log
