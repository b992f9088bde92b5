import json
import logging

from subtracker.log import JsonFormatter, setup_logging


def test_json_formatter_fields():
    record = logging.LogRecord("subtracker.store", logging.INFO, __file__, 1, "created %s", ("abc",), None)
    data = json.loads(JsonFormatter().format(record))

    assert data["level"] == "INFO"
    assert data["logger"] == "subtracker.store"
    assert data["message"] == "created abc"
    assert "timestamp" in data


def test_setup_logging_replaces_root_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug", "json")
        setup_logging("warning", "json")

        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
