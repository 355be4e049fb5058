import io
import json
import logging

import pytest

from docsplit.app_logging import JsonFormatter, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_json_formatter_includes_scalar_extras():
    record = logging.makeLogRecord(
        {
            "name": "docsplit.test",
            "levelname": "INFO",
            "msg": "Processing pages %s to %s...",
            "args": (1, 5),
            "page_count": 12,
            "payload": {"nested": True},
        }
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Processing pages 1 to 5..."
    assert payload["logger"] == "docsplit.test"
    assert payload["level"] == "INFO"
    assert payload["page_count"] == 12
    assert "payload" not in payload
    assert "thread" in payload
    assert payload["ts"].endswith("Z")


def test_configure_logging_writes_json_lines(restore_root_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    stream = io.StringIO()

    configure_logging(stream=stream)
    logging.getLogger("docsplit.test").debug("Segment boundary at page %s", 3)

    line = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert line["message"] == "Segment boundary at page 3"
    assert restore_root_logger.level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_configure_logging_plain_format(restore_root_logger):
    stream = io.StringIO()

    configure_logging(structured=False, stream=stream)
    logging.getLogger("docsplit.test").warning("3 of 9 pages could not be classified")

    output = stream.getvalue()
    assert "WARNING" in output
    assert "docsplit.test: 3 of 9 pages could not be classified" in output
