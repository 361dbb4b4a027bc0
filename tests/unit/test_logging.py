"""Tests for logging setup."""

import json
import logging
import sys

import pytest

from trade_history.config.settings import LoggingConfig
from trade_history.utils.logging import JSONFormatter, TextFormatter, setup_logging

pytestmark = pytest.mark.unit


def make_record(msg="Offset 0: 10 returned, 10 new", level=logging.INFO):
    return logging.LogRecord("trade_history.paginator", level, __file__, 42, msg, None, None)


def test_json_formatter_fields():
    record = make_record()
    record.service = "trade-history"

    data = json.loads(JSONFormatter().format(record))

    assert data['level'] == "INFO"
    assert data['logger'] == "trade_history.paginator"
    assert data['message'] == "Offset 0: 10 returned, 10 new"
    assert data['service'] == "trade-history"
    assert data['timestamp'].endswith("Z")


def test_text_formatter_without_tty():
    line = TextFormatter().format(make_record(level=logging.WARNING))

    assert "[WARNING] trade_history.paginator: Offset 0" in line


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_to_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "run.log"

    setup_logging(LoggingConfig(level="DEBUG", format="json", output=str(log_file)))
    logging.getLogger("trade_history.test").info("hello")
    for handler in restore_root_logger.handlers:
        handler.flush()

    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert records[-1]['message'] == "hello"
    assert records[-1]['service'] == "trade-history"
    assert restore_root_logger.level == logging.DEBUG


def test_text_formatter_colors_level():
    line = TextFormatter(use_colors=True).format(make_record(level=logging.ERROR))

    assert "[\033[31mERROR\033[0m]" in line


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            "trade_history.cli", logging.ERROR, __file__, 1, "Fatal", None, sys.exc_info()
        )

    data = json.loads(JSONFormatter().format(record))

    assert "RuntimeError: boom" in data['exception']
    assert 'exc_info' not in data


def test_setup_logging_quiets_http_stack(tmp_path, restore_root_logger):
    setup_logging(LoggingConfig(level="DEBUG", output=str(tmp_path / "run.log")))

    assert logging.getLogger("aiohttp").level == logging.WARNING
    assert isinstance(restore_root_logger.handlers[0].formatter, TextFormatter)
