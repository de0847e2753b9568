"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from pocketplan import config as app_config
from pocketplan.logging_config import JSONFormatter, get_logger, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=kwargs.pop("level", logging.INFO),
        pathname="test.py",
        lineno=42,
        msg=kwargs.pop("msg", "Test message"),
        args=(),
        exc_info=kwargs.pop("exc_info", None),
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record(level=logging.ERROR, exc_info=exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_includes_extra_fields():
    record = _record()
    record.period = "2024-03"

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"period": "2024-03"}


def test_setup_logging_writes_json_file(tmp_path):
    config = app_config.TestingConfig(data_dir=tmp_path)

    logger = setup_logging(config)
    logger.warning("Projection diverging", extra={"month": 12})
    for handler in logger.handlers:
        handler.flush()

    assert logger.name == "pocketplan"
    assert len(logger.handlers) == 2
    log_file = tmp_path / "logs" / "pocketplan.log"
    entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["extra"] == {"month": 12}


def test_get_logger_namespacing():
    assert get_logger("cli").name == "pocketplan.cli"
    assert get_logger("pocketplan.services.debts").name == "pocketplan.services.debts"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_console_level_by_mode(tmp_path, dev_mode):
    config = app_config.TestingConfig(data_dir=tmp_path)
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console = [
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    ]
    assert len(console) == 1
    assert console[0].level == (logging.INFO if dev_mode else logging.WARNING)


def test_json_formatter_skips_console_timestamp():
    record = _record()
    logging.Formatter("%(asctime)s %(message)s").format(record)

    log_data = json.loads(JSONFormatter().format(record))

    assert "extra" not in log_data
