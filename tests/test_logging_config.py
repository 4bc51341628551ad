"""
Test suite for structured logging configuration
"""

import json
import logging
import pytest

from atm_terminal.logging_config import JSONFormatter, setup_logging, log_action


@pytest.fixture
def isolated_logger():
    name = "atm_terminal_test_logger"
    yield name
    logger = logging.getLogger(name)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class CaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestJSONFormatter:

    def test_format_includes_structured_fields(self):
        record = logging.LogRecord("atm_terminal.account", logging.INFO, __file__, 1,
                                   "Cash withdrawn", (), None)
        record.account_id = 987654321
        record.action = "withdraw"
        record.extra = {"amount": "100.00"}

        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["message"] == "Cash withdrawn"
        assert data["account_id"] == 987654321
        assert data["action"] == "withdraw"
        assert data["extra"] == {"amount": "100.00"}
        assert "resource" not in data
        assert "timestamp" in data

    def test_format_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            import sys
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestSetupLogging:

    def test_json_handler(self, isolated_logger):
        logger = setup_logging("DEBUG", logger_name=isolated_logger)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert not logger.propagate

    def test_text_handler_and_no_duplicates(self, isolated_logger):
        setup_logging("INFO", logger_name=isolated_logger)
        logger = setup_logging("WARNING", logger_name=isolated_logger, log_format="text")
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_file_handler(self, isolated_logger, tmp_path):
        log_file = tmp_path / "atm.log"
        logger = setup_logging("INFO", logger_name=isolated_logger, log_file=str(log_file))
        log_action(logger, "info", "Account locked", account_id=1, action="lock")
        logger.handlers[0].flush()

        data = json.loads(log_file.read_text().strip())
        assert data["message"] == "Account locked"
        assert data["action"] == "lock"


class TestLogAction:

    def test_structured_fields_attached(self, isolated_logger):
        logger = logging.getLogger(isolated_logger)
        logger.setLevel(logging.INFO)
        capture = CaptureHandler()
        logger.addHandler(capture)

        log_action(logger, "warning", "Operation rejected", account_id=7,
                   action="withdraw", resource="account", correlation_id="abc",
                   extra={"error": "limit_exceeded"})

        record = capture.records[0]
        assert record.levelno == logging.WARNING
        assert record.account_id == 7
        assert record.action == "withdraw"
        assert record.resource == "account"
        assert record.correlation_id == "abc"
        assert record.extra == {"error": "limit_exceeded"}

    def test_disabled_level_is_skipped(self, isolated_logger):
        logger = logging.getLogger(isolated_logger)
        logger.setLevel(logging.ERROR)
        capture = CaptureHandler()
        logger.addHandler(capture)

        log_action(logger, "info", "ignored")
        assert capture.records == []
