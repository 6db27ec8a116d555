"""
Unit tests for logging helpers.
"""

import json
import logging

import pytest

from dstretch_studio.core.logging import (
    PACKAGE_LOGGER,
    JSONFormatter,
    LogContext,
    get_logger,
    log_operation,
    setup_logging,
)


@pytest.fixture
def package_logger():
    """Package logger with propagation on so caplog sees records."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    previous_level, previous_propagate = logger.level, logger.propagate
    logger.setLevel(logging.DEBUG)
    logger.propagate = True
    yield logger
    logger.setLevel(previous_level)
    logger.propagate = previous_propagate


class TestGetLogger:
    """Tests for logger naming."""

    def test_prefixed(self):
        """Loggers live under the package namespace."""
        assert get_logger("stretch").name == f"{PACKAGE_LOGGER}.stretch"

    def test_already_prefixed(self):
        """Package module names are used as is."""
        name = f"{PACKAGE_LOGGER}.pipeline.worker"
        assert get_logger(name).name == name


class TestJSONFormatter:
    """Tests for structured output."""

    def test_context_included(self):
        """LogContext values appear in JSON records."""
        record = logging.LogRecord(PACKAGE_LOGGER, logging.INFO, __file__, 1, "hello", None, None)
        with LogContext(colorspace="LAB", width=64):
            data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["context"] == {"colorspace": "LAB", "width": 64}

    def test_context_restored(self):
        """Nested contexts unwind on exit."""
        record = logging.LogRecord(PACKAGE_LOGGER, logging.INFO, __file__, 1, "x", None, None)
        with LogContext(outer=1):
            with LogContext(inner=2):
                pass
            data = json.loads(JSONFormatter().format(record))
        assert data["context"] == {"outer": 1}
        assert "context" not in json.loads(JSONFormatter().format(record))


class TestLogOperation:
    """Tests for operation timing."""

    def test_success(self, package_logger, caplog):
        """Start and completion are logged."""
        with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER):
            with log_operation(package_logger, "stretch"):
                pass
        messages = [r.getMessage() for r in caplog.records]
        assert "Starting: stretch" in messages
        assert "Completed: stretch" in messages

    def test_failure_reraised(self, package_logger, caplog):
        """Errors are logged and re-raised."""
        with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER):
            with pytest.raises(ValueError):
                with log_operation(package_logger, "relief"):
                    raise ValueError("bad map")
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert errors and errors[0].operation == "relief"


class TestSetupLogging:
    """Tests for handler configuration."""

    def test_log_file_is_json(self, tmp_path):
        """File output is written as JSON lines."""
        log_file = tmp_path / "logs" / "run.log"
        try:
            setup_logging(level="DEBUG", log_file=log_file, colored=False)
            get_logger("test").info("to file")
            for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
                handler.flush()
            lines = log_file.read_text().strip().splitlines()
            assert any(json.loads(line)["message"] == "to file" for line in lines)
        finally:
            for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
                handler.close()
            setup_logging(level="INFO", colored=False)
