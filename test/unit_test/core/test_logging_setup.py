"""Unit tests for the logging configuration module."""

import logging

import pytest

from minebot.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    LOG_FILE_NAME,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)


def _console_handler() -> logging.Handler:
    root_logger = logging.getLogger()
    handler = next(
        (h for h in root_logger.handlers if type(h) is logging.StreamHandler),
        None,
    )
    assert handler is not None
    return handler


def _file_handler():
    return next((h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)), None)


@pytest.fixture(autouse=True)
def _close_file_handlers():
    yield
    handler = _file_handler()
    if handler is not None:
        logging.getLogger().removeHandler(handler)
        handler.close()


class TestSetupLoggingLevels:
    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_console_level(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)
        assert _console_handler().level == expected_level

    def test_root_logger_captures_everything(self):
        setup_logging(log_level="WARNING", enable_file=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_module_levels_are_applied(self):
        setup_logging(enable_file=False)

        for module_name, expected_level_str in MODULE_LOG_LEVELS.items():
            assert logging.getLogger(module_name).level == getattr(logging, expected_level_str)

    def test_tracker_is_quieter_than_runtime(self):
        setup_logging(enable_file=False)

        assert get_logger("minebot.agent_core.runtime").level == logging.DEBUG
        assert get_logger("minebot.agent_core.runtime.tracking").level == logging.INFO


class TestSetupLoggingFormats:
    @pytest.mark.parametrize(
        "log_format,expected_format",
        [
            ("simple", SIMPLE_FORMAT),
            ("detailed", DETAILED_FORMAT),
            ("json", JSON_FORMAT),
            ("unknown", DETAILED_FORMAT),
        ],
    )
    def test_formats(self, log_format, expected_format):
        setup_logging(log_format=log_format, enable_file=False)

        formatter = _console_handler().formatter
        assert formatter._fmt == expected_format
        assert formatter.datefmt == "%Y-%m-%d %H:%M:%S"


class TestSetupLoggingFiles:
    def test_file_logging_writes_debug_to_file(self, tmp_path):
        log_dir = tmp_path / "logs"

        setup_logging(log_level="ERROR", enable_file=True, log_file_dir=str(log_dir))
        get_logger("minebot.agent_core").debug("file only")

        handler = _file_handler()
        assert handler is not None
        assert handler.level == logging.DEBUG
        handler.flush()
        assert "file only" in (log_dir / LOG_FILE_NAME).read_text()

    def test_file_logging_disabled(self):
        setup_logging(enable_file=False)
        assert _file_handler() is None

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)

        assert len(logging.getLogger().handlers) == 1


class TestGetLogger:
    def test_same_name_same_instance(self):
        assert get_logger("minebot.app") is get_logger("minebot.app")

    def test_name(self):
        assert get_logger("minebot.environment.factory").name == "minebot.environment.factory"
