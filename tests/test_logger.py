"""Tests for logger module."""

import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

from orchard.util import logger as logger_module
from orchard.util.logger import (
    DATE_FORMAT,
    LOG_FORMAT,
    ColorFormatter,
    PromptToolkitHandler,
    get_log_filepath,
    get_logger,
    handle_exception,
    should_use_color,
)


class TestShouldUseColor:
    """Tests for should_use_color function."""

    @patch("sys.stderr.isatty")
    def test_should_use_color_tty(self, mock_isatty):
        mock_isatty.return_value = True
        assert should_use_color() is True

    @patch("sys.stderr.isatty")
    def test_should_use_color_no_tty(self, mock_isatty):
        mock_isatty.return_value = False
        assert should_use_color() is False

    @patch("sys.stderr.isatty")
    def test_should_use_color_exception(self, mock_isatty):
        mock_isatty.side_effect = Exception("Error")
        assert should_use_color() is False


def make_record(level, msg="message"):
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
        func="test_func",
    )


class TestColorFormatter:
    def test_error_is_red(self):
        formatted = ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT).format(make_record(logging.ERROR))
        assert formatted.startswith("\033[31m")
        assert formatted.endswith("\033[0m")

    def test_info_is_green(self):
        formatted = ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT).format(make_record(logging.INFO, "hi"))
        assert formatted.startswith("\033[32m")
        assert "hi" in formatted


class TestGetLogger:
    def test_handlers_are_configured_once(self):
        first = get_logger("orchard_test_logger")
        second = get_logger("orchard_test_logger")

        assert first is second
        assert len(first.handlers) == 2
        assert first.propagate is False

    def test_console_and_rotating_file_handlers(self):
        test_logger = get_logger("orchard_test_handlers")

        console = [h for h in test_logger.handlers if isinstance(h, PromptToolkitHandler)]
        files = [h for h in test_logger.handlers if isinstance(h, RotatingFileHandler)]

        assert console and console[0].level == logging.INFO
        assert files and files[0].level == logging.DEBUG
        assert files[0].maxBytes == logger_module.LOG_MAX_BYTES

    def test_log_file_is_shared(self):
        assert get_log_filepath() == get_log_filepath()
        assert get_log_filepath().parent == logger_module.LOGS_DIR

    def test_noisy_loggers_are_silenced(self):
        assert logging.getLogger("discord").level == logging.ERROR
        assert logging.getLogger("openai").propagate is False


class TestHandleException:
    def test_keyboard_interrupt_uses_default_hook(self):
        with patch("sys.__excepthook__") as default_hook:
            handle_exception(KeyboardInterrupt, KeyboardInterrupt(), None)
        default_hook.assert_called_once()

    def test_other_exceptions_are_logged(self):
        main_logger = get_logger("main")
        with patch.object(main_logger, "error") as error:
            handle_exception(ValueError, ValueError("boom"), None)
        error.assert_called_once()
