"""Tests for uttt/logging_config.py - logging setup helpers."""

import logging

from uttt.logging_config import (
    COMPACT_FORMAT,
    DEFAULT_FORMAT,
    DETAILED_FORMAT,
    LogContext,
    get_logger,
    setup_logging,
)


class TestSetupLogging:
    """Test setup_logging function."""

    def test_returns_logger(self):
        logger = setup_logging("uttt_test_1")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "uttt_test_1"

    def test_logger_level_custom(self):
        logger = setup_logging("uttt_test_2", level=logging.DEBUG)
        assert logger.level == logging.DEBUG

    def test_logger_level_string(self):
        logger = setup_logging("uttt_test_3", level="warning")
        assert logger.level == logging.WARNING

    def test_unknown_level_name_falls_back_to_info(self):
        logger = setup_logging("uttt_test_4", level="LOUD")
        assert logger.level == logging.INFO

    def test_idempotent_handlers(self):
        logger1 = setup_logging("uttt_test_5")
        handler_count = len(logger1.handlers)
        logger2 = setup_logging("uttt_test_5")
        assert logger1 is logger2
        assert len(logger2.handlers) == handler_count

    def test_console_handler_disabled(self):
        logger = setup_logging("uttt_test_6", console=False)
        assert not any(getattr(h, "_uttt_console", False) for h in logger.handlers)

    def test_file_handler_with_log_file(self, tmp_path):
        log_file = tmp_path / "nested" / "game.log"
        logger = setup_logging("uttt_test_7", log_file=log_file, console=False)
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")
        setup_logging("uttt_test_7", log_file=log_file, console=False)
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1

    def test_file_handler_with_log_dir(self, tmp_path):
        setup_logging("uttt_test_8", log_dir=tmp_path, console=False)
        assert (tmp_path / "uttt_test_8.log").exists()

    def test_propagate(self):
        assert setup_logging("uttt_test_9").propagate is False
        assert setup_logging("uttt_test_10", propagate=True).propagate is True

    def test_format_style(self):
        logger = setup_logging("uttt_test_11", format_style="compact")
        console = [h for h in logger.handlers if getattr(h, "_uttt_console", False)]
        assert console[0].formatter._fmt == COMPACT_FORMAT

    def test_formats_differ(self):
        assert len({DEFAULT_FORMAT, COMPACT_FORMAT, DETAILED_FORMAT}) == 3


class TestLogContext:

    def test_restores_level(self):
        logger = get_logger("uttt_test_ctx")
        logger.setLevel(logging.WARNING)
        with LogContext(logger, logging.DEBUG) as inner:
            assert inner is logger
            assert logger.level == logging.DEBUG
        assert logger.level == logging.WARNING
