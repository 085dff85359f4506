# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from storescrape.config.logging_config import (
    PROJECT_LOGGER,
    current_log_file,
    setup_logging,
)


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Start each test with a bare project logger and a temp log dir."""
        self.project_logger = logging.getLogger(PROJECT_LOGGER)
        self._reset_handlers()
        self._tmp = tempfile.TemporaryDirectory()
        self.logs_dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._reset_handlers()
        self._tmp.cleanup()

    def _reset_handlers(self) -> None:
        for handler in list(self.project_logger.handlers):
            handler.close()
            self.project_logger.removeHandler(handler)

    def _stream_handlers(self) -> list[logging.Handler]:
        return [
            h
            for h in self.project_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging(self.logs_dir)
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging(self.logs_dir)
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_log_file_inside_logs_dir(self) -> None:
        """The run log is written under the requested directory."""
        log_path = setup_logging(self.logs_dir)
        self.assertEqual(log_path.parent, self.logs_dir)

    def test_file_handler_level_debug(self) -> None:
        """File handler captures everything."""
        setup_logging(self.logs_dir)
        file_handlers = [
            h
            for h in self.project_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_default_warning(self) -> None:
        """Console handler defaults to WARNING."""
        setup_logging(self.logs_dir)
        stream_handlers = self._stream_handlers()
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_console_level_override(self) -> None:
        """Verbose runs echo INFO to the console."""
        setup_logging(self.logs_dir, console_level=logging.INFO)
        self.assertEqual(self._stream_handlers()[0].level, logging.INFO)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging(self.logs_dir)
        count_before = len(self.project_logger.handlers)
        setup_logging(self.logs_dir)
        self.assertEqual(len(self.project_logger.handlers), count_before)

    def test_project_logger_level_is_debug(self) -> None:
        """The project logger is set to DEBUG."""
        setup_logging(self.logs_dir)
        self.assertEqual(self.project_logger.level, logging.DEBUG)

    def test_child_logger_reaches_file(self) -> None:
        """Module loggers propagate into the run log."""
        log_path = setup_logging(self.logs_dir)
        logging.getLogger("storescrape.pipeline").debug("child message")
        for handler in self.project_logger.handlers:
            handler.flush()
        self.assertIn(
            "child message", log_path.read_text(encoding="utf-8")
        )

    def test_repeated_call_returns_existing_log(self) -> None:
        """A second call reports the run log that is actually open."""
        first = setup_logging(self.logs_dir)
        with patch(
            "storescrape.config.logging_config.datetime"
        ) as mock_dt:
            mock_dt.now.return_value = datetime(2030, 1, 1, 0, 0, 0)
            second = setup_logging(self.logs_dir)
        self.assertEqual(second, first)
        self.assertTrue(second.exists())

    def test_current_log_file(self) -> None:
        """current_log_file is None until a run log is attached."""
        self.assertIsNone(current_log_file())
        log_path = setup_logging(self.logs_dir)
        self.assertEqual(current_log_file(), log_path)


if __name__ == "__main__":
    unittest.main()
