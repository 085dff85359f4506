# storescrape/config/logging_config.py

"""Per-run logging for storescrape.

Every launch writes to its own ``logs/run_YYYYMMDD_HHMMSS.log`` file.
All ``storescrape.*`` loggers propagate to the project logger configured
here, so per-store scrape failures, dropped containers and persistence
problems end up in one place.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from storescrape.config.settings import Settings

PROJECT_LOGGER = "storescrape"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_FILE_FORMATTER = logging.Formatter(
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s",
    datefmt=_DATE_FORMAT,
)

_CONSOLE_FORMATTER = logging.Formatter(
    "%(levelname)s %(name)s: %(message)s",
)


def current_log_file() -> Path | None:
    """Path of the run log already attached to the project logger."""
    for handler in logging.getLogger(PROJECT_LOGGER).handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def _run_log_path(logs_dir: Path) -> Path:
    logs_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return logs_dir / f"run_{stamp}.log"


def setup_logging(
    logs_dir: Path | None = None,
    console_level: int = logging.WARNING,
) -> Path:
    """Route the ``storescrape`` logger to a run log and stderr.

    The file receives DEBUG and up; stderr only *console_level* and up.
    Once a run log is attached, later calls leave the handlers alone and
    return that same file.
    """
    existing = current_log_file()
    if existing is not None:
        return existing

    log_file = _run_log_path(
        logs_dir if logs_dir is not None else Settings.LOGS_DIR
    )

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(_FILE_FORMATTER)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(_CONSOLE_FORMATTER)

    project_logger = logging.getLogger(PROJECT_LOGGER)
    project_logger.setLevel(logging.DEBUG)
    project_logger.addHandler(file_handler)
    project_logger.addHandler(console_handler)

    project_logger.debug("Run log opened at %s", log_file)
    return log_file
