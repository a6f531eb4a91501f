"""
Centralized logging configuration with rotating file handlers.

This module provides logging for the hotspots map: selection changes,
camera moves, navigation pushes and marker inspections all end up in
the map view log.

Usage:
    from hotspots.logging_config import setup_logging
    setup_logging()  # Call once at application startup
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Log directory (relative to project root)
LOG_DIR = Path(__file__).parent.parent / "logs"

# Log format with function name and line number for debugging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rotation settings: 5 MB per file, keep 5 backups (25 MB total max)
MAX_LOG_SIZE_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 5

MAP_VIEW_LOGGER = "hotspots.map_view"


def setup_logging(
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_dir: Path | None = None,
) -> None:
    """
    Configure logging with console and rotating file handlers.

    Sets up two logging outputs:
    - Console: Shows INFO and above (user-facing messages)
    - File: Shows DEBUG and above for the map view (logs/hotspots.log)

    Args:
        console_level: Minimum log level for console output (default: INFO)
        file_level: Minimum log level for file output (default: DEBUG)
        log_dir: Directory for log files (default: <project>/logs)

    Example:
        # For verbose console output during debugging
        setup_logging(console_level=logging.DEBUG)
    """
    directory = log_dir or LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all, let handlers filter

    # Clear any existing handlers (prevents duplicate logs on re-init)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    map_file_handler = RotatingFileHandler(
        directory / "hotspots.log",
        maxBytes=MAX_LOG_SIZE_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    map_file_handler.setLevel(file_level)
    map_file_handler.setFormatter(formatter)

    map_logger = logging.getLogger(MAP_VIEW_LOGGER)
    for handler in list(map_logger.handlers):
        if isinstance(handler, RotatingFileHandler):
            map_logger.removeHandler(handler)
            handler.close()
    map_logger.addHandler(map_file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("kaleido").setLevel(logging.WARNING)

    root_logger.info("Logging initialized - console: %s, file: %s",
                     logging.getLevelName(console_level),
                     logging.getLevelName(file_level))
