# utils/logger.py
import logging
import sys
from pathlib import Path
from typing import Optional
from config.paths import LOG_PATH

# Loggers of the packages that log during a run
PACKAGE_LOGGERS = ("scheduler", "core", "api", "utils")


def configure_logging(level: int = logging.INFO, log_path: Optional[Path] = LOG_PATH) -> logging.Logger:
    """
    Attach a UTF-8 file handler and a stdout handler to the package loggers.
    Safe to call more than once.
    """
    formatter_file = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    formatter_stream = logging.Formatter("[%(levelname)s] %(message)s")

    handlers = []
    if log_path is not None:
        # Ensure directory exists
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter_file)
        handlers.append(file_handler)

    # Stream handler (stdout -> docker logs)
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter_stream)
    handlers.append(stream_handler)

    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Prevent duplicate handlers if configured multiple times
        if not logger.handlers:
            for handler in handlers:
                logger.addHandler(handler)
            logger.propagate = False
    return logging.getLogger(PACKAGE_LOGGERS[0])
