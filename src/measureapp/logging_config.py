"""
Console and file logging for the measurement engine.

Only the ``measureapp`` logger is configured; the root logger and any host
application's handlers are left alone.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "measureapp"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Route engine log records to stdout, and to ``log_file`` when given.

    Calling it again replaces the handlers installed by the previous call,
    so a session can switch level or log file at any time.

    Args:
        level: threshold for the logger and every handler it gets.
        log_file: file to (re)write the log to; ``None`` logs to stdout only.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for old in list(logger.handlers):
        old.close()
        logger.removeHandler(old)

    _attach(logger, logging.StreamHandler(sys.stdout), level)
    if log_file:
        _attach(logger, logging.FileHandler(log_file, mode='w', encoding='utf-8'), level)

    logger.debug(f"Logging set up at level {logging.getLevelName(level)}")
