"""
Logging configuration.

Every record goes to the console and to a per-day file:

    <log_dir>/horror_tales_<YYYYMMDD>_<HHMMSS>.log

HHMMSS is the process start time and never changes, so each run gets its own
set of files and a long-running server starts a new one at midnight.
"""

import logging
from datetime import datetime
from pathlib import Path

LOGGER_NAME = "horror_tales"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PROCESS_STARTED = datetime.now().strftime("%H%M%S")


def _today() -> str:
    return datetime.now().strftime("%Y%m%d")


class DailyRotatingFileHandler(logging.FileHandler):
    """File handler that reopens under a new date stamp when the day changes."""

    def __init__(
        self,
        log_dir: str = "logs",
        encoding: str = "utf-8",
        prefix: str = LOGGER_NAME,
        started: str = PROCESS_STARTED,
    ):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix
        self.started = started
        self.day = _today()
        super().__init__(self.path_for(self.day), mode="a", encoding=encoding)

    def path_for(self, day: str) -> str:
        return str(self.log_dir / f"{self.prefix}_{day}_{self.started}.log")

    def emit(self, record: logging.LogRecord) -> None:
        today = _today()
        if today != self.day:
            self.close()
            self.day = today
            self.baseFilename = self.path_for(today)
            self.stream = self._open()
        super().emit(record)


def setup_logging(log_level: str = "INFO", log_dir: str = "logs") -> logging.Logger:
    """
    Configure the ``horror_tales`` logger and return it.

    Module loggers (``logging.getLogger(__name__)``) propagate here; the
    package logger itself does not propagate to the root logger. Calling
    this again replaces the previous handlers.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown names mean INFO)
        log_dir: Directory for the daily log files
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    file_handler = DailyRotatingFileHandler(log_dir=log_dir)
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in (logging.StreamHandler(), file_handler):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"[Logging] level={log_level}, file={file_handler.baseFilename}")
    return logger
