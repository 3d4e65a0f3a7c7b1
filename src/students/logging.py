"""Logging for the Students service.

Everything under the ``students`` logger, plus the uvicorn server loggers,
goes to one rotating file (and optionally the console). Bearer tokens are
redacted from every record before it is written.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "students"

# Server loggers written to the same handlers when uvicorn runs with log_config=None
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# httpx logs every gateway call at INFO
QUIET_LOGGERS = ("httpx", "httpcore")

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "students.log"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 3
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SENSITIVE_PATTERNS = [
    (re.compile(r"Bearer [a-zA-Z0-9._~+/=-]+", re.IGNORECASE), "Bearer [REDACTED]"),
    (re.compile(r"token=[a-zA-Z0-9._~+/=-]+"), "token=[REDACTED]"),
]


def sanitize_for_log(text: str) -> str:
    """Remove bearer tokens and token parameters from log output."""
    for pattern, replacement in _SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class RedactingFormatter(logging.Formatter):
    """Formatter that runs sanitize_for_log over the finished line."""

    def format(self, record: logging.LogRecord) -> str:
        return sanitize_for_log(super().format(record))


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Configure service and server logging.

    Safe to call more than once: handlers from a previous call are closed
    and replaced.

    Args:
        log_dir: Directory for the log file. Defaults to STUDENTS_LOG_DIR,
            then 'logs'.
        log_file: Log file name.
        max_bytes: Size at which the file is rotated.
        backup_count: Number of rotated files kept.
        level: Level name. Defaults to STUDENTS_LOG_LEVEL, then INFO.
            Unknown names fall back to INFO.
        console: Also log to stderr.

    Returns:
        The ``students`` logger.
    """
    log_path = Path(log_dir or os.environ.get("STUDENTS_LOG_DIR") or DEFAULT_LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)
    level_name = (level or os.environ.get("STUDENTS_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    formatter = RedactingFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)

    for name in (ROOT_LOGGER, *SERVER_LOGGERS):
        _install(logging.getLogger(name), handlers, log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.info("Logging to %s at %s", log_path / log_file, level_name)
    return logger


def _install(logger: logging.Logger, handlers: list[logging.Handler], level: int) -> None:
    for old in list(logger.handlers):
        old.close()
        logger.removeHandler(old)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a component logger under ``students``, e.g. get_logger("auth")."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
