"""Logging for boardsync: one rotating file shared by every component.

Component modules log through ``logging.getLogger("boardsync.<component>")``.
Records pass a filter that redacts GitHub tokens before they are written.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "boardsync.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# httpx logs every request line at INFO
QUIET_LOGGERS = ("httpx", "httpcore")

_SECRETS = (
    (re.compile(r"gh[pousr]_[A-Za-z0-9]{36}"), "[GITHUB_TOKEN]"),
    (re.compile(r"github_pat_[A-Za-z0-9_]{82}"), "[GITHUB_TOKEN]"),
    (re.compile(r"Bearer [A-Za-z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"token=[A-Za-z0-9._-]+"), "token=[REDACTED]"),
)


def sanitize_for_log(text: str) -> str:
    """Redact GitHub tokens and bearer credentials from ``text``."""
    for pattern, replacement in _SECRETS:
        text = pattern.sub(replacement, text)
    return text


def truncate_output(output: str, max_length: int = 2000) -> str:
    """Cut a long upstream body down to ``max_length`` characters."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"\n... [truncated, {len(output) - max_length} more chars]"


class RedactingFilter(logging.Filter):
    """Rewrites each record's message with secrets redacted."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = sanitize_for_log(record.getMessage())
        record.args = None
        return True


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Configure the ``boardsync`` logger.

    Args:
        log_dir: Directory for the log file. Falls back to BOARDSYNC_LOG_DIR,
            then ``logs``.
        log_file: Log file name.
        max_bytes: Size at which the file rotates.
        backup_count: Rotated files kept.
        level: Level name. Falls back to BOARDSYNC_LOG_LEVEL, then INFO.
        console: Also log to stderr.

    Returns:
        The ``boardsync`` logger.
    """
    log_dir = Path(log_dir or os.environ.get("BOARDSYNC_LOG_DIR", DEFAULT_LOG_DIR))
    log_dir.mkdir(parents=True, exist_ok=True)

    level = level or os.environ.get("BOARDSYNC_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("boardsync")
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_dir / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    redactor = RedactingFilter()
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        handler.addFilter(redactor)
        logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    logger.info("boardsync logging initialized (level=%s, file=%s)", level, log_dir / log_file)
    return logger
