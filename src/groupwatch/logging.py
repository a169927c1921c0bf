"""Logging configuration for groupwatch.

Everything below the ``groupwatch`` logger goes to a rotating file (and
optionally the console). Records pass through a filter that redacts GitLab
tokens before any handler formats them.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "groupwatch.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# httpx logs every request at INFO
_HTTP_LOGGERS = ("httpx", "httpcore")

_TOKEN_PATTERNS = [
    (re.compile(r"glpat-[a-zA-Z0-9_\-]{20,}"), "[GITLAB_TOKEN]"),
    (re.compile(r"(?i)PRIVATE-TOKEN:\s*\S+"), "PRIVATE-TOKEN: [REDACTED]"),
    (re.compile(r"private_token=[a-zA-Z0-9._-]+"), "private_token=[REDACTED]"),
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
]


def sanitize_for_log(text: str) -> str:
    """Remove GitLab credentials from text that is logged or shown to users."""
    for pattern, replacement in _TOKEN_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class TokenRedactingFilter(logging.Filter):
    """Rewrites each record's message with credentials redacted."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = sanitize_for_log(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    log_dir: str | Path | None = None,
    level: str | None = None,
    console: bool = False,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """Configure the ``groupwatch`` logger.

    Args:
        log_dir: Directory for ``groupwatch.log``. Falls back to the
            GROUPWATCH_LOG_DIR environment variable, then ``logs``.
        level: Log level name. Falls back to GROUPWATCH_LOG_LEVEL, then INFO.
        console: Also log to stderr.
        max_bytes: Size at which the log file is rotated.
        backup_count: Number of rotated files to keep.

    Returns:
        The ``groupwatch`` logger.
    """
    log_dir = Path(log_dir or os.environ.get("GROUPWATCH_LOG_DIR", DEFAULT_LOG_DIR))
    log_dir.mkdir(parents=True, exist_ok=True)
    level = (level or os.environ.get("GROUPWATCH_LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    log_level = getattr(logging, level, logging.INFO)

    logger = logging.getLogger("groupwatch")
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_dir / DEFAULT_LOG_FILE,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        handler.addFilter(TokenRedactingFilter())
        logger.addHandler(handler)

    http_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    logger.info("Logging to %s (level=%s)", log_dir / DEFAULT_LOG_FILE, level)
    return logger
