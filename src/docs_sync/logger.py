"""Logging setup for the docs-sync command line.

Sync progress (phase counts, per-file decisions) is logged at INFO on the
``docs_sync`` loggers and written to stderr, so stdout stays free for
``--init-config`` output.
"""

import json
import logging
import os
import sys

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s %(message)s"

# The notifier logs every raw change batch at INFO
_QUIET_LOGGERS = ("watchfiles",)


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg and exc if any."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def resolve_level(debug: bool = False, level: str | None = None) -> int:
    """Pick the root level: ``--debug``, then ``LOG_LEVEL``, then *level*.

    Unknown names fall back to INFO.
    """
    if debug:
        return logging.DEBUG
    name = (os.getenv("LOG_LEVEL") or level or "INFO").upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def _formatter(debug_format: str, fmt: str) -> logging.Formatter:
    if debug_format == "json":
        return JsonFormatter(datefmt=DATE_FORMAT)
    return logging.Formatter(fmt, datefmt=DATE_FORMAT)


def setup_logging(
    debug: bool = False,
    log_file: str | None = None,
    debug_format: str = "text",
    level: str | None = None,
) -> None:
    """
    Send docs-sync logs to stderr and, optionally, to a file.

    Args:
        debug: Log at DEBUG regardless of ``LOG_LEVEL`` and *level*.
        log_file: File appended to in addition to stderr; its lines also
            carry the logger name.
        debug_format: "text" (default) or "json" for one JSON object per line.
        level: Level name from the config file's ``logging`` section.

    Environment variables:
        LOG_LEVEL: Overrides *level*. Default: INFO.
    """
    log_level = resolve_level(debug, level)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(_formatter(debug_format, CONSOLE_FORMAT))
    handlers: list[logging.Handler] = [stderr_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(_formatter(debug_format, FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers)

    if log_level != logging.DEBUG:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
