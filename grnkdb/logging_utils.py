"""Console and rotating JSON file logging for grnkdb commands."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from .config import AppConfig

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(command)s | %(name)s | %(message)s"
CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty below these levels.
QUIET_LOGGERS: dict[str, int] = {
    "googleapiclient.discovery_cache": logging.ERROR,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}

_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra=`` fields are copied to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "event": getattr(record, "event", record.funcName),
            "environment": getattr(record, "environment", "unknown"),
        }
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and key not in payload
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ContextFilter(logging.Filter):
    """Stamps the environment and the running sub-command on each record."""

    def __init__(self, environment: str, command: str = "-") -> None:
        super().__init__()
        self.environment = environment
        self.command = command

    def filter(self, record: logging.LogRecord) -> bool:
        record.environment = self.environment
        record.command = self.command
        if not hasattr(record, "event"):
            record.event = record.funcName
        return True


def _console_handler(verbose: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT))
    return handler


def _file_handler(log_path: Path) -> logging.Handler:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=str(log_path),
        when="midnight",
        backupCount=14,
        utc=True,
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    return handler


def configure_logging(config: AppConfig, *, verbose: bool = False, command: str = "-") -> None:
    """Replace the root handlers with a console handler and the JSON run log.

    The file always receives DEBUG records in development; the console only
    shows them with ``verbose``.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose or config.environment == "development" else logging.INFO)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    context = ContextFilter(config.environment, command)
    for handler in (_console_handler(verbose), _file_handler(config.log_path)):
        handler.addFilter(context)
        root.addHandler(handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
