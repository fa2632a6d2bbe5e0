"""Console-format logging to a file and standard output."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

LOGGER_NAME = "userhub"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "dpanic": logging.CRITICAL,
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
}

_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}


@dataclass
class LoggerConfig:
    level: str = "info"
    output_paths: list[str] = field(default_factory=lambda: ["logs.txt", "stdout"])


class _ConsoleFormatter(logging.Formatter):
    """Tab-separated lines: time, level, caller, message and optional JSON fields."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).astimezone()
        ts = f"{stamp:%Y-%m-%dT%H:%M:%S}.{int(record.msecs):03d}{stamp:%z}"
        caller = f"{Path(record.pathname).parent.name}/{record.filename}:{record.lineno}"
        parts = [
            ts,
            _LEVEL_NAMES.get(record.levelno, record.levelname),
            caller,
            record.getMessage(),
        ]
        fields = getattr(record, "fields", None)
        if fields:
            parts.append(json.dumps(fields, ensure_ascii=False, default=str))
        line = "\t".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _parse_level(text: str) -> int:
    lowered = text.lower()
    if lowered in _LEVELS and text in (lowered, lowered.upper()):
        return _LEVELS[lowered]
    raise ValueError(f'unrecognized level: "{text}"')


def _handler_for(path: str) -> logging.Handler:
    if path == "stdout":
        return logging.StreamHandler(sys.stdout)
    if path == "stderr":
        return logging.StreamHandler(sys.stderr)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def init_logger(cfg: LoggerConfig) -> logging.Logger:
    """Configure and return the application logger.

    Extra structured data may be passed as ``extra={"fields": {...}}``.
    """
    level = _parse_level(cfg.level)
    handlers = [_handler_for(path) for path in cfg.output_paths]

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = _ConsoleFormatter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def new_logger() -> logging.Logger:
    """Return the default logger: info level, written to logs.txt and stdout."""
    try:
        return init_logger(LoggerConfig())
    except OSError:
        return init_logger(LoggerConfig(output_paths=["stdout"]))