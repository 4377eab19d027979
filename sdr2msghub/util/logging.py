"""Logging for the sdr2msghub service.

Everything logs under the ``sdr2msghub`` logger. Console lines go to stderr;
``--log-json`` adds a JSON-lines file carrying the per-station extras
(``station_hz``, ``value``, ``goodness``, Kafka ``partition``/``offset``) so a
run can be replayed offline. SDR2MSGHUB_DEBUG=1 or SDR2MSGHUB_LOG_LEVEL set the
level when the CLI does not.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional


_configured = False
_root_logger_name = "sdr2msghub"

STRUCTURED_FIELDS = (
    "station_hz",
    "value",
    "goodness",
    "partition",
    "offset",
    "stations",
    "error_type",
)


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        output: Dict[str, Any] = {
            "ts": _record_time(record).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in STRUCTURED_FIELDS:
            if hasattr(record, key):
                output[key] = getattr(record, key)
        if record.exc_info:
            output["traceback"] = "".join(traceback.format_exception(*record.exc_info))
        return json.dumps(output, default=str)


class ConsoleFormatter(logging.Formatter):
    """One line per record, tagged with the station frequency when known."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        ts = _record_time(record).strftime("%Y-%m-%d %H:%M:%S")
        level = f"{record.levelname:8}"
        if self.use_color:
            level = f"{self.LEVEL_COLORS.get(record.levelname, '')}{level}{self.RESET}"
        name = record.name.replace(f"{_root_logger_name}.", "")
        station_hz = getattr(record, "station_hz", None)
        tag = f" {station_hz / 1e6:.3f}MHz" if station_hz is not None else ""
        line = f"[{ts}] {level} [{name}]{tag} {record.getMessage()}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info))
        return line


def configure_logging(
    *,
    level: Optional[str] = None,
    json_file: Optional[str] = None,
    use_color: bool = True,
) -> None:
    """(Re)install the console handler and, with ``json_file``, the JSON-lines handler."""
    global _configured

    if level is None:
        if os.environ.get("SDR2MSGHUB_DEBUG", "").strip() in ("1", "true", "yes"):
            level = "DEBUG"
        else:
            level = os.environ.get("SDR2MSGHUB_LOG_LEVEL", "INFO")

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(_root_logger_name)
    logger.setLevel(numeric_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(ConsoleFormatter(use_color=use_color))
    logger.addHandler(console_handler)

    if json_file:
        try:
            file_handler = logging.FileHandler(json_file, mode="a", encoding="utf-8")
        except OSError as exc:
            logger.warning("cannot open JSON log file %s: %s", json_file, exc)
        else:
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)

    logger.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    if not _configured:
        configure_logging()

    if not name.startswith(_root_logger_name):
        name = f"{_root_logger_name}.main" if name == "__main__" else f"{_root_logger_name}.{name}"
    return logging.getLogger(name)


def log_exception(logger: logging.Logger, message: str, *, error_type: Optional[str] = None, **extra: Any) -> None:
    """Log the exception being handled, with ``error_type`` as a structured field."""
    if error_type:
        extra["error_type"] = error_type
    logger.exception(message, extra=extra)


def mask_secret(secret: str, visible: int = 4) -> str:
    """Return ``secret`` with everything but the last few characters hidden."""
    if not secret:
        return ""
    if len(secret) <= visible:
        return "*" * len(secret)
    return "*" * (len(secret) - visible) + secret[-visible:]
