from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

from pythonjsonlogger.json import JsonFormatter


_SECRET_PATTERN = re.compile(r"(?i)\b(access_token|token|authorization|secret)=([^\s&,;]+)")
_BEARER_PATTERN = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9_.\-]+")


def redact(text: str) -> str:
    """Mask token-looking values in free text."""
    text = _SECRET_PATTERN.sub(r"\1=[redacted]", text)
    return _BEARER_PATTERN.sub("Bearer [redacted]", text)


class HookEventFormatter(JsonFormatter):
    """One JSON object per event; structured fields come from logging ``extra``."""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["ts"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["event"] = redact(record.getMessage())


class ConsoleFormatter(logging.Formatter):
    """Single-line console output with structured fields appended as key=value."""

    _RESERVED = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s %(levelname)s %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {k: v for k, v in vars(record).items() if k not in self._RESERVED}
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return redact(line)
