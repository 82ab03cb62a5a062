from __future__ import annotations

from .logger import EVENTS_FILE, HookLogger
from .handlers import build_event_file_handler, build_console_handler
from .formatters import ConsoleFormatter, HookEventFormatter, redact

__all__ = [
    "EVENTS_FILE",
    "HookLogger",
    "build_event_file_handler",
    "build_console_handler",
    "ConsoleFormatter",
    "HookEventFormatter",
    "redact",
]
