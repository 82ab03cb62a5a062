from __future__ import annotations

import logging
from logging import Handler
from pathlib import Path

from .formatters import ConsoleFormatter, HookEventFormatter


def build_event_file_handler(path: Path, level: int = logging.INFO) -> Handler:
    """Append JSON lines to ``path``; the file survives restarts."""
    path.parent.mkdir(parents=True, exist_ok=True)
    h = logging.FileHandler(path, encoding="utf-8", mode="a")
    h.setLevel(level)
    h.setFormatter(HookEventFormatter())
    return h


def build_console_handler(level: int = logging.INFO) -> Handler:
    h = logging.StreamHandler()
    h.setLevel(level)
    h.setFormatter(ConsoleFormatter())
    return h
