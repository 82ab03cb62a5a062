from __future__ import annotations

import logging
from pathlib import Path

from dependency_injector.resources import Resource

from .handlers import build_console_handler, build_event_file_handler


EVENTS_FILE = "github_hooks.jsonl"


class HookLogger(Resource):
    """Structured logger handed to the core as its LoggerPort.

    Writes JSON lines to ``<logs_dir>/github_hooks.jsonl`` and, optionally,
    human-readable lines to the console.
    """

    def init(
        self,
        *,
        logs_dir: Path | None = None,
        logger_name: str = "github_hooks",
        console_output: bool = False,
        level: str = "INFO",
    ) -> "HookLogger":
        """Attach handlers and return self (dependency_injector Resource pattern)."""
        numeric_level = getattr(logging, level.upper(), logging.INFO)
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(numeric_level)
        self._logger.propagate = False

        self._logger.handlers.clear()
        self._handlers: list[logging.Handler] = []

        if logs_dir is not None:
            file_handler = build_event_file_handler(logs_dir / EVENTS_FILE, level=numeric_level)
            self._logger.addHandler(file_handler)
            self._handlers.append(file_handler)

        if console_output:
            console_handler = build_console_handler(level=numeric_level)
            self._logger.addHandler(console_handler)
            self._handlers.append(console_handler)

        return self

    def shutdown(self, resource: "HookLogger") -> None:
        """Flush and close handlers so the events file is released."""
        for handler in self._handlers:
            handler.flush()
            handler.close()
        self._logger.handlers.clear()

    def debug(self, message: str, **fields) -> None:
        self._logger.debug(message, extra=fields or None)

    def info(self, message: str, **fields) -> None:
        self._logger.info(message, extra=fields or None)

    def warning(self, message: str, **fields) -> None:
        self._logger.warning(message, extra=fields or None)

    def error(self, message: str, exc_info: bool = False, **fields) -> None:
        self._logger.error(message, extra=fields or None, exc_info=exc_info)

    def exception(self, message: str, **fields) -> None:
        self._logger.exception(message, extra=fields or None)
