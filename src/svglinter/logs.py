"""Logging helpers.

Every Linting and Reporter owns a ScopedLogger whose threshold is handed in
explicitly, so API users and the CLI can run lintings at different verbosity
in the same process.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import LogLevel

LOGGER_NAME = "svglinter"

_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


def to_logging_level(level: LogLevel | str | int) -> int:
    """Translate a LogLevel (or its string value) to a stdlib logging level."""
    if isinstance(level, int):
        return level
    return _LEVELS[LogLevel(level)]


class ScopedLogger(logging.LoggerAdapter):
    """Logger adapter that prefixes a scope and applies its own threshold."""

    def __init__(self, logger: logging.Logger, scope: str, level: LogLevel | str | int = LogLevel.INFO):
        super().__init__(logger, {"scope": scope})
        self.scope = scope
        self.threshold = to_logging_level(level)

    def isEnabledFor(self, level: int) -> bool:
        return level >= self.threshold and self.logger.isEnabledFor(level)

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return f"[{self.scope}] {msg}", kwargs


def get_scoped_logger(scope: str, level: LogLevel | str | int = LogLevel.INFO,
                      name: str = LOGGER_NAME) -> ScopedLogger:
    return ScopedLogger(logging.getLogger(name), scope, level)


def configure_logging(level: LogLevel | str = LogLevel.INFO, console: Console | None = None) -> logging.Logger:
    """Install a rich handler on the package logger (CLI mode)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(to_logging_level(level))
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger
