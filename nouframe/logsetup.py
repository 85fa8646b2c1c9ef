"""Application logger setup with console and file output."""

from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass
from typing import Optional

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOGGER_NAME = "APP"
DEFAULT_LOG_FILE = "logs.txt"
_PATTERN = "[%(levelname)s] %(name)s: %(message)s"

_COLOURS = {
    TRACE: "\033[36m",
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;41m",
}
_RESET = "\033[0m"


@dataclass
class LoggerSettings:
    output_to_console: bool = True
    output_to_file: bool = False
    log_file_name: str = ""


class _Formatter(logging.Formatter):
    """Lower-case level names, optionally coloured by level."""

    def __init__(self, colour: bool = False) -> None:
        super().__init__(_PATTERN)
        self._colour = colour

    def format(self, record: logging.LogRecord) -> str:
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = record.levelname.lower()
        text = super().format(record)
        if self._colour:
            return f"{_COLOURS.get(record.levelno, '')}{text}{_RESET}"
        return text


@dataclass
class _State:
    logger: Optional[logging.Logger] = None


_state = _State()


def init_logging(settings: Optional[LoggerSettings] = None) -> logging.Logger:
    """Configure the application logger once; later calls return it unchanged."""
    if _state.logger is not None:
        return _state.logger
    settings = settings or LoggerSettings()
    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False
    logger.setLevel(TRACE)
    if settings.output_to_file:
        handler = logging.FileHandler(settings.log_file_name or DEFAULT_LOG_FILE)
        handler.setFormatter(_Formatter())
        logger.addHandler(handler)
    if settings.output_to_console:
        stream = sys.stdout
        console = logging.StreamHandler(stream)
        isatty = getattr(stream, "isatty", None)
        console.setFormatter(_Formatter(colour=bool(isatty and isatty())))
        logger.addHandler(console)
    _state.logger = logger
    return logger


def shutdown_logging() -> None:
    """Close and detach all handlers of the application logger."""
    logger = _state.logger
    if logger is None:
        return
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    _state.logger = None


def get_logger() -> logging.Logger:
    """The configured application logger."""
    if _state.logger is None:
        raise RuntimeError("logging has not been initialized")
    return _state.logger


def dump_stack_trace() -> str:
    """The caller's stack, innermost frame first, one tab-indented line per frame."""
    frames = traceback.extract_stack()[:-1]
    return "".join(
        f"\t{frame.name}@{frame.filename} line {frame.lineno}\n"
        for frame in reversed(frames)
    )