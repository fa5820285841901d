"""
Console logging for limesub.

INFO and below go to stdout, WARNING and above to stderr. While a file is
being processed (`source_context`), every record is prefixed with its name so
batch output stays readable.
"""
import logging
import sys
from contextlib import contextmanager
from typing import Iterator, List

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOGGER_NAME = "limesub"
LOG_FORMAT = "[%(levelname)s] %(source)s%(message)s"

_LEVEL_NAMES = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_sources: List[str] = []


class _ConsoleHandler(logging.StreamHandler):
    """StreamHandler bound to sys.stdout/sys.stderr by name, looked up per record."""

    def __init__(self, stream_name: str, min_level: int = logging.NOTSET, max_level: int = logging.CRITICAL):
        super().__init__()
        self._stream_name = stream_name
        self.setLevel(min_level)
        self._max_level = max_level

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno > self._max_level:
            return
        self.stream = getattr(sys, self._stream_name)
        super().emit(record)


class _SourceFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.source = f"{_sources[-1]}: " if _sources else ""
        return True


def _build_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in (
        _ConsoleHandler("stdout", max_level=logging.INFO),
        _ConsoleHandler("stderr", min_level=logging.WARNING),
    ):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.addFilter(_SourceFilter())
    logger.propagate = False
    return logger


_LOGGER = _build_logger()


def resolve_level(name: str) -> int:
    """Map 'trace'/'debug'/'info'/'warn'/'error' (any case) to a level; unknown -> INFO."""
    return _LEVEL_NAMES.get(str(name or "").strip().lower(), logging.INFO)


def set_log_level(name: str) -> None:
    _LOGGER.setLevel(resolve_level(name))


def is_enabled(name: str) -> bool:
    return _LOGGER.isEnabledFor(resolve_level(name))


@contextmanager
def source_context(name: str) -> Iterator[None]:
    """Prefix records logged inside the block with `name: `."""
    _sources.append(name)
    try:
        yield
    finally:
        _sources.pop()


def log_trace(message: str) -> None:
    _LOGGER.log(TRACE, message)


def log_debug(message: str) -> None:
    _LOGGER.debug(message)


def log_info(message: str) -> None:
    _LOGGER.info(message)


def log_warn(message: str) -> None:
    _LOGGER.warning(message)


def log_error(message: str) -> None:
    _LOGGER.error(message)


def log_skipped(decoder: str, count: int, what: str) -> None:
    """Debug note for entries a decoder dropped; silent when nothing was skipped."""
    if count:
        log_debug(f"{decoder}: skipped {count} {what}")


def log_trace_block(title: str, body: str) -> None:
    """Dump a multi-line document at TRACE level between BEGIN/END markers."""
    if not _LOGGER.isEnabledFor(TRACE):
        return
    log_trace(f"----- {title} BEGIN -----")
    for line in (body or "").splitlines() or [""]:
        log_trace(line)
    log_trace(f"----- {title} END -----")
