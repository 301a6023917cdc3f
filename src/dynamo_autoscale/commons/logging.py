"""
Centralized logging.

One process-wide logger named `dynamo`, built lazily on first use and frozen
afterwards. Records go to a single stderr sink that is flushed after every
write, rendered as:

    2024-01-02 03:04:05.678 [ERROR] 123 h1 : disk at 91%

Components get the logger from `get_logger()` (alias `logger()`), from the
`LoggingCapability` mixin, or by having a `LoggerHandle` injected.
"""

from __future__ import annotations

import enum
import logging
import re
import socket
import sys
import threading
import time
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, field_validator  # type: ignore[import-not-found]

from dynamo_autoscale.commons.exceptions import (
    LoggerFrozenException,
    LoggerSinkException,
)
from dynamo_autoscale.core.settings import Settings

LOGGER_NAME = "dynamo"
LOGGER_FORMAT = "%d [%5L] %p %h : %m"
LOGGER_TIME_FORMAT = "%F %T.%L"


class Severity(enum.IntEnum):
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    FATAL = logging.CRITICAL

    @property
    def label(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value: Any) -> Severity | None:
        """Case-insensitive lookup; None when the value is empty or unknown."""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return None
        name = str(value).strip().upper()
        name = _SEVERITY_ALIASES.get(name, name)
        return cls.__members__.get(name)


_SEVERITY_ALIASES = {"WARNING": "WARN", "CRITICAL": "FATAL"}

LOGGER_LEVEL_DEFAULT = Severity.INFO

logging.addLevelName(int(Severity.TRACE), "TRACE")


class LoggerConfig(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = LOGGER_NAME
    level: Severity = LOGGER_LEVEL_DEFAULT
    message_format: str = LOGGER_FORMAT
    time_format: str = LOGGER_TIME_FORMAT
    # None means sys.stderr, looked up when the logger is built.
    stream: Any = None

    @field_validator("level", mode="before")
    @classmethod
    def coerce_level(cls, value: Any) -> Severity:
        return Severity.parse(value) or LOGGER_LEVEL_DEFAULT


def level_label(levelno: int, fallback: str) -> str:
    try:
        return Severity(levelno).label
    except ValueError:
        return fallback


_PLACEHOLDER = re.compile(r"%(-?\d+)?([A-Za-z%])")
_TIME_DIRECTIVE = re.compile(r"%([FTL%])")

_FIELDS: dict[str, Callable[[PatternFormatter, logging.LogRecord], Any]] = {
    "d": lambda f, r: f.formatTime(r),
    "L": lambda f, r: level_label(r.levelno, r.levelname),
    "l": lambda f, r: level_label(r.levelno, r.levelname)[:1],
    "p": lambda f, r: r.process,
    "h": lambda f, r: f.hostname,
    "m": lambda f, r: r.message,
    "N": lambda f, r: r.name,
    "t": lambda f, r: r.thread,
    "F": lambda f, r: r.pathname,
    "f": lambda f, r: r.filename,
    "n": lambda f, r: r.lineno,
    "M": lambda f, r: r.funcName,
}


class PatternFormatter(logging.Formatter):
    """
    Renders `%d [%5L] %p %h : %m` style templates.

    A placeholder may carry a printf width (`%5L` right-aligns to 5 columns,
    `%-5L` left-aligns). Unknown placeholders are written out unchanged.
    The time template understands `%F`, `%T` and `%L` (milliseconds) on top
    of the usual strftime directives.
    """

    def __init__(
        self,
        message_format: str = LOGGER_FORMAT,
        time_format: str = LOGGER_TIME_FORMAT,
        hostname: str | None = None,
    ):
        super().__init__()
        self.message_format = message_format
        self.time_format = time_format
        self.hostname = hostname or socket.gethostname()

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        def expand(match: re.Match[str]) -> str:
            directive = match.group(1)
            if directive == "F":
                return "%Y-%m-%d"
            if directive == "T":
                return "%H:%M:%S"
            if directive == "L":
                return f"{int(record.msecs):03d}"
            return "%%"

        pattern = _TIME_DIRECTIVE.sub(expand, datefmt or self.time_format)
        return time.strftime(pattern, self.converter(record.created))

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        line = _PLACEHOLDER.sub(lambda m: self._render(m, record), self.message_format)
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            line = f"{line}\n{record.exc_text}"
        if record.stack_info:
            line = f"{line}\n{self.formatStack(record.stack_info)}"
        return line

    def _render(self, match: re.Match[str], record: logging.LogRecord) -> str:
        width, key = match.groups()
        if key == "%":
            return "%"
        field = _FIELDS.get(key)
        if field is None:
            return match.group(0)
        value = str(field(self, record))
        return f"%{width}s" % value if width else value


def ensure_writable(stream: Any) -> None:
    if stream is None:
        raise LoggerSinkException("log sink is missing")
    if getattr(stream, "closed", False):
        raise LoggerSinkException("log sink is closed", details=sink_name(stream))
    writable = getattr(stream, "writable", None)
    if not callable(getattr(stream, "write", None)) or (
        callable(writable) and not writable()
    ):
        raise LoggerSinkException("log sink is not writable", details=sink_name(stream))


def sink_name(stream: Any) -> str:
    return str(getattr(stream, "name", type(stream).__name__))


class SyncStreamHandler(logging.StreamHandler):
    """
    Writes each record to one stream and flushes before returning.

    Write failures raise `LoggerSinkException` instead of being reported and
    dropped the way `logging.Handler.handleError` does.
    """

    def __init__(self, stream: Any):
        ensure_writable(stream)
        super().__init__(stream)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:
            # Bad format arguments are the caller's bug, not a sink failure.
            self.handleError(record)
            return
        try:
            self.stream.write(msg + self.terminator)
            self.flush()
        except (OSError, ValueError) as exc:
            raise LoggerSinkException(
                "log sink write failed", details=f"{sink_name(self.stream)}: {exc}"
            ) from exc


class LoggerHandle(logging.LoggerAdapter):
    """The shared logger, with trace/warn/fatal on top of the stdlib methods."""

    def __init__(self, logger: logging.Logger, config: LoggerConfig):
        super().__init__(logger, {})
        self.config = config

    @property
    def level(self) -> Severity:
        return Severity(self.logger.level)

    @property
    def sink(self) -> str:
        return sink_name(self.logger.handlers[0].stream)

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        return msg, kwargs

    def trace(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log_at(Severity.TRACE, msg, args, kwargs)

    def warn(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log_at(Severity.WARN, msg, args, kwargs)

    def fatal(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self._log_at(Severity.FATAL, msg, args, kwargs)

    def _log_at(self, level: Severity, msg: Any, args: tuple, kwargs: dict) -> None:
        # Skip trace/warn/fatal and this helper so %F/%n/%M name the caller.
        kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 2
        self.log(int(level), msg, *args, **kwargs)


def load_config(
    settings: Settings | None = None, default_level: Severity | str | None = None
) -> LoggerConfig:
    """
    Resolve the logger configuration from process settings.

    The level is the LOG_LEVEL override when it names a known severity,
    otherwise `default_level` when given and known, otherwise info.
    """
    settings = settings or Settings()
    level = (
        Severity.parse(settings.LOG_LEVEL)
        or Severity.parse(default_level)
        or LOGGER_LEVEL_DEFAULT
    )
    return LoggerConfig(name=settings.LOG_NAME, level=level)


def build_logger(config: LoggerConfig) -> LoggerHandle:
    """
    Configure the stdlib logger named `config.name` and wrap it.

    Refuses the name of the process-wide logger once that one exists, so its
    level and sink stay frozen.
    """
    shared = _HANDLE
    if shared is not None and shared.config.name == config.name:
        raise LoggerFrozenException(
            "process-wide logger is already configured", details=config.name
        )
    stream = config.stream if config.stream is not None else sys.stderr
    handler = SyncStreamHandler(stream)
    handler.setFormatter(PatternFormatter(config.message_format, config.time_format))
    handler.setLevel(config.level)

    base = logging.getLogger(config.name)
    for existing in list(base.handlers):
        base.removeHandler(existing)
    base.addHandler(handler)
    base.setLevel(config.level)
    base.propagate = False
    return LoggerHandle(base, config)


_LOCK = threading.Lock()
_HANDLE: LoggerHandle | None = None


def _initialize(default_level: Severity | str | None) -> LoggerHandle:
    settings = Settings()
    config = load_config(settings, default_level)
    handle = build_logger(config)
    raw = (settings.LOG_LEVEL or "").strip()
    if raw and Severity.parse(raw) is None:
        handle.warn(
            "unrecognized LOG_LEVEL %r, using %s", settings.LOG_LEVEL, config.level.label
        )
    return handle


def get_logger(default_level: Severity | str | None = None) -> LoggerHandle:
    """
    Return the process-wide logger, building it on first call.

    `default_level` only matters for the call that builds the logger; after
    that the configuration is frozen and the argument is ignored.
    """
    global _HANDLE
    handle = _HANDLE
    if handle is not None:
        return handle
    with _LOCK:
        if _HANDLE is None:
            _HANDLE = _initialize(default_level)
        return _HANDLE


logger = get_logger


class SharedLogger:
    """Descriptor resolving to the process-wide logger on instances and classes."""

    def __get__(self, instance: Any, owner: type | None = None) -> LoggerHandle:
        return get_logger()


class LoggingCapability:
    """Mixin: `self.log` and `cls.log` are the shared logger. Holds no state."""

    __slots__ = ()

    log = SharedLogger()


@runtime_checkable
class SupportsLogging(Protocol):
    log: LoggerHandle
