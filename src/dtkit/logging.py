"""Opt-in loguru logging for dtkit.

dtkit never writes log output unless asked to. `enable_logging()` turns the
package logger on and attaches one filtered handler; the returned
`LoggingHandle` removes it again, either explicitly or as a context manager.

What gets logged, by level:

- TRAINING (25): one record when induction starts and one when it finishes.
- INFO: models saved, loaded or rendered to disk.
- DEBUG: each `enable_logging()` call, and every chosen split and leaf with structured fields
  (attribute, predicate, pivot, gain, samples).
- TRACE: every scored candidate split.

Note:
    Importing this module removes loguru's default stderr handler (ID 0) so
    records are not printed twice once `enable_logging()` adds its own. If
    the application replaced handler 0 before importing dtkit, nothing is
    removed.
"""

from __future__ import annotations

import contextlib
import sys
import threading
import warnings
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Final, Literal, TextIO, TypeAlias

from loguru import logger

if TYPE_CHECKING:
    from types import TracebackType

    from loguru import Record

PACKAGE_NAME: Final[str] = __name__.split(".")[0]

with contextlib.suppress(ValueError):
    logger.remove(0)

TRAINING_LEVEL: Final[str] = "TRAINING"
TRAINING_LEVEL_NUMBER: Final[int] = 25  # Between INFO (20) and WARNING (30)


def _register_training_level() -> None:
    """Register the TRAINING level with loguru, once per process.

    loguru cannot renumber an existing level, so a TRAINING level registered
    elsewhere with another number only triggers a UserWarning.
    """
    try:
        existing_level = logger.level(TRAINING_LEVEL)
    except ValueError:
        logger.level(TRAINING_LEVEL, no=TRAINING_LEVEL_NUMBER, icon="🌳")
        return
    if existing_level.no != TRAINING_LEVEL_NUMBER:
        warnings.warn(
            f"TRAINING level already registered with numeric value {existing_level.no},"
            f" expected {TRAINING_LEVEL_NUMBER}",
            stacklevel=2,
        )


_register_training_level()

LogLevel: TypeAlias = Literal["TRACE", "DEBUG", "INFO", "TRAINING", "WARNING", "ERROR", "CRITICAL"]

LogFormat: TypeAlias = Literal["short", "full", "structured"]

LogSink: TypeAlias = TextIO | str | Path

_LEVEL_AND_TIME: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "  # noqa: RUF027 - loguru format string
)

_LOG_FORMATS: Final[dict[LogFormat, str]] = {
    "short": _LEVEL_AND_TIME + "<cyan>{function}</cyan> - <level>{message}</level>",
    "full": (
        _LEVEL_AND_TIME + "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    ),
    "structured": _LEVEL_AND_TIME + "<cyan>{function}</cyan> - <level>{message}</level> | {extra}",
}


class LoggingHandle:
    """Owner of one handler added by `enable_logging()`.

    A handle remembers the level and format its handler was added with, so a
    caller can tell which of several handlers is which. Handles are
    independent: disabling one leaves the others running. The package logger
    is switched off again only when the last handle goes.

    Attributes:
        handler_id (int | None): The loguru handler ID, or None once disabled.
        level (LogLevel): Minimum level the handler emits.
        log_format (LogFormat): Name of the format the handler renders with.

    Examples:
        Log the whole life of a model, from training to disk, into one file:

        >>> with enable_logging(level="INFO", sink="dtkit.log") as handle:  # doctest: +SKIP
        ...     model = train("sex", {"person"}, records)
        ...     model.predict({"hairLength": 8, "weight": 290, "age": 38})
        ...     path = save_model(model, "tree.json")
        ...     handle.is_active
        'male'
        True
        >>> handle.is_active  # doctest: +SKIP
        False

        Watch each split while a second handle keeps the TRAINING summary:

        >>> summary = enable_logging()  # doctest: +SKIP
        >>> splits = enable_logging(level="DEBUG", log_format="structured")  # doctest: +SKIP
        >>> model = train("sex", {"person"}, records)  # doctest: +SKIP
        >>> splits.disable()  # doctest: +SKIP
        >>> summary  # doctest: +SKIP
        LoggingHandle(handler_id=1, level='TRAINING', log_format='short', active=True)
    """

    _active_ids: ClassVar[set[int]] = set()
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, handler_id: int, *, level: LogLevel = TRAINING_LEVEL, log_format: LogFormat = "short") -> None:
        """Track a handler added with `logger.add()`.

        Args:
            handler_id (int): The loguru handler ID.
            level (LogLevel): Minimum level the handler was added with.
            log_format (LogFormat): Format the handler was added with.
        """
        self.handler_id: int | None = handler_id
        self.level = level
        self.log_format = log_format
        with LoggingHandle._lock:
            LoggingHandle._active_ids.add(handler_id)

    @property
    def is_active(self) -> bool:
        """Whether the handler is still attached."""
        return self.handler_id is not None

    def disable(self) -> None:
        """Detach the handler; turn dtkit logging off if no other handle is active.

        Calling it again does nothing. A handler that was already removed
        through `logger.remove()` directly is treated as detached.
        """
        with LoggingHandle._lock:
            if self.handler_id is None:
                return
            handler_id, self.handler_id = self.handler_id, None
            LoggingHandle._active_ids.discard(handler_id)
            with contextlib.suppress(ValueError):
                logger.remove(handler_id)
            if not LoggingHandle._active_ids:
                logger.disable(PACKAGE_NAME)

    def __enter__(self) -> LoggingHandle:
        """Return the handle itself.

        Returns:
            LoggingHandle: This handle.
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Disable the handle, whether or not the block raised.

        Args:
            exc_type (type[BaseException] | None): The exception type, if raised.
            exc_val (BaseException | None): The exception instance, if raised.
            exc_tb (TracebackType | None): The traceback, if raised.
        """
        self.disable()

    def __repr__(self) -> str:
        return (
            f"LoggingHandle(handler_id={self.handler_id}, level={self.level!r}, "
            f"log_format={self.log_format!r}, active={self.is_active})"
        )

    @classmethod
    def get_active_handle_count(cls) -> int:
        """Return how many handles have not been disabled yet.

        Returns:
            int: Number of active handles.
        """
        with cls._lock:
            return len(cls._active_ids)


def enable_logging(
    *,
    level: LogLevel = TRAINING_LEVEL,
    log_format: LogFormat = "short",
    sink: LogSink | None = None,
) -> LoggingHandle:
    """Turn on dtkit logging and attach a handler for it.

    Args:
        level (LogLevel): Minimum level to emit. The default, "TRAINING",
            reports only when training starts and finishes. "DEBUG" adds each
            chosen split and leaf; "TRACE" adds each scored candidate.
        log_format (LogFormat): "short" shows the function name, "full" shows
            module:function:line, and "structured" appends the structured
            fields of each record.
        sink (LogSink | None): Where to write. A text stream, or a file path
            that loguru appends to. Defaults to the current `sys.stderr`.

    Returns:
        LoggingHandle: Handle that removes the handler when disabled.

    Examples:
        >>> with enable_logging(level="DEBUG", log_format="structured"):  # doctest: +SKIP
        ...     model = train("sex", {"person"}, records)
    """
    logger.enable(PACKAGE_NAME)
    handler_id = logger.add(
        sys.stderr if sink is None else sink,
        level=level,
        filter=_from_package,
        format=_LOG_FORMATS[log_format],
    )
    logger.debug("Logging enabled", level=level, log_format=log_format)
    return LoggingHandle(handler_id, level=level, log_format=log_format)


def _from_package(record: Record) -> bool:
    """Return True for records emitted by dtkit modules.

    Args:
        record (Record): The loguru record.

    Returns:
        bool: Whether the record's module belongs to dtkit.
    """
    name = record["name"]
    return name is not None and name.startswith(PACKAGE_NAME)
