"""Debug logging with in-app viewer support.

Captures both ``log()`` calls made through :data:`log` and records emitted by
the standard ``logging`` module into a ring buffer that the F12 modal shows.
Nothing is written to the terminal: the TUI owns the screen.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from jiratui.limits import MAX_LOG_LINES, MAX_LOG_MESSAGE_LENGTH


class LogSource(Enum):
    """Source of the log entry."""

    APP = "APP"
    LOGGING = "LOGGING"


@dataclass(slots=True)
class LogEntry:
    """A captured log entry."""

    group: str  # Level name (DEBUG, INFO, WARNING, ERROR)
    message: str
    timestamp: float
    source: LogSource


log_buffer: deque[LogEntry] = deque(maxlen=MAX_LOG_LINES)

# Incremented on clear so viewers can detect it
_buffer_generation: int = 0


class JiraTuiLogger:
    """Small logger that records into the ring buffer and Textual's devtools log."""

    def __call__(self, *args: object, **kwargs: Any) -> None:
        self.info(*args, **kwargs)

    def _log(self, level: str, *args: object, **kwargs: Any) -> None:
        output = " ".join(str(arg) for arg in args)
        if kwargs:
            key_values = " ".join(f"{key}={value!r}" for key, value in kwargs.items())
            output = f"{output} {key_values}" if output else key_values

        if len(output) > MAX_LOG_MESSAGE_LENGTH:
            output = output[:MAX_LOG_MESSAGE_LENGTH] + "... [truncated]"

        log_buffer.append(
            LogEntry(
                group=level,
                message=output,
                timestamp=time.time(),
                source=LogSource.APP,
            )
        )

        try:
            from textual import log as textual_log

            textual_log(output)
        except Exception:
            pass

    def debug(self, *args: object, **kwargs: Any) -> None:
        self._log("DEBUG", *args, **kwargs)

    def info(self, *args: object, **kwargs: Any) -> None:
        self._log("INFO", *args, **kwargs)

    def warning(self, *args: object, **kwargs: Any) -> None:
        self._log("WARNING", *args, **kwargs)

    def error(self, *args: object, **kwargs: Any) -> None:
        self._log("ERROR", *args, **kwargs)


class DebugLogHandler(logging.Handler):
    """Logging handler that captures records into the debug buffer."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            if len(msg) > MAX_LOG_MESSAGE_LENGTH:
                msg = msg[:MAX_LOG_MESSAGE_LENGTH] + "... [truncated]"
            log_buffer.append(
                LogEntry(
                    group=record.levelname,
                    message=msg,
                    timestamp=record.created,
                    source=LogSource.LOGGING,
                )
            )
        except Exception:
            self.handleError(record)


_debug_logging_initialized: bool = False


def setup_debug_logging(level: int = logging.DEBUG) -> None:
    """Route the ``jiratui`` logger hierarchy into the debug buffer.

    Idempotent: calling it more than once has no further effect.
    """
    global _debug_logging_initialized

    if _debug_logging_initialized:
        return

    handler = DebugLogHandler()
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    package_logger = logging.getLogger("jiratui")
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    # Keep records away from the root handlers, which would write over the TUI.
    package_logger.propagate = False

    _debug_logging_initialized = True

    log.info("Debug logging initialized - press F12 to view logs")


def clear_log_buffer() -> None:
    """Clear the log buffer."""
    global _buffer_generation
    log_buffer.clear()
    _buffer_generation += 1


def get_buffer_generation() -> int:
    """Get the current buffer generation (incremented on clear)."""
    return _buffer_generation


def format_entry(entry: LogEntry) -> str:
    """Plain-text rendering used by the export file."""
    ts = datetime.fromtimestamp(entry.timestamp).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
    source = "[PY]" if entry.source == LogSource.LOGGING else "[APP]"
    return f"{ts} {source} [{entry.group}] {entry.message}"


def export_logs_to_file(file_path: str | Path) -> int:
    """Export all buffered entries to ``file_path``.

    Returns:
        Number of log entries written.
    """
    output_path = Path(file_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", encoding="utf-8") as f:
        f.write("# jiratui debug log export\n")
        f.write(f"# Total entries: {len(log_buffer)}\n")
        f.write(f"# Buffer generation: {_buffer_generation}\n\n")
        for entry in log_buffer:
            f.write(format_entry(entry) + "\n")

    return len(log_buffer)


log = JiraTuiLogger()
