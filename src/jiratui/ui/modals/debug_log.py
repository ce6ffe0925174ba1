"""Debug log viewer modal for in-app debugging."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from rich.markup import escape
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Label, RichLog, Rule

from jiratui.debug_log import (
    LogEntry,
    LogSource,
    clear_log_buffer,
    export_logs_to_file,
    get_buffer_generation,
    log_buffer,
)
from jiratui.keybindings import DEBUG_LOG_BINDINGS
from jiratui.paths import get_debug_log_path

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.timer import Timer

LEVEL_COLORS = {
    "DEBUG": "dim",
    "INFO": "blue",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold red",
}


class DebugLogModal(ModalScreen[None]):
    """Hidden debug log viewer modal (F12)."""

    BINDINGS = DEBUG_LOG_BINDINGS

    _log_refresh_timer: Timer | None = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._line_count = 0
        self._buffer_generation = 0

    def compose(self) -> ComposeResult:
        with Vertical(id="debug-log-container"):
            yield Label("Debug Logs", classes="modal-title")
            yield Label(
                "[dim]F12 to toggle | c to clear | s to save | Escape to close[/dim]",
                classes="modal-subtitle",
            )
            yield Rule()
            yield RichLog(id="debug-log", markup=True, auto_scroll=True, wrap=True)
        yield Footer()

    def on_mount(self) -> None:
        self._buffer_generation = get_buffer_generation()
        self._update_logs()
        self._log_refresh_timer = self.set_interval(0.5, self._update_logs)

    def on_unmount(self) -> None:
        if self._log_refresh_timer is not None:
            self._log_refresh_timer.stop()
            self._log_refresh_timer = None

    def _update_logs(self) -> None:
        rich_log = self.query_one("#debug-log", RichLog)
        generation = get_buffer_generation()
        buffer_len = len(log_buffer)
        # Cleared elsewhere, or the ring buffer wrapped: redraw from scratch
        if generation != self._buffer_generation or buffer_len < self._line_count:
            self._buffer_generation = generation
            self._line_count = 0
            rich_log.clear()

        if buffer_len > self._line_count:
            for entry in list(log_buffer)[self._line_count :]:
                rich_log.write(self._format_entry(entry))
            self._line_count = buffer_len

    def _format_entry(self, entry: LogEntry) -> str:
        ts = datetime.fromtimestamp(entry.timestamp).strftime("%H:%M:%S")
        color = LEVEL_COLORS.get(entry.group, "white")
        source = " [PY]" if entry.source == LogSource.LOGGING else ""
        return f"[{color}]{ts} \\[{entry.group}]{source}[/{color}] {escape(entry.message)}"

    def action_close(self) -> None:
        self.dismiss(None)

    def action_clear_logs(self) -> None:
        clear_log_buffer()
        self._buffer_generation = get_buffer_generation()
        self._line_count = 0
        rich_log = self.query_one("#debug-log", RichLog)
        rich_log.clear()
        rich_log.write("[dim]Logs cleared[/dim]")

    def action_save_logs(self) -> None:
        """Export the buffer to the debug log file in the data directory."""
        rich_log = self.query_one("#debug-log", RichLog)
        log_path = get_debug_log_path()
        try:
            count = export_logs_to_file(log_path)
        except OSError as exc:
            rich_log.write(f"[red]Failed to export logs: {escape(str(exc))}[/red]")
            return
        rich_log.write(f"[green]Exported {count} log entries to {escape(str(log_path))}[/green]")
