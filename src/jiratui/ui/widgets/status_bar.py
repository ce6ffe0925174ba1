"""StatusBar widget for status messages and contextual key hints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.widget import Widget
from textual.widgets import Static

from jiratui.core.models.enums import StatusLevel

if TYPE_CHECKING:
    from textual.app import ComposeResult

    from jiratui.core.snapshot import StatusMessage

LEVEL_STYLES = {
    StatusLevel.INFO: "",
    StatusLevel.SUCCESS: "green",
    StatusLevel.WARNING: "yellow",
    StatusLevel.ERROR: "bold red",
}


def render_hints(hints: tuple[tuple[str, str], ...], separator: str = " · ") -> Text:
    text = Text()
    for index, (key, description) in enumerate(hints):
        if index:
            text.append(separator, style="dim")
        text.append(key, style="bold")
        text.append(f" {description}")
    return text


class StatusBar(Widget):
    """Status message on the left, key hints on the right."""

    DEFAULT_CLASSES = "status-bar"

    def compose(self) -> ComposeResult:
        yield Static("", classes="status-left")
        yield Static("", classes="status-right")

    def show(self, status: StatusMessage | None, hints: tuple[tuple[str, str], ...]) -> None:
        left = self.query_one(".status-left", Static)
        right = self.query_one(".status-right", Static)
        if status is None:
            left.update("")
        else:
            left.update(Text(status.text, style=LEVEL_STYLES[status.level]))
        right.update(render_hints(hints))
