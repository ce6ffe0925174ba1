"""Single-line text input overlay for comments and summary edits."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.widgets import Static

if TYPE_CHECKING:
    from jiratui.core.views import TextInputView


def render_buffer(buffer: str, caret: int) -> Text:
    """Buffer with the caret drawn as a reversed cell."""
    text = Text(buffer[:caret])
    text.append(buffer[caret : caret + 1] or " ", style="reverse")
    text.append(buffer[caret + 1 :])
    return text


class InputOverlay(Static):
    DEFAULT_CLASSES = "input-overlay"

    def show(self, view: TextInputView) -> None:
        subject = view.issue_key or f"sprint {view.target}"
        self.border_title = f"{view.purpose.label} · {subject}"
        self.border_subtitle = "Submitting..." if view.pending else "Enter submit · Esc cancel"
        self.update(render_buffer(view.buffer, view.caret))
