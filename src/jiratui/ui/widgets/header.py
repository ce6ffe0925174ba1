"""Header widget: board, sprint and the open list."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.widgets import Static

if TYPE_CHECKING:
    from jiratui.core.snapshot import ViewSnapshot

HEADER_SEPARATOR = " │ "


class BoardHeader(Static):
    """One-line header.

    Layout:
    ┃ jiratui │ Team board (PROJ) │ Sprint 12 [active] │ Sprint ┃
    """

    DEFAULT_CLASSES = "board-header"

    def show(self, snapshot: ViewSnapshot) -> None:
        text = Text("jiratui", style="bold")
        text.append(HEADER_SEPARATOR, style="dim")

        board = snapshot.board
        if board is None:
            text.append("loading boards..." if snapshot.metadata_loading else "no board", "dim")
        else:
            text.append(board.name)
            if board.project_key:
                text.append(f" ({board.project_key})", style="dim")

        text.append(HEADER_SEPARATOR, style="dim")
        sprint = snapshot.sprint
        if sprint is None:
            text.append("no sprint", style="dim")
        else:
            text.append(sprint.name)
            text.append(f" [{sprint.state}]", style="dim")

        text.append(HEADER_SEPARATOR, style="dim")
        text.append(snapshot.listing.title, style="bold")
        text.append(HEADER_SEPARATOR, style="dim")
        text.append("? help", style="dim")
        self.update(text)
