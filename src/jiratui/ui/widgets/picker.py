"""Overlay list used by the transition, sprint, board and project pickers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.widgets import Static

from jiratui.core.views import (
    BoardPickerView,
    ProjectPickerView,
    SprintPickerView,
    TransitionPickerView,
)

if TYPE_CHECKING:
    from jiratui.core.snapshot import ViewSnapshot


def picker_rows(snapshot: ViewSnapshot) -> tuple[str, list[str], str | None]:
    """Title, row labels and an optional placeholder for the open picker."""
    match snapshot.view:
        case TransitionPickerView(issue_key=key, pending=pending):
            title = f"Move {key} to..." if not pending else f"Moving {key}..."
            if snapshot.transitions is None:
                if snapshot.transitions_loading:
                    return title, [], "Loading transitions..."
                return title, [], "Transitions unavailable"
            rows = [f"{t.name}  → {t.to_status}" for t in snapshot.transitions]
            return title, rows, None if rows else "No transitions available"
        case SprintPickerView():
            active = snapshot.sprint.id if snapshot.sprint else None
            rows = [
                f"{'● ' if s.id == active else '  '}{s.name}  [{s.state}]"
                for s in snapshot.sprints
            ]
            empty = "Loading sprints..." if snapshot.metadata_loading else "No sprints"
            return "Select sprint", rows, None if rows else empty
        case BoardPickerView():
            active = snapshot.board.id if snapshot.board else None
            rows = [
                f"{'● ' if b.id == active else '  '}{b.name}"
                + (f"  ({b.project_key})" if b.project_key else "")
                for b in snapshot.boards
            ]
            empty = "Loading boards..." if snapshot.metadata_loading else "No boards"
            return "Select board", rows, None if rows else empty
        case ProjectPickerView():
            rows = [
                f"{'● ' if p.key == snapshot.project_key else '  '}{p.key}  {p.name}"
                for p in snapshot.projects
            ]
            empty = "Loading projects..." if snapshot.metadata_loading else "No projects"
            return "Select project", rows, None if rows else empty
        case _:
            return "", [], None


class PickerPanel(Static):
    """Bordered list with a cursor row."""

    DEFAULT_CLASSES = "picker-panel"

    def show(self, snapshot: ViewSnapshot) -> None:
        title, rows, placeholder = picker_rows(snapshot)
        self.border_title = title
        if placeholder is not None:
            self.update(Text(placeholder, style="dim"))
            return
        cursor = snapshot.picker_cursor
        text = Text()
        for index, label in enumerate(rows):
            line = Text(label, no_wrap=True, overflow="ellipsis")
            if index == cursor:
                line.stylize("reverse")
            text.append_text(line)
            if index < len(rows) - 1:
                text.append("\n")
        self.update(text)
