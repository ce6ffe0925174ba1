"""Issue list for the sprint and backlog views."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.widgets import Static

if TYPE_CHECKING:
    from jiratui.core.models.entities import Issue
    from jiratui.core.snapshot import ListingSnapshot

# Status category -> row style for the status column
STATUS_STYLES = {
    "new": "bold cyan",
    "indeterminate": "bold yellow",
    "done": "bold green",
}


def visible_window(cursor: int, count: int, height: int) -> tuple[int, int]:
    """Slice of rows to draw so the cursor row stays on screen."""
    if height <= 0 or count <= height:
        return 0, count
    start = max(0, min(cursor - height // 2, count - height))
    return start, start + height


def format_row(issue: Issue, selected: bool) -> Text:
    row = Text(no_wrap=True, overflow="ellipsis")
    row.append(f"{issue.key:<12}", style="bold")
    row.append(f"{issue.issue_type[:10]:<11}", style="dim")
    row.append(f"{issue.status[:16]:<17}", style=STATUS_STYLES.get(issue.status_category or "", ""))
    row.append(issue.summary)
    if issue.assignee:
        row.append(f"  @{issue.assignee}", style="dim italic")
    if selected:
        row.stylize("reverse")
    return row


class IssueList(Static):
    """Windowed list of issues with a highlighted cursor row."""

    DEFAULT_CLASSES = "issue-list"

    def show(self, listing: ListingSnapshot) -> None:
        if listing.error:
            self.update(Text(f"{listing.title}: {listing.error}", style="bold red"))
            return
        if not listing.issues:
            if listing.loading or not listing.loaded:
                message = f"Loading {listing.title.lower()}..."
            else:
                message = f"No issues in the {listing.title.lower()}"
            self.update(Text(message, style="dim"))
            return

        footer_lines = 1
        height = max(1, self.size.height - footer_lines)
        start, end = visible_window(listing.cursor, len(listing.issues), height)

        text = Text()
        for index in range(start, end):
            text.append_text(format_row(listing.issues[index], index == listing.cursor))
            text.append("\n")
        text.append(self._footer(listing), style="dim")
        self.update(text)

    @staticmethod
    def _footer(listing: ListingSnapshot) -> str:
        loaded = len(listing.issues)
        total = f" of {listing.total}" if listing.total is not None else ""
        footer = f"{listing.cursor + 1}/{loaded} loaded{total}"
        if listing.loading:
            footer += " · loading..."
        elif listing.has_more:
            footer += " · scroll past the end for more"
        return footer
