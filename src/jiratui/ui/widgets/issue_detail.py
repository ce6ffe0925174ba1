"""Issue detail pane."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.containers import VerticalScroll
from textual.widgets import Static

if TYPE_CHECKING:
    from textual.app import ComposeResult

    from jiratui.core.snapshot import ViewSnapshot


class IssueDetail(VerticalScroll):
    """Fields and description of the open issue."""

    DEFAULT_CLASSES = "issue-detail"
    can_focus = False

    def compose(self) -> ComposeResult:
        yield Static("", id="detail-title", classes="detail-title")
        yield Static("", id="detail-fields", classes="detail-fields")
        yield Static("", id="detail-description", classes="detail-description")

    def show(self, snapshot: ViewSnapshot, issue_key: str) -> None:
        title = self.query_one("#detail-title", Static)
        fields = self.query_one("#detail-fields", Static)
        description = self.query_one("#detail-description", Static)

        issue = snapshot.issue
        if snapshot.issue_missing:
            title.update(Text(f"{issue_key} was not found", style="bold red"))
            fields.update(Text("It may have been deleted or moved. Press Esc to go back.", "dim"))
            description.update("")
            return
        if issue is None:
            title.update(Text(f"{issue_key}", style="bold"))
            fields.update(Text("Loading...", style="dim"))
            description.update("")
            return

        heading = Text(f"{issue.key}  ", style="bold")
        heading.append(issue.summary)
        if snapshot.issue_loading:
            heading.append("  (refreshing)", style="dim")
        title.update(heading)

        rows = Text()
        for label, value in (
            ("Status", issue.status),
            ("Type", issue.issue_type),
            ("Priority", issue.priority or "-"),
            ("Assignee", issue.assignee or "Unassigned"),
        ):
            rows.append(f"{label:<10}", style="dim")
            rows.append(f"{value}\n")
        fields.update(rows)

        if issue.description:
            description.update(Text(issue.description))
        elif snapshot.issue_loading:
            description.update(Text("Loading description...", style="dim"))
        else:
            description.update(Text("No description", style="dim italic"))
