"""Board screen: renders controller snapshots and forwards keys.

The screen holds no state of its own. Every key goes to the controller
(except the help and debug-log keys, which open modals outside the view
state machine) and every redraw starts from a fresh snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.containers import Container
from textual.screen import Screen
from textual.widgets import ContentSwitcher

from jiratui.core.views import (
    BacklogView,
    BoardPickerView,
    IssueDetailView,
    ProjectPickerView,
    SprintPickerView,
    SprintView,
    TextInputView,
    TransitionPickerView,
)
from jiratui.keybindings import DEBUG_LOG_KEYS, HELP_KEYS, KeyPress
from jiratui.ui.modals import DebugLogModal, HelpModal
from jiratui.ui.widgets import (
    BoardHeader,
    InputOverlay,
    IssueDetail,
    IssueList,
    PickerPanel,
    StatusBar,
)

if TYPE_CHECKING:
    from textual import events
    from textual.app import ComposeResult

    from jiratui.core.controller import AppController
    from jiratui.core.snapshot import ViewSnapshot


class BoardScreen(Screen[None]):
    """Main screen: header, list or detail, overlays, status bar."""

    def __init__(self, controller: AppController, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller

    def compose(self) -> ComposeResult:
        yield BoardHeader(id="header")
        with ContentSwitcher(initial="issue-list", id="main"):
            yield IssueList(id="issue-list")
            yield IssueDetail(id="issue-detail")
        with Container(id="overlay"):
            yield PickerPanel(id="picker")
            yield InputOverlay(id="input")
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        self.render_snapshot(self.controller.snapshot())

    def on_resize(self) -> None:
        # The list window depends on the widget height.
        self.render_snapshot(self.controller.snapshot())

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        typing = isinstance(self.controller.state.current, TextInputView)
        if event.key in HELP_KEYS and not (typing and event.character == "?"):
            self.app.push_screen(HelpModal(self.controller.keymap))
            return
        if event.key in DEBUG_LOG_KEYS:
            self.app.push_screen(DebugLogModal())
            return
        self.controller.post_key(KeyPress(event.key, event.character))

    def render_snapshot(self, snapshot: ViewSnapshot) -> None:
        """Redraw every widget from one snapshot."""
        if not self.is_mounted:
            return
        self.query_one(BoardHeader).show(snapshot)
        self.query_one(StatusBar).show(snapshot.status, snapshot.hints)

        main = self.query_one("#main", ContentSwitcher)
        overlay = self.query_one("#overlay", Container)
        picker = self.query_one(PickerPanel)
        text_input = self.query_one(InputOverlay)

        issue_key: str | None = None
        match snapshot.view:
            case (
                SprintView()
                | BacklogView()
                | SprintPickerView()
                | BoardPickerView()
                | ProjectPickerView()
            ):
                pass
            case IssueDetailView(issue_key=key) | TransitionPickerView(issue_key=key):
                issue_key = key
            case TextInputView(issue_key=key):
                issue_key = key

        if issue_key is None:
            main.current = "issue-list"
            self.query_one(IssueList).show(snapshot.listing)
        else:
            main.current = "issue-detail"
            self.query_one(IssueDetail).show(snapshot, issue_key)

        match snapshot.view:
            case (
                TransitionPickerView()
                | SprintPickerView()
                | BoardPickerView()
                | ProjectPickerView()
            ):
                overlay.display = True
                picker.display = True
                text_input.display = False
                picker.show(snapshot)
            case TextInputView() as view:
                overlay.display = True
                picker.display = False
                text_input.display = True
                text_input.show(view)
            case _:
                overlay.display = False
