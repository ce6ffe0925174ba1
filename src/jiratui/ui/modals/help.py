"""Help modal with the keybindings reference."""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Footer, Label, Rule, Static

from jiratui.keybindings import HELP_BINDINGS, KeyAction

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.widget import Widget

    from jiratui.keybindings import KeyMap

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[KeyAction, str], ...]], ...] = (
    (
        "Lists",
        (
            (KeyAction.UP, "Move up"),
            (KeyAction.DOWN, "Move down (past the end loads more)"),
            (KeyAction.SELECT, "Open issue"),
            (KeyAction.SWITCH_VIEW, "Toggle sprint / backlog"),
            (KeyAction.SPRINT_VIEW, "Sprint view"),
            (KeyAction.BACKLOG_VIEW, "Backlog view"),
            (KeyAction.REFRESH, "Reload the list"),
            (KeyAction.SPRINT_PICKER, "Choose sprint"),
            (KeyAction.BOARD_PICKER, "Choose board"),
            (KeyAction.PROJECT_PICKER, "Choose project"),
        ),
    ),
    (
        "Issue",
        (
            (KeyAction.TRANSITIONS, "Change status"),
            (KeyAction.COMMENT, "Add comment"),
            (KeyAction.EDIT_SUMMARY, "Edit summary"),
            (KeyAction.REFRESH, "Reload the issue"),
            (KeyAction.BACK, "Back"),
        ),
    ),
    (
        "Sprint picker",
        (
            (KeyAction.SELECT, "Show sprint"),
            (KeyAction.RENAME_SPRINT, "Rename sprint"),
            (KeyAction.BACK, "Cancel"),
        ),
    ),
    (
        "Text input",
        (
            (KeyAction.SELECT, "Submit"),
            (KeyAction.CARET_LEFT, "Caret left"),
            (KeyAction.CARET_RIGHT, "Caret right"),
            (KeyAction.DELETE_BACK, "Delete before caret"),
            (KeyAction.BACK, "Cancel"),
        ),
    ),
)


class HelpModal(ModalScreen[None]):
    """Keybindings reference, built from the active key map."""

    BINDINGS = HELP_BINDINGS

    def __init__(self, keymap: KeyMap, **kwargs) -> None:
        super().__init__(**kwargs)
        self._keymap = keymap

    def compose(self) -> ComposeResult:
        with Vertical(id="help-container"):
            yield Label("jiratui Help", classes="modal-title")
            yield Rule(line_style="heavy")
            yield VerticalScroll(self._compose_keybindings(), id="help-scroll")
        yield Footer()

    def _compose_keybindings(self) -> Vertical:
        children: list[Widget] = []
        for title, rows in HELP_SECTIONS:
            children.append(Static(title, classes="help-section-title"))
            children.extend(
                self._key_row(self._keymap.display(action), text) for action, text in rows
            )
            children.append(Rule())

        children.append(Static("Global", classes="help-section-title"))
        children.append(self._key_row("F1 / ?", "Open this help screen"))
        children.append(self._key_row("F12", "Debug log"))
        children.append(self._key_row(self._keymap.display(KeyAction.QUIT), "Quit"))
        return Vertical(*children, id="keybindings-content")

    def _key_row(self, key: str, description: str) -> Horizontal:
        return Horizontal(
            Static(key, classes="help-key"),
            Static(description, classes="help-desc"),
            classes="help-row",
        )

    def action_close(self) -> None:
        self.dismiss(None)

    def action_quit_app(self) -> None:
        self.app.exit()
