"""Keybindings for the jiratui application.

Two layers live here. ``KeyMap`` resolves raw key names against the
configurable action bindings and is what the command dispatcher consults.
The Textual ``Binding`` lists cover the modals drawn over the board (help
and debug log), whose keys never reach the dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from textual.binding import Binding, BindingType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from jiratui.config import KeysConfig


class KeyAction(StrEnum):
    """Actions a key can be bound to. Values match ``KeysConfig`` field names."""

    QUIT = "quit"
    UP = "up"
    DOWN = "down"
    SELECT = "select"
    BACK = "back"
    SWITCH_VIEW = "switch_view"
    SPRINT_VIEW = "sprint_view"
    BACKLOG_VIEW = "backlog_view"
    REFRESH = "refresh"
    TRANSITIONS = "transitions"
    COMMENT = "comment"
    EDIT_SUMMARY = "edit_summary"
    SPRINT_PICKER = "sprint_picker"
    BOARD_PICKER = "board_picker"
    PROJECT_PICKER = "project_picker"
    RENAME_SPRINT = "rename_sprint"
    CARET_LEFT = "caret_left"
    CARET_RIGHT = "caret_right"
    DELETE_BACK = "delete_back"


DEFAULT_KEYS: dict[KeyAction, tuple[str, ...]] = {
    KeyAction.QUIT: ("q", "ctrl+c"),
    KeyAction.UP: ("up", "k"),
    KeyAction.DOWN: ("down", "j"),
    KeyAction.SELECT: ("enter",),
    KeyAction.BACK: ("escape",),
    KeyAction.SWITCH_VIEW: ("v",),
    KeyAction.SPRINT_VIEW: ("s",),
    KeyAction.BACKLOG_VIEW: ("b",),
    KeyAction.REFRESH: ("r",),
    KeyAction.TRANSITIONS: ("t",),
    KeyAction.COMMENT: ("c",),
    KeyAction.EDIT_SUMMARY: ("e",),
    KeyAction.SPRINT_PICKER: ("tab",),
    KeyAction.BOARD_PICKER: ("B",),
    KeyAction.PROJECT_PICKER: ("P",),
    KeyAction.RENAME_SPRINT: ("e",),
    KeyAction.CARET_LEFT: ("left",),
    KeyAction.CARET_RIGHT: ("right",),
    KeyAction.DELETE_BACK: ("backspace",),
}


@dataclass(frozen=True, slots=True)
class KeyPress:
    """A single key event as the dispatcher sees it.

    ``name`` is Textual's key name (``"enter"``, ``"j"``, ``"ctrl+c"``);
    ``char`` is the printable character, if any.
    """

    name: str
    char: str | None = None

    @property
    def is_printable(self) -> bool:
        return self.char is not None and len(self.char) == 1 and self.char.isprintable()

    @classmethod
    def of(cls, name: str) -> KeyPress:
        """Build a key press from a key name, inferring the character for single chars."""
        if len(name) == 1:
            return cls(name, name)
        if name == "space":
            return cls(name, " ")
        return cls(name)


@dataclass(frozen=True)
class KeyMap:
    """Resolved action -> keys table."""

    bindings: Mapping[KeyAction, frozenset[str]] = field(
        default_factory=lambda: {action: frozenset(keys) for action, keys in DEFAULT_KEYS.items()}
    )

    @classmethod
    def from_config(cls, keys: KeysConfig) -> KeyMap:
        return cls({action: frozenset(getattr(keys, action.value)) for action in KeyAction})

    def matches(self, action: KeyAction, key: KeyPress) -> bool:
        return key.name in self.bindings.get(action, frozenset())

    def keys_for(self, action: KeyAction) -> list[str]:
        return sorted(self.bindings.get(action, frozenset()))

    def display(self, action: KeyAction) -> str:
        """Short label for hints, e.g. ``j/down``."""
        return "/".join(_display_key(key) for key in self.keys_for(action)) or "?"


def _display_key(key: str) -> str:
    return {"escape": "Esc", "enter": "Enter", "tab": "Tab", "backspace": "Bksp"}.get(key, key)


def hint_pairs(keymap: KeyMap, actions: Iterable[tuple[KeyAction, str]]) -> list[tuple[str, str]]:
    """Key label / description pairs for the status bar."""
    return [(keymap.display(action), description) for action, description in actions]


# =============================================================================
# Textual Bindings
# =============================================================================

HELP_KEYS = frozenset({"f1", "question_mark"})
DEBUG_LOG_KEYS = frozenset({"f12"})

HELP_BINDINGS: list[BindingType] = [
    Binding("escape", "close", "Close"),
    Binding("f1", "close", "Close", show=False),
    Binding("question_mark", "close", "Close", show=False),
    Binding("q", "quit_app", "Quit", show=False),
]

DEBUG_LOG_BINDINGS: list[BindingType] = [
    Binding("escape", "close", "Close"),
    Binding("f12", "close", "Close", show=False),
    Binding("c", "clear_logs", "Clear"),
    Binding("s", "save_logs", "Save"),
]
