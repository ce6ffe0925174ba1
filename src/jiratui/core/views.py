"""View state machine.

Views are a closed union of small frozen dataclasses; everything that reacts
to the current view matches on it exhaustively. ``ViewState`` adds the back
stack and the cursors of the two root listings, which survive switching
between them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import assert_never

from jiratui.core.models.enums import InputPurpose
from jiratui.limits import MAX_BACK_STACK


@dataclass(frozen=True, slots=True)
class SprintView:
    """Issues of the active sprint. Initial view."""


@dataclass(frozen=True, slots=True)
class BacklogView:
    """Board issues not assigned to any sprint."""


@dataclass(frozen=True, slots=True)
class IssueDetailView:
    issue_key: str


@dataclass(frozen=True, slots=True)
class TransitionPickerView:
    issue_key: str
    cursor: int = 0
    pending: bool = False


@dataclass(frozen=True, slots=True)
class TextInputView:
    """Single-line input overlay drawn over ``previous``.

    ``target`` is the issue key for comments and summary edits, the sprint
    id for a sprint rename.
    """

    purpose: InputPurpose
    target: str
    previous: View
    buffer: str = ""
    caret: int = 0
    pending: bool = False

    @classmethod
    def open(
        cls, purpose: InputPurpose, target: str, previous: View, text: str = ""
    ) -> TextInputView:
        return cls(purpose, target, previous, text, len(text))

    @property
    def issue_key(self) -> str | None:
        """Issue being edited; None while renaming a sprint."""
        return None if self.purpose is InputPurpose.RENAME_SPRINT else self.target

    def insert(self, char: str) -> TextInputView:
        buffer = self.buffer[: self.caret] + char + self.buffer[self.caret :]
        return replace(self, buffer=buffer, caret=self.caret + len(char))

    def delete_back(self) -> TextInputView:
        if self.caret == 0:
            return self
        buffer = self.buffer[: self.caret - 1] + self.buffer[self.caret :]
        return replace(self, buffer=buffer, caret=self.caret - 1)

    def move_caret(self, delta: int) -> TextInputView:
        return replace(self, caret=max(0, min(len(self.buffer), self.caret + delta)))


@dataclass(frozen=True, slots=True)
class SprintPickerView:
    cursor: int = 0


@dataclass(frozen=True, slots=True)
class BoardPickerView:
    cursor: int = 0


@dataclass(frozen=True, slots=True)
class ProjectPickerView:
    cursor: int = 0


type RootView = SprintView | BacklogView
type View = (
    SprintView
    | BacklogView
    | IssueDetailView
    | TransitionPickerView
    | TextInputView
    | SprintPickerView
    | BoardPickerView
    | ProjectPickerView
)

ROOT_VIEWS: tuple[type, ...] = (SprintView, BacklogView)


class ViewContext(StrEnum):
    """Which live view a request's result is meant for."""

    SPRINT = "sprint"
    BACKLOG = "backlog"
    ISSUE = "issue"
    SPRINT_PICKER = "sprint_picker"
    BOARD_PICKER = "board_picker"
    PROJECT_PICKER = "project_picker"


type ContextTag = tuple[ViewContext, str | None]


def context_of(view: View) -> ContextTag:
    """Tag identifying the data a view displays.

    Views over the same issue share a tag, so a detail fetch still lands
    after the user opened the transition picker or an input overlay for it.
    """
    match view:
        case SprintView():
            return (ViewContext.SPRINT, None)
        case BacklogView():
            return (ViewContext.BACKLOG, None)
        case IssueDetailView(issue_key=key) | TransitionPickerView(issue_key=key):
            return (ViewContext.ISSUE, key)
        case TextInputView(purpose=InputPurpose.RENAME_SPRINT):
            return (ViewContext.SPRINT_PICKER, None)
        case TextInputView(target=key):
            return (ViewContext.ISSUE, key)
        case SprintPickerView():
            return (ViewContext.SPRINT_PICKER, None)
        case BoardPickerView():
            return (ViewContext.BOARD_PICKER, None)
        case ProjectPickerView():
            return (ViewContext.PROJECT_PICKER, None)
        case _:
            assert_never(view)


def clamp_cursor(cursor: int, length: int) -> int:
    """Clamp into ``[0, length)``; 0 for an empty sequence."""
    if length <= 0:
        return 0
    return max(0, min(cursor, length - 1))


@dataclass(frozen=True)
class ViewState:
    """Current view, the views it can return to, and the root list cursors."""

    current: View = SprintView()
    back: tuple[View, ...] = ()
    sprint_cursor: int = 0
    backlog_cursor: int = 0

    @property
    def root(self) -> RootView:
        """The root list view underneath everything on the back stack."""
        base = self.back[0] if self.back else self.current
        return base if isinstance(base, BacklogView) else SprintView()

    @property
    def depth(self) -> int:
        return len(self.back)

    def push(self, view: View) -> ViewState:
        """Open ``view`` on top of the current one."""
        back = (*self.back, self.current)[-MAX_BACK_STACK:]
        return replace(self, current=view, back=back)

    def pop(self) -> ViewState:
        """Return to the launching view; root views stay put."""
        if not self.back:
            return self
        return replace(self, current=self.back[-1], back=self.back[:-1])

    def with_current(self, view: View) -> ViewState:
        """Replace the current view in place (cursor move, buffer edit)."""
        return replace(self, current=view)

    def switch_root(self, view: RootView) -> ViewState:
        return replace(self, current=view, back=())

    def root_cursor(self, view: RootView) -> int:
        return self.backlog_cursor if isinstance(view, BacklogView) else self.sprint_cursor

    def with_root_cursor(self, view: RootView, cursor: int) -> ViewState:
        if isinstance(view, BacklogView):
            return replace(self, backlog_cursor=cursor)
        return replace(self, sprint_cursor=cursor)
