"""Read-only render data derived from the view state and the domain model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from jiratui.core.commands import RequestKey, RequestKind
from jiratui.core.models.enums import StatusLevel
from jiratui.core.views import (
    BacklogView,
    BoardPickerView,
    IssueDetailView,
    ProjectPickerView,
    SprintPickerView,
    SprintView,
    TextInputView,
    TransitionPickerView,
    View,
    ViewState,
    clamp_cursor,
)
from jiratui.keybindings import KeyAction, hint_pairs

if TYPE_CHECKING:
    from jiratui.core.model import DomainModel
    from jiratui.core.models.entities import Board, Issue, Project, Sprint, Transition
    from jiratui.keybindings import KeyMap


@dataclass(frozen=True, slots=True)
class StatusMessage:
    """Status bar message. Transient ones expire at ``expires_at`` (loop time)."""

    text: str
    level: StatusLevel = StatusLevel.INFO
    persistent: bool = False
    expires_at: float | None = None

    def expired(self, now: float) -> bool:
        return not self.persistent and self.expires_at is not None and now >= self.expires_at


@dataclass(frozen=True, slots=True)
class ListingSnapshot:
    title: str
    issues: tuple[Issue, ...]
    cursor: int
    loaded: bool
    loading: bool
    has_more: bool
    total: int | None
    error: str | None


@dataclass(frozen=True, slots=True)
class ViewSnapshot:
    """Everything one render pass needs. Never kept across passes."""

    view: View
    listing: ListingSnapshot
    board: Board | None
    sprint: Sprint | None
    projects: tuple[Project, ...]
    project_key: str | None
    boards: tuple[Board, ...]
    sprints: tuple[Sprint, ...]
    issue: Issue | None
    issue_missing: bool
    issue_loading: bool
    transitions: tuple[Transition, ...] | None
    transitions_loading: bool
    metadata_loading: bool
    status: StatusMessage | None
    hints: tuple[tuple[str, str], ...]

    @property
    def picker_cursor(self) -> int:
        match self.view:
            case TransitionPickerView(cursor=cursor) | SprintPickerView(cursor=cursor):
                return cursor
            case BoardPickerView(cursor=cursor) | ProjectPickerView(cursor=cursor):
                return cursor
            case _:
                return 0


_ROOT_HINTS = (
    (KeyAction.SELECT, "Open"),
    (KeyAction.SWITCH_VIEW, "Switch view"),
    (KeyAction.REFRESH, "Refresh"),
    (KeyAction.SPRINT_PICKER, "Sprints"),
    (KeyAction.BOARD_PICKER, "Boards"),
    (KeyAction.PROJECT_PICKER, "Projects"),
    (KeyAction.QUIT, "Quit"),
)
_DETAIL_HINTS = (
    (KeyAction.TRANSITIONS, "Transition"),
    (KeyAction.COMMENT, "Comment"),
    (KeyAction.EDIT_SUMMARY, "Edit summary"),
    (KeyAction.REFRESH, "Reload"),
    (KeyAction.BACK, "Back"),
)
_PICKER_HINTS = (
    (KeyAction.SELECT, "Select"),
    (KeyAction.BACK, "Cancel"),
)
_SPRINT_PICKER_HINTS = (
    (KeyAction.SELECT, "Select"),
    (KeyAction.RENAME_SPRINT, "Rename"),
    (KeyAction.BACK, "Cancel"),
)
_INPUT_HINTS = (
    (KeyAction.SELECT, "Submit"),
    (KeyAction.BACK, "Cancel"),
)


def hints_for(view: View, keymap: KeyMap) -> tuple[tuple[str, str], ...]:
    match view:
        case SprintView() | BacklogView():
            actions = _ROOT_HINTS
        case IssueDetailView():
            actions = _DETAIL_HINTS
        case SprintPickerView():
            actions = _SPRINT_PICKER_HINTS
        case TransitionPickerView() | BoardPickerView() | ProjectPickerView():
            actions = _PICKER_HINTS
        case TextInputView():
            actions = _INPUT_HINTS
    return tuple(hint_pairs(keymap, actions))


def build_snapshot(
    state: ViewState,
    model: DomainModel,
    keymap: KeyMap,
    status: StatusMessage | None = None,
) -> ViewSnapshot:
    root = state.root
    listing = model.listing(root)
    listing_key = model.listing_key(root)
    issues = listing.items if listing is not None else ()

    match state.current:
        case IssueDetailView(issue_key=key) | TransitionPickerView(issue_key=key):
            issue_key: str | None = key
        case TextInputView(issue_key=key):
            issue_key = key
        case _:
            issue_key = None

    board_id = str(model.active_board_id) if model.active_board_id is not None else None
    return ViewSnapshot(
        view=state.current,
        listing=ListingSnapshot(
            title="Backlog" if isinstance(root, BacklogView) else "Sprint",
            issues=issues,
            cursor=clamp_cursor(state.root_cursor(root), len(issues)),
            loaded=listing is not None,
            loading=model.is_loading(listing_key),
            has_more=listing is not None and listing.has_more,
            total=listing.cursor.total if listing is not None else None,
            error=model.listing_errors.get(listing_key) if listing_key else None,
        ),
        board=model.active_board,
        sprint=model.active_sprint,
        projects=model.projects,
        project_key=model.project_key,
        boards=model.visible_boards,
        sprints=model.sprints,
        issue=model.find_issue(issue_key) if issue_key else None,
        issue_missing=issue_key is not None and issue_key in model.missing,
        issue_loading=issue_key is not None
        and model.is_loading(RequestKey(RequestKind.ISSUE, issue_key)),
        transitions=model.transitions.get(issue_key) if issue_key else None,
        transitions_loading=issue_key is not None
        and model.is_loading(RequestKey(RequestKind.TRANSITIONS, issue_key)),
        metadata_loading=model.is_loading(RequestKey(RequestKind.PROJECTS))
        or model.is_loading(RequestKey(RequestKind.BOARDS))
        or model.is_loading(RequestKey(RequestKind.SPRINTS, board_id)),
        status=status,
        hints=hints_for(state.current, keymap),
    )
