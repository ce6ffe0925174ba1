"""Key dispatch: (view state, domain model, key) -> outcome.

``dispatch`` is pure. It reads the model to decide (cursor bounds, what is
selected, what is already loading) but never mutates it and never performs
I/O; async work is returned as command descriptions for the controller.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING, assert_never

from jiratui.core.commands import (
    ApplyTransition,
    Command,
    EditSummary,
    FetchBacklog,
    FetchIssue,
    FetchSprintIssues,
    FetchTransitions,
    LoadBoards,
    LoadProjects,
    LoadSprints,
    PostComment,
    RenameSprint,
    SelectBoard,
    SelectProject,
    SelectSprint,
)
from jiratui.core.models.enums import InputPurpose
from jiratui.core.views import (
    BacklogView,
    BoardPickerView,
    IssueDetailView,
    ProjectPickerView,
    RootView,
    SprintPickerView,
    SprintView,
    TextInputView,
    TransitionPickerView,
    ViewState,
    clamp_cursor,
)
from jiratui.keybindings import KeyAction

if TYPE_CHECKING:
    from jiratui.core.model import DomainModel
    from jiratui.keybindings import KeyMap, KeyPress


class OutcomeKind(StrEnum):
    NOOP = "noop"
    MUTATION = "mutation"
    TRANSITION = "transition"
    COMMAND = "command"
    QUIT = "quit"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of one key press.

    ``TRANSITION`` changes the current view (possibly with commands),
    ``MUTATION`` edits the current view in place, ``COMMAND`` issues work
    while staying put.
    """

    kind: OutcomeKind
    state: ViewState
    commands: tuple[Command, ...] = ()


def _noop(state: ViewState) -> Outcome:
    return Outcome(OutcomeKind.NOOP, state)


def dispatch(state: ViewState, model: DomainModel, key: KeyPress, keymap: KeyMap) -> Outcome:
    view = state.current

    if keymap.matches(KeyAction.QUIT, key):
        # Printable quit keys are text while the input overlay is open.
        if not (isinstance(view, TextInputView) and key.is_printable):
            return Outcome(OutcomeKind.QUIT, state)

    match view:
        case SprintView() | BacklogView():
            return _dispatch_root(state, view, model, key, keymap)
        case IssueDetailView():
            return _dispatch_detail(state, view, model, key, keymap)
        case TransitionPickerView():
            return _dispatch_transition_picker(state, view, model, key, keymap)
        case TextInputView():
            return _dispatch_text_input(state, view, key, keymap)
        case SprintPickerView():
            return _dispatch_sprint_picker(state, view, model, key, keymap)
        case BoardPickerView():
            return _dispatch_board_picker(state, view, model, key, keymap)
        case ProjectPickerView():
            return _dispatch_project_picker(state, view, model, key, keymap)
        case _:
            assert_never(view)


# =============================================================================
# Root listings
# =============================================================================


def listing_fetch(
    model: DomainModel, view: RootView, start_at: int = 0
) -> FetchSprintIssues | FetchBacklog | None:
    """Fetch command for a root listing, or None if impossible or already in flight."""
    if model.active_board_id is None:
        return None
    if isinstance(view, BacklogView):
        command: FetchSprintIssues | FetchBacklog = FetchBacklog(
            model.active_board_id, start_at, model.page_size
        )
    else:
        if model.active_sprint_id is None:
            return None
        command = FetchSprintIssues(
            model.active_board_id, model.active_sprint_id, start_at, model.page_size
        )
    if model.is_loading(command.request_key):
        return None
    return command


def _context_fetch(model: DomainModel, view: RootView) -> Command | None:
    """Whatever is missing to show ``view``: boards, sprints or the listing."""
    if model.active_board_id is None:
        return None if model.is_loading(LoadBoards().request_key) else LoadBoards()
    if isinstance(view, SprintView) and model.active_sprint_id is None:
        command = LoadSprints(model.active_board_id)
        return None if model.is_loading(command.request_key) else command
    return listing_fetch(model, view)


def _enter_root(state: ViewState, model: DomainModel, target: RootView) -> Outcome:
    """Show a root view, loading its listing the first time it is shown."""
    next_state = state.switch_root(target)
    commands: tuple[Command, ...] = ()
    if model.listing(target) is None and (command := listing_fetch(model, target)):
        commands = (command,)
    return Outcome(OutcomeKind.TRANSITION, next_state, commands)


def _pop(state: ViewState, model: DomainModel) -> Outcome:
    next_state = state.pop()
    if next_state.back:
        return Outcome(OutcomeKind.TRANSITION, next_state)
    # Back on a root view: its listing may have been dropped as stale meanwhile.
    return _enter_root(next_state, model, next_state.root)


def _move(cursor: int, length: int, key: KeyPress, keymap: KeyMap) -> int | None:
    """New cursor for an up/down key, or None if the key is not a move."""
    cursor = clamp_cursor(cursor, length)
    if keymap.matches(KeyAction.UP, key):
        return clamp_cursor(cursor - 1, length)
    if keymap.matches(KeyAction.DOWN, key):
        return clamp_cursor(cursor + 1, length)
    return None


def _dispatch_root(
    state: ViewState, view: RootView, model: DomainModel, key: KeyPress, keymap: KeyMap
) -> Outcome:
    listing = model.listing(view)
    issues = listing.items if listing is not None else ()
    cursor = clamp_cursor(state.root_cursor(view), len(issues))

    moved = _move(cursor, len(issues), key, keymap)
    if moved is not None:
        if moved != cursor:
            return Outcome(OutcomeKind.MUTATION, state.with_root_cursor(view, moved))
        at_end = keymap.matches(KeyAction.DOWN, key) and cursor == len(issues) - 1
        if at_end and listing is not None and listing.has_more:
            if command := listing_fetch(model, view, listing.next_start()):
                return Outcome(OutcomeKind.COMMAND, state, (command,))
        return _noop(state)

    if keymap.matches(KeyAction.SELECT, key):
        if not issues:
            return _noop(state)
        issue_key = issues[cursor].key
        fetch = FetchIssue(issue_key)
        commands = () if model.is_loading(fetch.request_key) else (fetch,)
        next_state = state.with_root_cursor(view, cursor).push(IssueDetailView(issue_key))
        return Outcome(OutcomeKind.TRANSITION, next_state, commands)

    if keymap.matches(KeyAction.SWITCH_VIEW, key):
        target: RootView = SprintView() if isinstance(view, BacklogView) else BacklogView()
        return _enter_root(state, model, target)

    if keymap.matches(KeyAction.SPRINT_VIEW, key):
        if isinstance(view, SprintView):
            return _noop(state)
        return _enter_root(state, model, SprintView())

    if keymap.matches(KeyAction.BACKLOG_VIEW, key):
        if isinstance(view, BacklogView):
            return _noop(state)
        return _enter_root(state, model, BacklogView())

    if keymap.matches(KeyAction.REFRESH, key):
        if command := _context_fetch(model, view):
            return Outcome(OutcomeKind.COMMAND, state, (command,))
        return _noop(state)

    if keymap.matches(KeyAction.SPRINT_PICKER, key):
        if model.active_board_id is None:
            return _noop(state)
        commands = ()
        load = LoadSprints(model.active_board_id)
        if not model.sprints and not model.is_loading(load.request_key):
            commands = (load,)
        return Outcome(OutcomeKind.TRANSITION, state.push(SprintPickerView()), commands)

    if keymap.matches(KeyAction.BOARD_PICKER, key):
        commands = ()
        if not model.boards and not model.is_loading(LoadBoards().request_key):
            commands = (LoadBoards(),)
        return Outcome(OutcomeKind.TRANSITION, state.push(BoardPickerView()), commands)

    if keymap.matches(KeyAction.PROJECT_PICKER, key):
        commands = ()
        load_projects = LoadProjects()
        if not model.projects and not model.is_loading(load_projects.request_key):
            commands = (load_projects,)
        return Outcome(OutcomeKind.TRANSITION, state.push(ProjectPickerView()), commands)

    return _noop(state)


# =============================================================================
# Issue detail
# =============================================================================


def _dispatch_detail(
    state: ViewState, view: IssueDetailView, model: DomainModel, key: KeyPress, keymap: KeyMap
) -> Outcome:
    issue_key = view.issue_key

    if keymap.matches(KeyAction.BACK, key):
        return _pop(state, model)

    if keymap.matches(KeyAction.REFRESH, key):
        fetch = FetchIssue(issue_key)
        if model.is_loading(fetch.request_key):
            return _noop(state)
        return Outcome(OutcomeKind.COMMAND, state, (fetch,))

    if issue_key in model.missing:
        return _noop(state)

    if keymap.matches(KeyAction.TRANSITIONS, key):
        fetch_transitions = FetchTransitions(issue_key)
        commands = () if model.is_loading(fetch_transitions.request_key) else (fetch_transitions,)
        return Outcome(
            OutcomeKind.TRANSITION, state.push(TransitionPickerView(issue_key)), commands
        )

    if keymap.matches(KeyAction.COMMENT, key):
        overlay = TextInputView.open(InputPurpose.COMMENT, issue_key, view)
        return Outcome(OutcomeKind.TRANSITION, state.push(overlay))

    if keymap.matches(KeyAction.EDIT_SUMMARY, key):
        issue = model.find_issue(issue_key)
        if issue is None:
            return _noop(state)
        overlay = TextInputView.open(InputPurpose.EDIT_SUMMARY, issue_key, view, issue.summary)
        return Outcome(OutcomeKind.TRANSITION, state.push(overlay))

    return _noop(state)


# =============================================================================
# Overlays
# =============================================================================


def _dispatch_transition_picker(
    state: ViewState,
    view: TransitionPickerView,
    model: DomainModel,
    key: KeyPress,
    keymap: KeyMap,
) -> Outcome:
    if view.pending:
        return _noop(state)

    if keymap.matches(KeyAction.BACK, key):
        return _pop(state, model)

    transitions = model.transitions.get(view.issue_key, ())
    moved = _move(view.cursor, len(transitions), key, keymap)
    if moved is not None:
        if moved == view.cursor:
            return _noop(state)
        return Outcome(OutcomeKind.MUTATION, state.with_current(replace(view, cursor=moved)))

    if keymap.matches(KeyAction.SELECT, key) and transitions:
        cursor = clamp_cursor(view.cursor, len(transitions))
        next_view = replace(view, cursor=cursor, pending=True)
        command = ApplyTransition(view.issue_key, transitions[cursor])
        return Outcome(OutcomeKind.COMMAND, state.with_current(next_view), (command,))

    return _noop(state)


def _dispatch_text_input(
    state: ViewState, view: TextInputView, key: KeyPress, keymap: KeyMap
) -> Outcome:
    if view.pending:
        return _noop(state)

    if keymap.matches(KeyAction.BACK, key):
        return Outcome(OutcomeKind.TRANSITION, state.pop())

    if keymap.matches(KeyAction.SELECT, key):
        text = view.buffer.strip()
        if not text:
            return Outcome(OutcomeKind.TRANSITION, state.pop())
        command: Command
        match view.purpose:
            case InputPurpose.COMMENT:
                command = PostComment(view.target, text)
            case InputPurpose.EDIT_SUMMARY:
                command = EditSummary(view.target, text)
            case InputPurpose.RENAME_SPRINT:
                command = RenameSprint(int(view.target), text)
            case _:
                assert_never(view.purpose)
        next_view = replace(view, pending=True)
        return Outcome(OutcomeKind.COMMAND, state.with_current(next_view), (command,))

    if keymap.matches(KeyAction.CARET_LEFT, key):
        next_view = view.move_caret(-1)
    elif keymap.matches(KeyAction.CARET_RIGHT, key):
        next_view = view.move_caret(1)
    elif keymap.matches(KeyAction.DELETE_BACK, key):
        next_view = view.delete_back()
    elif key.is_printable and key.char is not None:
        next_view = view.insert(key.char)
    else:
        return _noop(state)

    if next_view == view:
        return _noop(state)
    return Outcome(OutcomeKind.MUTATION, state.with_current(next_view))


def _dispatch_sprint_picker(
    state: ViewState, view: SprintPickerView, model: DomainModel, key: KeyPress, keymap: KeyMap
) -> Outcome:
    if keymap.matches(KeyAction.BACK, key):
        return _pop(state, model)

    sprints = model.sprints
    moved = _move(view.cursor, len(sprints), key, keymap)
    if moved is not None:
        if moved == view.cursor:
            return _noop(state)
        return Outcome(OutcomeKind.MUTATION, state.with_current(replace(view, cursor=moved)))

    if keymap.matches(KeyAction.SELECT, key) and sprints and model.active_board_id is not None:
        sprint = sprints[clamp_cursor(view.cursor, len(sprints))]
        if sprint.id == model.active_sprint_id:
            return _pop(state, model)
        # The chosen sprint is shown right away, whichever list was open.
        next_state = replace(state.switch_root(SprintView()), sprint_cursor=0)
        fetch = FetchSprintIssues(model.active_board_id, sprint.id, 0, model.page_size)
        return Outcome(OutcomeKind.TRANSITION, next_state, (SelectSprint(sprint.id), fetch))

    if keymap.matches(KeyAction.RENAME_SPRINT, key) and sprints:
        sprint = sprints[clamp_cursor(view.cursor, len(sprints))]
        overlay = TextInputView.open(InputPurpose.RENAME_SPRINT, str(sprint.id), view, sprint.name)
        return Outcome(OutcomeKind.TRANSITION, state.push(overlay))

    return _noop(state)


def _dispatch_board_picker(
    state: ViewState, view: BoardPickerView, model: DomainModel, key: KeyPress, keymap: KeyMap
) -> Outcome:
    if keymap.matches(KeyAction.BACK, key):
        return _pop(state, model)

    boards = model.visible_boards
    moved = _move(view.cursor, len(boards), key, keymap)
    if moved is not None:
        if moved == view.cursor:
            return _noop(state)
        return Outcome(OutcomeKind.MUTATION, state.with_current(replace(view, cursor=moved)))

    if keymap.matches(KeyAction.SELECT, key) and boards:
        board = boards[clamp_cursor(view.cursor, len(boards))]
        if board.id == model.active_board_id:
            return _pop(state, model)
        return _switch_board(state, model, board.id)

    return _noop(state)


def _switch_board(
    state: ViewState, model: DomainModel, board_id: int, *prefix: Command
) -> Outcome:
    """Close the picker and load ``board_id`` into the list it was opened from."""
    root = state.root
    next_state = replace(state.pop(), sprint_cursor=0, backlog_cursor=0)
    commands: tuple[Command, ...] = (*prefix, SelectBoard(board_id), LoadSprints(board_id))
    if isinstance(root, BacklogView):
        commands += (FetchBacklog(board_id, 0, model.page_size),)
    return Outcome(OutcomeKind.TRANSITION, next_state, commands)


def _dispatch_project_picker(
    state: ViewState, view: ProjectPickerView, model: DomainModel, key: KeyPress, keymap: KeyMap
) -> Outcome:
    if keymap.matches(KeyAction.BACK, key):
        return _pop(state, model)

    projects = model.projects
    moved = _move(view.cursor, len(projects), key, keymap)
    if moved is not None:
        if moved == view.cursor:
            return _noop(state)
        return Outcome(OutcomeKind.MUTATION, state.with_current(replace(view, cursor=moved)))

    if keymap.matches(KeyAction.SELECT, key) and projects:
        project = projects[clamp_cursor(view.cursor, len(projects))]
        if project.key == model.project_key:
            return _pop(state, model)
        boards = model.boards_for_project(project.key)
        select = SelectProject(project.key)
        # The active board stays when it already belongs to the chosen project.
        if not boards or any(board.id == model.active_board_id for board in boards):
            popped = _pop(state, model)
            return replace(popped, commands=(select, *popped.commands))
        return _switch_board(state, model, boards[0].id, select)

    return _noop(state)
