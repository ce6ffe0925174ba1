"""Application controller.

Owns the view state and the domain model and drives the single event loop:
wait (bounded) for a key press or a command completion, process exactly one,
notify the renderer. Gateway calls run as asyncio tasks whose completions are
queued like key presses. Each one is tagged with a sequence number and the
view context it feeds; a completion whose context no longer matches the live
view is dropped without touching the model.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from jiratui.core.commands import (
    ApplyTransition,
    AsyncCommand,
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
from jiratui.core.dispatcher import OutcomeKind, dispatch, listing_fetch
from jiratui.core.errors import (
    AuthFailure,
    GatewayError,
    MalformedResponse,
    NetworkError,
    NotFound,
    RateLimited,
)
from jiratui.core.events import CommandFailed, CommandSucceeded, KeyPressed, Tick
from jiratui.core.model import DomainModel
from jiratui.core.models.enums import StatusLevel
from jiratui.core.pagination import fetch_all_pages
from jiratui.core.snapshot import StatusMessage, build_snapshot
from jiratui.core.views import (
    BacklogView,
    RootView,
    SprintView,
    TextInputView,
    TransitionPickerView,
    ViewState,
    context_of,
)
from jiratui.debug_log import log
from jiratui.keybindings import KeyAction, KeyMap
from jiratui.limits import (
    EVENT_WAIT_TIMEOUT,
    METADATA_PAGE_SIZE,
    SHUTDOWN_TIMEOUT,
    STATUS_MESSAGE_TTL,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from jiratui.config import JiraTuiConfig
    from jiratui.core.commands import Command
    from jiratui.core.events import ControllerEvent
    from jiratui.core.snapshot import ViewSnapshot
    from jiratui.gateway.base import RemoteGateway
    from jiratui.keybindings import KeyPress


class AppController:
    """Single-threaded controller over one gateway session.

    Only :meth:`handle_event` mutates state, and only the loop in
    :meth:`run` (or a test) calls it, one event at a time.
    """

    def __init__(
        self,
        gateway: RemoteGateway,
        config: JiraTuiConfig,
        *,
        board_id: int | None = None,
        on_change: Callable[[], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._gateway = gateway
        self._keymap = KeyMap.from_config(config.keys)
        self._preferred_board = board_id if board_id is not None else config.jira.default_board_id
        self._refresh_interval = config.ui.refresh_interval
        self._on_change = on_change
        self._clock = clock

        self._state = ViewState()
        self._model = DomainModel(page_size=config.jira.page_size)
        self._status: StatusMessage | None = None

        self._queue: asyncio.Queue[ControllerEvent] = asyncio.Queue()
        self._tasks: dict[int, asyncio.Task[None]] = {}
        self._seq = 0
        self._outstanding: set[int] = set()
        self._running = False
        self._quit_requested = False
        self._closed = False
        self._last_refresh = clock()

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def model(self) -> DomainModel:
        return self._model

    @property
    def keymap(self) -> KeyMap:
        return self._keymap

    @property
    def status(self) -> StatusMessage | None:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def quit_requested(self) -> bool:
        return self._quit_requested

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    @property
    def queued_events(self) -> int:
        return self._queue.qsize()

    def snapshot(self) -> ViewSnapshot:
        """Render data for the current state. Valid for one render pass."""
        return build_snapshot(self._state, self._model, self._keymap, self._status)

    # -------------------------------------------------------------------------
    # Loop
    # -------------------------------------------------------------------------

    def post_key(self, key: KeyPress) -> None:
        """Queue a key press from the front-end."""
        self._queue.put_nowait(KeyPressed(key))

    def bootstrap(self) -> None:
        """Start the boards -> sprints -> sprint issues chain."""
        self.execute(LoadBoards())

    async def run(self) -> None:
        """Process events until the quit key is pressed, then shut down."""
        self._running = True
        log.info("Controller loop started")
        self.bootstrap()
        self._notify()
        try:
            while self._running:
                await self.step()
        finally:
            self._running = False
            await self.shutdown()
            log.info("Controller loop stopped")

    async def step(self) -> bool:
        """Wait (bounded) for one event and apply it.

        A full wait without any event counts as a :class:`Tick`. Returns True
        when the renderer was notified.
        """
        try:
            event: ControllerEvent = await asyncio.wait_for(self._queue.get(), EVENT_WAIT_TIMEOUT)
        except TimeoutError:
            event = Tick()
        changed = self.handle_event(event)
        if not isinstance(event, Tick):
            # Timers also run while events keep arriving.
            changed = self._handle_tick() or changed
        if changed:
            self._notify()
        return changed

    def request_stop(self) -> None:
        """Stop the loop from outside (app teardown)."""
        self._running = False
        self._queue.put_nowait(Tick())

    async def shutdown(self) -> None:
        """Cancel outstanding requests and close the gateway. Idempotent."""
        if self._closed:
            return
        self._closed = True
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks, timeout=SHUTDOWN_TIMEOUT)
        self._tasks.clear()
        await self._gateway.aclose()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def handle_event(self, event: ControllerEvent) -> bool:
        """Apply one event. Returns True when the rendered output may have changed."""
        match event:
            case KeyPressed(key=key):
                return self._handle_key(key)
            case CommandSucceeded():
                changed = self._handle_success(event)
                self._settle(event.seq)
                return changed
            case CommandFailed():
                changed = self._handle_failure(event)
                self._settle(event.seq)
                return changed
            case Tick():
                return self._handle_tick()

    # -------------------------------------------------------------------------
    # Keys and commands
    # -------------------------------------------------------------------------

    def _handle_key(self, key: KeyPress) -> bool:
        outcome = dispatch(self._state, self._model, key, self._keymap)
        if outcome.kind is OutcomeKind.QUIT:
            log.info("Quit requested")
            self._quit_requested = True
            self._running = False
            return False
        if outcome.kind is OutcomeKind.NOOP:
            return False
        self._state = outcome.state
        for command in outcome.commands:
            self.execute(command)
        return True

    def execute(self, command: Command) -> int | None:
        """Apply a local command, or start an async one.

        Returns the sequence number of a started request, None for local
        commands and for reads coalesced into one already in flight.
        """
        match command:
            case SelectBoard(board_id=board_id):
                log.info(f"Switching to board {board_id}")
                self._model.select_board(board_id)
                return None
            case SelectProject(project_key=project_key):
                if self._model.select_project(project_key):
                    log.info(f"Switching to project {project_key}")
                else:
                    self._set_status(f"Project {project_key} has no boards", StatusLevel.WARNING)
                return None
            case SelectSprint(sprint_id=sprint_id):
                log.info(f"Switching to sprint {sprint_id}")
                self._model.select_sprint(sprint_id)
                return None
            case _:
                return self._issue(command)

    def _issue(self, command: AsyncCommand) -> int | None:
        request_key = command.request_key
        if request_key is not None:
            if request_key in self._model.loading:
                log.debug(f"Coalesced duplicate request {request_key}")
                return None
            self._model.loading.add(request_key)

        self._seq += 1
        seq = self._seq
        self._outstanding.add(seq)
        match command:
            case FetchTransitions(key=key):
                self._model.forget_transitions(key)
            case ApplyTransition(key=key, transition=transition):
                self._model.mark_transition_pending(key, transition.to_status, seq)
            case _:
                pass

        log.debug(f"Issuing #{seq} {command}")
        task = asyncio.create_task(self._run_command(seq, command), name=f"jiratui-request-{seq}")
        self._tasks[seq] = task
        task.add_done_callback(lambda _task: self._tasks.pop(seq, None))
        return seq

    async def _run_command(self, seq: int, command: AsyncCommand) -> None:
        try:
            result = await self._call_gateway(command)
        except GatewayError as exc:
            await self._queue.put(CommandFailed(seq, command, command.context, exc))
        except Exception as exc:
            log.error(f"Request #{seq} crashed: {type(exc).__name__}: {exc}")
            error = MalformedResponse(f"Unexpected error: {exc}")
            await self._queue.put(CommandFailed(seq, command, command.context, error))
        else:
            await self._queue.put(CommandSucceeded(seq, command, command.context, result))

    async def _call_gateway(self, command: AsyncCommand) -> Any:
        gateway = self._gateway
        match command:
            case LoadProjects():
                return await fetch_all_pages(gateway.list_projects, METADATA_PAGE_SIZE)
            case LoadBoards():
                return await fetch_all_pages(gateway.list_boards, METADATA_PAGE_SIZE)
            case LoadSprints(board_id=board_id):
                return await fetch_all_pages(
                    lambda start, size: gateway.list_sprints(board_id, start, size),
                    METADATA_PAGE_SIZE,
                )
            case FetchSprintIssues(
                board_id=board_id, sprint_id=sprint_id, start_at=start, max_results=size
            ):
                return await gateway.list_sprint_issues(board_id, sprint_id, start, size)
            case FetchBacklog(board_id=board_id, start_at=start, max_results=size):
                return await gateway.list_backlog_issues(board_id, start, size)
            case FetchIssue(key=key):
                return await gateway.get_issue(key)
            case FetchTransitions(key=key):
                return await gateway.list_transitions(key)
            case ApplyTransition(key=key, transition=transition):
                return await gateway.apply_transition(key, transition.id)
            case PostComment(key=key, body=body):
                return await gateway.add_comment(key, body)
            case EditSummary(key=key, summary=summary):
                return await gateway.edit_summary(key, summary)
            case RenameSprint(sprint_id=sprint_id, name=name):
                return await gateway.rename_sprint(sprint_id, name)

    # -------------------------------------------------------------------------
    # Completions
    # -------------------------------------------------------------------------

    def _is_stale(self, context: Any) -> bool:
        return context is not None and context != context_of(self._state.current)

    def _listing_target_matches(self, command: AsyncCommand) -> bool:
        match command:
            case FetchSprintIssues(board_id=board_id, sprint_id=sprint_id):
                return (board_id, sprint_id) == (
                    self._model.active_board_id,
                    self._model.active_sprint_id,
                )
            case FetchBacklog(board_id=board_id) | LoadSprints(board_id=board_id):
                return board_id == self._model.active_board_id
            case _:
                return True

    def _release(self, command: AsyncCommand) -> None:
        if command.request_key is not None:
            self._model.loading.discard(command.request_key)

    def _settle(self, seq: int) -> None:
        """Mark ``seq`` handled; drop transition markers no older read can overwrite."""
        self._outstanding.discard(seq)
        self._model.prune_confirmed(min(self._outstanding, default=None))

    def _handle_success(self, event: CommandSucceeded) -> bool:
        command = event.command
        self._release(command)
        if self._is_stale(event.context) or not self._listing_target_matches(command):
            log.debug(f"Discarding stale result #{event.seq} {command}")
            if isinstance(command, ApplyTransition):
                self._model.clear_pending(command.key)
            return False

        result = event.result
        match command:
            case LoadProjects():
                self._model.set_projects(result.items)
            case LoadBoards():
                self._apply_boards(result.items)
            case LoadSprints(board_id=board_id):
                self._apply_sprints(board_id, result.items)
            case FetchSprintIssues(start_at=start):
                self._apply_listing(SprintView(), result, start, event.seq)
            case FetchBacklog(start_at=start):
                self._apply_listing(BacklogView(), result, start, event.seq)
            case FetchIssue():
                self._model.set_detail(result, event.seq)
            case FetchTransitions(key=key):
                self._model.set_transitions(key, result)
            case ApplyTransition(key=key, transition=transition):
                # Reads issued up to now predate the write.
                self._model.confirm_transition(key, transition.to_status, self._seq)
                self._close_overlay(key)
                self._set_status(f"{key} moved to {transition.to_status}", StatusLevel.SUCCESS)
            case PostComment(key=key):
                self._close_overlay(key)
                self._set_status(f"Comment added to {key}", StatusLevel.SUCCESS)
            case EditSummary(key=key, summary=summary):
                self._model.apply_summary(key, summary)
                self._close_overlay(key)
                self._set_status(f"Summary of {key} updated", StatusLevel.SUCCESS)
            case RenameSprint(sprint_id=sprint_id, name=name):
                self._model.rename_sprint(sprint_id, name)
                self._close_overlay(str(sprint_id))
                self._set_status(f"Sprint renamed to {name}", StatusLevel.SUCCESS)
                if self._model.active_board_id is not None:
                    self._issue(LoadSprints(self._model.active_board_id))
        return True

    def _apply_boards(self, boards: tuple[Any, ...]) -> None:
        self._model.set_boards(boards)
        if self._model.active_board_id is not None:
            return
        board_id = self._model.default_board_id(self._preferred_board)
        if board_id is None:
            self._set_status("No boards available for this account", StatusLevel.WARNING)
            return
        self._model.select_board(board_id)
        self._issue(LoadSprints(board_id))
        if isinstance(self._state.root, BacklogView):
            if command := listing_fetch(self._model, BacklogView()):
                self._issue(command)

    def _apply_sprints(self, board_id: int, sprints: tuple[Any, ...]) -> None:
        self._model.set_sprints(sprints)
        active = self._model.active_sprint_id
        if active is not None and any(s.id == active for s in sprints):
            return
        sprint_id = self._model.default_sprint_id()
        if sprint_id is None:
            self._set_status("This board has no sprints", StatusLevel.WARNING)
            return
        self._model.select_sprint(sprint_id)
        self._issue(FetchSprintIssues(board_id, sprint_id, 0, self._model.page_size))

    def _apply_listing(self, view: RootView, page: Any, start_at: int, seq: int) -> None:
        if start_at == 0:
            self._model.replace_listing(view, page, seq)
            self._state = self._state.with_root_cursor(view, 0)
        else:
            self._model.extend_listing(view, page, seq)

    def _close_overlay(self, target: str) -> None:
        """Pop the transition picker or input overlay a write was issued from."""
        match self._state.current:
            case TransitionPickerView(issue_key=current) | TextInputView(target=current):
                if current == target:
                    self._state = self._state.pop()
            case _:
                pass

    def _reenable_overlay(self, target: str) -> None:
        """Clear the pending flag so the user can retry or cancel."""
        match self._state.current:
            case (
                TransitionPickerView(issue_key=current_target, pending=True)
                | TextInputView(target=current_target, pending=True)
            ) as current if current_target == target:
                self._state = self._state.with_current(replace(current, pending=False))
            case _:
                pass

    def _handle_failure(self, event: CommandFailed) -> bool:
        command, error = event.command, event.error
        self._release(command)
        if isinstance(command, ApplyTransition):
            self._model.clear_pending(command.key)
        if isinstance(command, ApplyTransition | PostComment | EditSummary):
            self._reenable_overlay(command.key)
        elif isinstance(command, RenameSprint):
            self._reenable_overlay(str(command.sprint_id))

        if self._is_stale(event.context) or not self._listing_target_matches(command):
            log.debug(f"Discarding stale failure #{event.seq} {command}: {error}")
            return True

        log.warning(f"Request #{event.seq} {command} failed: {type(error).__name__}: {error}")
        if isinstance(error, NotFound):
            self._apply_not_found(command)
        self._report(command, error)
        return True

    def _apply_not_found(self, command: AsyncCommand) -> None:
        match command:
            case FetchIssue(key=key) | FetchTransitions(key=key):
                self._model.mark_missing(key)
            case FetchSprintIssues() | FetchBacklog():
                if command.request_key is not None:
                    self._model.listing_errors[command.request_key] = "Not found"
            case _:
                pass

    def _report(self, command: AsyncCommand, error: GatewayError) -> None:
        action = _describe(command)
        match error:
            case AuthFailure():
                self._set_status(
                    "Authentication failed: check jira.username and jira.api_token",
                    StatusLevel.ERROR,
                    persistent=True,
                )
            case NotFound():
                self._set_status(f"{action} failed: not found", StatusLevel.WARNING)
            case RateLimited(retry_after=retry_after):
                wait = f" (retry after {retry_after:g}s)" if retry_after else ""
                retry = self._keymap.display(KeyAction.REFRESH)
                self._set_status(
                    f"{action} failed: rate limited{wait}, press {retry} to retry",
                    StatusLevel.WARNING,
                )
            case NetworkError():
                self._set_status(f"{action} failed: {error.message}", StatusLevel.WARNING)
            case _:
                log.error(f"Unusable response for {command}: {error}")
                self._set_status(f"{action} failed: unexpected response", StatusLevel.ERROR)

    # -------------------------------------------------------------------------
    # Ticks
    # -------------------------------------------------------------------------

    def _set_status(self, text: str, level: StatusLevel, *, persistent: bool = False) -> None:
        expires_at = None if persistent else self._clock() + STATUS_MESSAGE_TTL
        self._status = StatusMessage(text, level, persistent, expires_at)

    def _handle_tick(self) -> bool:
        now = self._clock()
        changed = False
        if self._status is not None and self._status.expired(now):
            self._status = None
            changed = True

        if self._refresh_interval > 0 and now - self._last_refresh >= self._refresh_interval:
            self._last_refresh = now
            current = self._state.current
            if isinstance(current, SprintView | BacklogView):
                if command := listing_fetch(self._model, current):
                    log.debug("Auto-refreshing the open list")
                    self._issue(command)
                    changed = True
        return changed


def _describe(command: AsyncCommand) -> str:
    match command:
        case LoadProjects():
            return "Loading projects"
        case LoadBoards():
            return "Loading boards"
        case LoadSprints():
            return "Loading sprints"
        case FetchSprintIssues():
            return "Loading sprint issues"
        case FetchBacklog():
            return "Loading backlog"
        case FetchIssue(key=key):
            return f"Loading {key}"
        case FetchTransitions(key=key):
            return f"Loading transitions for {key}"
        case ApplyTransition(key=key, transition=transition):
            return f"Moving {key} to {transition.to_status}"
        case PostComment(key=key):
            return f"Commenting on {key}"
        case EditSummary(key=key):
            return f"Editing {key}"
        case RenameSprint(sprint_id=sprint_id):
            return f"Renaming sprint {sprint_id}"

