"""Session-scoped domain model store.

Owned by the controller; nothing else mutates it. The renderer receives a
:class:`~jiratui.core.snapshot.ViewSnapshot` built from it per render pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from jiratui.core.commands import RequestKey, RequestKind
from jiratui.core.views import BacklogView, RootView
from jiratui.limits import DEFAULT_PAGE_SIZE

if TYPE_CHECKING:
    from collections.abc import Callable

    from jiratui.core.models.entities import Board, Issue, Project, Sprint, Transition
    from jiratui.core.pagination import PaginatedCollection

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PendingTransition:
    """Guards an optimistic status change against stale reads.

    ``confirmed_seq`` is the request sequence number current when the write
    succeeded; reads issued at or before it predate the write.
    """

    target_status: str
    issued_seq: int
    confirmed_seq: int | None = None

    @property
    def in_flight(self) -> bool:
        return self.confirmed_seq is None


@dataclass
class DomainModel:
    """Everything fetched during this session."""

    page_size: int = DEFAULT_PAGE_SIZE
    projects: tuple[Project, ...] = ()
    project_key: str | None = None
    boards: tuple[Board, ...] = ()
    sprints: tuple[Sprint, ...] = ()
    active_board_id: int | None = None
    active_sprint_id: int | None = None
    sprint_issues: PaginatedCollection[Issue] | None = None
    backlog: PaginatedCollection[Issue] | None = None
    details: dict[str, Issue] = field(default_factory=dict)
    missing: set[str] = field(default_factory=set)
    transitions: dict[str, tuple[Transition, ...]] = field(default_factory=dict)
    pending: dict[str, PendingTransition] = field(default_factory=dict)
    loading: set[RequestKey] = field(default_factory=set)
    listing_errors: dict[RequestKey, str] = field(default_factory=dict)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @property
    def active_board(self) -> Board | None:
        return next((b for b in self.boards if b.id == self.active_board_id), None)

    @property
    def active_sprint(self) -> Sprint | None:
        return next((s for s in self.sprints if s.id == self.active_sprint_id), None)

    @property
    def visible_boards(self) -> tuple[Board, ...]:
        """Boards of the selected project, or all of them without a project filter."""
        if self.project_key is None:
            return self.boards
        return self.boards_for_project(self.project_key)

    def boards_for_project(self, project_key: str) -> tuple[Board, ...]:
        """Boards located in the project, or carrying its key in their name."""
        return tuple(
            board
            for board in self.boards
            if board.project_key == project_key or project_key in board.name
        )

    def listing(self, view: RootView) -> PaginatedCollection[Issue] | None:
        return self.backlog if isinstance(view, BacklogView) else self.sprint_issues

    def listing_key(self, view: RootView) -> RequestKey | None:
        """Request key of the listing shown by ``view`` in the current context."""
        if self.active_board_id is None:
            return None
        if isinstance(view, BacklogView):
            return RequestKey(RequestKind.BACKLOG, str(self.active_board_id))
        if self.active_sprint_id is None:
            return None
        return RequestKey(
            RequestKind.SPRINT_ISSUES, f"{self.active_board_id}/{self.active_sprint_id}"
        )

    def is_loading(self, key: RequestKey | None) -> bool:
        return key is not None and key in self.loading

    def find_issue(self, key: str) -> Issue | None:
        """Best known copy of an issue: detail first, then the listings."""
        if key in self.details:
            return self.details[key]
        for listing in (self.sprint_issues, self.backlog):
            if listing is None:
                continue
            for issue in listing.items:
                if issue.key == key:
                    return issue
        return None

    def default_board_id(self, preferred: int | None) -> int | None:
        """The preferred board if it exists, else the first one."""
        if preferred is not None and any(b.id == preferred for b in self.boards):
            return preferred
        if preferred is not None:
            logger.warning("Board %s not found, falling back to the first board", preferred)
        return self.boards[0].id if self.boards else None

    def default_sprint_id(self) -> int | None:
        """The active sprint, else the most recent one listed."""
        for sprint in self.sprints:
            if sprint.is_active:
                return sprint.id
        return self.sprints[-1].id if self.sprints else None

    # -------------------------------------------------------------------------
    # Board / sprint context
    # -------------------------------------------------------------------------

    def set_projects(self, projects: tuple[Project, ...]) -> None:
        self.projects = projects

    def select_project(self, project_key: str) -> bool:
        """Limit the board picker to one project.

        Returns False, leaving the filter as it was, when the project has no boards.
        """
        if not self.boards_for_project(project_key):
            return False
        self.project_key = project_key
        return True

    def set_boards(self, boards: tuple[Board, ...]) -> None:
        self.boards = boards

    def select_board(self, board_id: int) -> None:
        """Switch board; everything scoped to the previous board is dropped."""
        self.active_board_id = board_id
        self.active_sprint_id = None
        self.sprints = ()
        self.sprint_issues = None
        self.backlog = None
        self.listing_errors.clear()

    def set_sprints(self, sprints: tuple[Sprint, ...]) -> None:
        self.sprints = sprints

    def select_sprint(self, sprint_id: int) -> None:
        self.active_sprint_id = sprint_id
        self.sprint_issues = None
        self.listing_errors = {
            key: msg
            for key, msg in self.listing_errors.items()
            if key.kind != RequestKind.SPRINT_ISSUES
        }

    def rename_sprint(self, sprint_id: int, name: str) -> None:
        self.sprints = tuple(
            sprint.model_copy(update={"name": name}) if sprint.id == sprint_id else sprint
            for sprint in self.sprints
        )

    # -------------------------------------------------------------------------
    # Listings and details
    # -------------------------------------------------------------------------

    def replace_listing(
        self, view: RootView, page: PaginatedCollection[Issue], seq: int
    ) -> None:
        """Replace a root listing wholesale with a freshly fetched first page."""
        page = page.map_items(lambda issue: self._reconcile(issue, seq))
        self._store_listing(view, page)

    def extend_listing(
        self, view: RootView, page: PaginatedCollection[Issue], seq: int
    ) -> None:
        """Append a continuation page to a root listing."""
        page = page.map_items(lambda issue: self._reconcile(issue, seq))
        current = self.listing(view)
        self._store_listing(view, current.append(page) if current is not None else page)

    def _store_listing(self, view: RootView, page: PaginatedCollection[Issue]) -> None:
        if key := self.listing_key(view):
            self.listing_errors.pop(key, None)
        if isinstance(view, BacklogView):
            self.backlog = page
        else:
            self.sprint_issues = page

    def set_detail(self, issue: Issue, seq: int) -> None:
        self.details[issue.key] = self._reconcile(issue, seq)
        self.missing.discard(issue.key)

    def mark_missing(self, key: str) -> None:
        self.missing.add(key)
        self.details.pop(key, None)

    def set_transitions(self, key: str, transitions: tuple[Transition, ...]) -> None:
        self.transitions[key] = transitions

    def forget_transitions(self, key: str) -> None:
        self.transitions.pop(key, None)

    # -------------------------------------------------------------------------
    # Optimistic updates
    # -------------------------------------------------------------------------

    def mark_transition_pending(self, key: str, target_status: str, issued_seq: int) -> None:
        self.pending[key] = PendingTransition(target_status, issued_seq)

    def confirm_transition(self, key: str, status: str, confirmed_seq: int) -> None:
        """Record a successful transition and show it on every copy of the issue."""
        marker = self.pending.get(key)
        if marker is None:
            marker = self.pending[key] = PendingTransition(status, confirmed_seq)
        marker.target_status = status
        marker.confirmed_seq = confirmed_seq
        self._update_issue(key, lambda issue: issue.with_status(status))

    def clear_pending(self, key: str) -> None:
        self.pending.pop(key, None)

    def prune_confirmed(self, oldest_outstanding: int | None) -> None:
        """Drop confirmed markers that no outstanding read can still contradict.

        ``oldest_outstanding`` is the lowest sequence number whose completion
        has not been applied yet, None when nothing is outstanding.
        """
        for key, marker in list(self.pending.items()):
            if marker.confirmed_seq is None:
                continue
            if oldest_outstanding is None or oldest_outstanding > marker.confirmed_seq:
                del self.pending[key]

    def apply_summary(self, key: str, summary: str) -> None:
        self._update_issue(key, lambda issue: issue.with_summary(summary))

    def _update_issue(self, key: str, update: Callable[[Issue], Issue]) -> None:
        if key in self.details:
            self.details[key] = update(self.details[key])

        def patch(issue: Issue) -> Issue:
            return update(issue) if issue.key == key else issue

        if self.sprint_issues is not None:
            self.sprint_issues = self.sprint_issues.map_items(patch)
        if self.backlog is not None:
            self.backlog = self.backlog.map_items(patch)

    def _reconcile(self, issue: Issue, seq: int) -> Issue:
        """Apply the pending-transition rule to an issue read at ``seq``."""
        marker = self.pending.get(issue.key)
        if marker is None:
            return issue
        if marker.in_flight:
            local = self.find_issue(issue.key)
            return issue.with_status(local.status) if local is not None else issue
        if marker.confirmed_seq is not None and marker.confirmed_seq >= seq:
            return issue.with_status(marker.target_status)
        del self.pending[issue.key]
        return issue
