"""Gateway contract between the controller and the remote tracker."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from jiratui.core.models.entities import (
        Board,
        Comment,
        Issue,
        Project,
        Sprint,
        Transition,
    )
    from jiratui.core.pagination import PaginatedCollection


class RemoteGateway(Protocol):
    """Typed access to the tracker.

    Every call returns a typed result or raises a
    :class:`~jiratui.core.errors.GatewayError` subclass. Implementations do
    not retry; the user retries with the refresh key.
    """

    async def list_projects(
        self, start_at: int, max_results: int
    ) -> PaginatedCollection[Project]:
        """One page of projects visible to the user."""
        ...

    async def list_boards(self, start_at: int, max_results: int) -> PaginatedCollection[Board]:
        """One page of boards visible to the user."""
        ...

    async def list_sprints(
        self, board_id: int, start_at: int, max_results: int
    ) -> PaginatedCollection[Sprint]:
        """One page of a board's sprints, oldest first."""
        ...

    async def list_sprint_issues(
        self, board_id: int, sprint_id: int, start_at: int, max_results: int
    ) -> PaginatedCollection[Issue]:
        """One page of the issues in a sprint."""
        ...

    async def list_backlog_issues(
        self, board_id: int, start_at: int, max_results: int
    ) -> PaginatedCollection[Issue]:
        """One page of the board's backlog."""
        ...

    async def get_issue(self, key: str) -> Issue:
        """Full issue, description included."""
        ...

    async def list_transitions(self, key: str) -> tuple[Transition, ...]:
        """Transitions available for the issue right now."""
        ...

    async def apply_transition(self, key: str, transition_id: str) -> None:
        """Move the issue through a transition."""
        ...

    async def add_comment(self, key: str, body: str) -> Comment:
        """Post a plain-text comment and return it as stored."""
        ...

    async def edit_summary(self, key: str, summary: str) -> None:
        """Replace the issue summary."""
        ...

    async def rename_sprint(self, sprint_id: int, name: str) -> None:
        """Give a sprint a new name."""
        ...

    async def aclose(self) -> None:
        """Release the underlying connection pool."""
        ...
