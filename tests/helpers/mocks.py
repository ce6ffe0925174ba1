"""Fakes and factories for tests."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from jiratui.config import JiraConfig, JiraTuiConfig, KeysConfig, UIConfig
from jiratui.core.errors import GatewayError, NotFound
from jiratui.core.models.entities import (
    BACKLOG_ORIGIN,
    Board,
    Comment,
    Issue,
    Project,
    Sprint,
    Transition,
    sprint_origin,
)
from jiratui.core.models.enums import SprintState
from jiratui.core.pagination import PaginatedCollection

if TYPE_CHECKING:
    from collections.abc import Sequence


def make_project(key: str = "PROJ", name: str | None = None) -> Project:
    return Project(id=str(10000 + sum(map(ord, key))), key=key, name=name or f"Project {key}")


def make_board(board_id: int = 1, name: str | None = None, project_key: str = "PROJ") -> Board:
    return Board(id=board_id, name=name or f"Board {board_id}", project_key=project_key)


def make_sprint(
    sprint_id: int = 10,
    name: str | None = None,
    state: SprintState = SprintState.ACTIVE,
    board_id: int = 1,
) -> Sprint:
    return Sprint(id=sprint_id, name=name or f"Sprint {sprint_id}", state=state, board_id=board_id)


def make_issue(
    key: str = "PROJ-1",
    *,
    summary: str | None = None,
    status: str = "To Do",
    origin: str = BACKLOG_ORIGIN,
    description: str | None = None,
) -> Issue:
    number = key.rsplit("-", 1)[-1]
    return Issue(
        id=str(10000 + int(number)) if number.isdigit() else key,
        key=key,
        summary=summary if summary is not None else f"Summary of {key}",
        status=status,
        issue_type="Task",
        origin=origin,
        description=description,
    )


def make_issues(count: int, *, prefix: str = "PROJ", start: int = 1) -> list[Issue]:
    return [make_issue(f"{prefix}-{n}") for n in range(start, start + count)]


def make_transition(transition_id: str, name: str, to_status: str | None = None) -> Transition:
    return Transition(id=transition_id, name=name, to_status=to_status or name)


def make_config(
    *,
    default_board_id: int | None = None,
    page_size: int = 50,
    refresh_interval: int = 0,
    keys: KeysConfig | None = None,
) -> JiraTuiConfig:
    """Config with real-looking credentials so nothing asks for setup."""
    return JiraTuiConfig(
        jira=JiraConfig(
            domain="example.atlassian.net",
            username="dev@example.com",
            api_token="token",
            default_board_id=default_board_id,
            page_size=page_size,
        ),
        ui=UIConfig(theme="textual-dark", refresh_interval=refresh_interval),
        keys=keys or KeysConfig(),
    )


def page_of[T](items: Sequence[T], start_at: int, max_results: int) -> PaginatedCollection[T]:
    """Slice ``items`` the way a listing endpoint would."""
    chunk = list(items[start_at : start_at + max_results])
    return PaginatedCollection.first_page(
        chunk,
        start_at=start_at,
        max_results=max_results,
        total=len(items),
        is_last=start_at + len(chunk) >= len(items),
    )


class FakeGateway:
    """In-memory :class:`~jiratui.gateway.base.RemoteGateway`.

    Serves the configured boards, sprints and issues page by page, records
    every call, and can be told to fail (``fail``) or to block until released
    (``hold``) per method.
    """

    def __init__(
        self,
        *,
        projects: Sequence[Project] = (),
        boards: Sequence[Board] = (),
        sprints: dict[int, Sequence[Sprint]] | None = None,
        sprint_issues: dict[int, Sequence[Issue]] | None = None,
        backlog: dict[int, Sequence[Issue]] | None = None,
        transitions: dict[str, Sequence[Transition]] | None = None,
    ) -> None:
        self.projects = list(projects)
        self.boards = list(boards)
        self.sprints = {k: list(v) for k, v in (sprints or {}).items()}
        self.sprint_issues = {k: list(v) for k, v in (sprint_issues or {}).items()}
        self.backlog = {k: list(v) for k, v in (backlog or {}).items()}
        self.transitions = {k: tuple(v) for k, v in (transitions or {}).items()}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.comments: dict[str, list[str]] = defaultdict(list)
        self.closed = False
        self._failures: dict[str, list[GatewayError]] = defaultdict(list)
        self._holds: dict[str, asyncio.Event] = {}

    # -------------------------------------------------------------------------
    # Scripting
    # -------------------------------------------------------------------------

    def fail(self, method: str, error: GatewayError, *, times: int = 1) -> None:
        """Make the next ``times`` calls of ``method`` raise ``error``."""
        self._failures[method].extend([error] * times)

    def hold(self, method: str) -> asyncio.Event:
        """Block calls of ``method`` until the returned event is set."""
        event = self._holds[method] = asyncio.Event()
        return event

    def release(self, method: str) -> None:
        event = self._holds.pop(method, None)
        if event is not None:
            event.set()

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    def find(self, key: str) -> Issue | None:
        for issues in (*self.sprint_issues.values(), *self.backlog.values()):
            for issue in issues:
                if issue.key == key:
                    return issue
        return None

    def _replace(self, key: str, issue: Issue) -> None:
        for issues in (*self.sprint_issues.values(), *self.backlog.values()):
            for index, existing in enumerate(issues):
                if existing.key == key:
                    issues[index] = issue.model_copy(update={"origin": existing.origin})

    async def _enter(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        hold = self._holds.get(method)
        if hold is not None:
            await hold.wait()
        if self._failures[method]:
            raise self._failures[method].pop(0)

    # -------------------------------------------------------------------------
    # RemoteGateway
    # -------------------------------------------------------------------------

    async def list_projects(self, start_at: int, max_results: int) -> PaginatedCollection[Project]:
        await self._enter("list_projects", start_at, max_results)
        return page_of(self.projects, start_at, max_results)

    async def list_boards(self, start_at: int, max_results: int) -> PaginatedCollection[Board]:
        await self._enter("list_boards", start_at, max_results)
        return page_of(self.boards, start_at, max_results)

    async def list_sprints(
        self, board_id: int, start_at: int, max_results: int
    ) -> PaginatedCollection[Sprint]:
        await self._enter("list_sprints", board_id, start_at, max_results)
        return page_of(self.sprints.get(board_id, []), start_at, max_results)

    async def list_sprint_issues(
        self, board_id: int, sprint_id: int, start_at: int, max_results: int
    ) -> PaginatedCollection[Issue]:
        await self._enter("list_sprint_issues", board_id, sprint_id, start_at, max_results)
        issues = [
            issue.model_copy(update={"origin": sprint_origin(sprint_id)})
            for issue in self.sprint_issues.get(sprint_id, [])
        ]
        return page_of(issues, start_at, max_results)

    async def list_backlog_issues(
        self, board_id: int, start_at: int, max_results: int
    ) -> PaginatedCollection[Issue]:
        await self._enter("list_backlog_issues", board_id, start_at, max_results)
        return page_of(self.backlog.get(board_id, []), start_at, max_results)

    async def get_issue(self, key: str) -> Issue:
        await self._enter("get_issue", key)
        issue = self.find(key)
        if issue is None:
            raise NotFound(f"Not found: {key}", target=key)
        return issue.model_copy(update={"origin": "detail"})

    async def list_transitions(self, key: str) -> tuple[Transition, ...]:
        await self._enter("list_transitions", key)
        return self.transitions.get(key, ())

    async def apply_transition(self, key: str, transition_id: str) -> None:
        await self._enter("apply_transition", key, transition_id)
        issue = self.find(key)
        target = next((t for t in self.transitions.get(key, ()) if t.id == transition_id), None)
        if issue is not None and target is not None:
            self._replace(key, issue.with_status(target.to_status))

    async def add_comment(self, key: str, body: str) -> Comment:
        await self._enter("add_comment", key, body)
        self.comments[key].append(body)
        return Comment(id=str(len(self.comments[key])), body=body, author="Dev")

    async def edit_summary(self, key: str, summary: str) -> None:
        await self._enter("edit_summary", key, summary)
        issue = self.find(key)
        if issue is not None:
            self._replace(key, issue.with_summary(summary))

    async def rename_sprint(self, sprint_id: int, name: str) -> None:
        await self._enter("rename_sprint", sprint_id, name)
        for sprints in self.sprints.values():
            for index, sprint in enumerate(sprints):
                if sprint.id == sprint_id:
                    sprints[index] = sprint.model_copy(update={"name": name})

    async def aclose(self) -> None:
        self.closed = True


def standard_gateway(*, sprint_size: int = 3, backlog_size: int = 2) -> FakeGateway:
    """Two projects with a board each plus one without boards; sprints and issues."""
    return FakeGateway(
        projects=[
            make_project("PROJ", "Team project"),
            make_project("OPS", "Operations"),
            make_project("DOCS", "Documentation"),
        ],
        boards=[make_board(1, "Team board"), make_board(2, "Ops board", project_key="OPS")],
        sprints={
            1: [
                make_sprint(9, "Sprint 9", SprintState.CLOSED),
                make_sprint(10, "Sprint 10", SprintState.ACTIVE),
            ],
            2: [make_sprint(20, "Ops sprint", SprintState.ACTIVE, board_id=2)],
        },
        sprint_issues={
            9: make_issues(1, start=90),
            10: make_issues(sprint_size),
            20: make_issues(1, prefix="OPS"),
        },
        backlog={
            1: make_issues(backlog_size, start=100),
            2: make_issues(1, prefix="OPS", start=50),
        },
        transitions={
            "PROJ-1": [
                make_transition("11", "Start progress", "In Progress"),
                make_transition("31", "Done"),
            ],
        },
    )
