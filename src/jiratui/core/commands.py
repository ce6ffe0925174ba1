"""Command descriptions produced by the dispatcher.

A command is plain data. The controller executes async commands against the
gateway and applies local ones (project, board and sprint selection)
directly to the domain model.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from jiratui.core.models.entities import Transition  # noqa: TC001 (dataclass field)
from jiratui.core.views import ContextTag, ViewContext


class RequestKind(StrEnum):
    PROJECTS = "projects"
    BOARDS = "boards"
    SPRINTS = "sprints"
    SPRINT_ISSUES = "sprint_issues"
    BACKLOG = "backlog"
    ISSUE = "issue"
    TRANSITIONS = "transitions"


@dataclass(frozen=True, slots=True)
class RequestKey:
    """Identity of a read target; at most one request per key is in flight."""

    kind: RequestKind
    target: str | None = None

    def __str__(self) -> str:
        return f"{self.kind}:{self.target}" if self.target else str(self.kind)


# =============================================================================
# Reads
# =============================================================================


@dataclass(frozen=True, slots=True)
class LoadProjects:
    @property
    def request_key(self) -> RequestKey:
        return RequestKey(RequestKind.PROJECTS)

    @property
    def context(self) -> ContextTag | None:
        return None


@dataclass(frozen=True, slots=True)
class LoadBoards:
    @property
    def request_key(self) -> RequestKey:
        return RequestKey(RequestKind.BOARDS)

    @property
    def context(self) -> ContextTag | None:
        return None


@dataclass(frozen=True, slots=True)
class LoadSprints:
    board_id: int

    @property
    def request_key(self) -> RequestKey:
        return RequestKey(RequestKind.SPRINTS, str(self.board_id))

    @property
    def context(self) -> ContextTag | None:
        return None


@dataclass(frozen=True, slots=True)
class FetchSprintIssues:
    board_id: int
    sprint_id: int
    start_at: int
    max_results: int

    @property
    def request_key(self) -> RequestKey:
        return RequestKey(RequestKind.SPRINT_ISSUES, f"{self.board_id}/{self.sprint_id}")

    @property
    def context(self) -> ContextTag | None:
        return (ViewContext.SPRINT, None)


@dataclass(frozen=True, slots=True)
class FetchBacklog:
    board_id: int
    start_at: int
    max_results: int

    @property
    def request_key(self) -> RequestKey:
        return RequestKey(RequestKind.BACKLOG, str(self.board_id))

    @property
    def context(self) -> ContextTag | None:
        return (ViewContext.BACKLOG, None)


@dataclass(frozen=True, slots=True)
class FetchIssue:
    key: str

    @property
    def request_key(self) -> RequestKey:
        return RequestKey(RequestKind.ISSUE, self.key)

    @property
    def context(self) -> ContextTag | None:
        return (ViewContext.ISSUE, self.key)


@dataclass(frozen=True, slots=True)
class FetchTransitions:
    key: str

    @property
    def request_key(self) -> RequestKey:
        return RequestKey(RequestKind.TRANSITIONS, self.key)

    @property
    def context(self) -> ContextTag | None:
        return (ViewContext.ISSUE, self.key)


# =============================================================================
# Writes (never coalesced; the issuing overlay disables input while pending)
# =============================================================================


@dataclass(frozen=True, slots=True)
class ApplyTransition:
    key: str
    transition: Transition

    @property
    def request_key(self) -> None:
        return None

    @property
    def context(self) -> ContextTag | None:
        return (ViewContext.ISSUE, self.key)


@dataclass(frozen=True, slots=True)
class PostComment:
    key: str
    body: str

    @property
    def request_key(self) -> None:
        return None

    @property
    def context(self) -> ContextTag | None:
        return (ViewContext.ISSUE, self.key)


@dataclass(frozen=True, slots=True)
class EditSummary:
    key: str
    summary: str

    @property
    def request_key(self) -> None:
        return None

    @property
    def context(self) -> ContextTag | None:
        return (ViewContext.ISSUE, self.key)


@dataclass(frozen=True, slots=True)
class RenameSprint:
    sprint_id: int
    name: str

    @property
    def request_key(self) -> None:
        return None

    @property
    def context(self) -> ContextTag | None:
        return (ViewContext.SPRINT_PICKER, None)


# =============================================================================
# Local selection (applied synchronously by the controller)
# =============================================================================


@dataclass(frozen=True, slots=True)
class SelectProject:
    project_key: str


@dataclass(frozen=True, slots=True)
class SelectBoard:
    board_id: int


@dataclass(frozen=True, slots=True)
class SelectSprint:
    sprint_id: int


type ReadCommand = (
    LoadProjects
    | LoadBoards
    | LoadSprints
    | FetchSprintIssues
    | FetchBacklog
    | FetchIssue
    | FetchTransitions
)
type WriteCommand = ApplyTransition | PostComment | EditSummary | RenameSprint
type AsyncCommand = ReadCommand | WriteCommand
type LocalCommand = SelectProject | SelectBoard | SelectSprint
type Command = AsyncCommand | LocalCommand

LISTING_COMMANDS: tuple[type, ...] = (FetchSprintIssues, FetchBacklog)
