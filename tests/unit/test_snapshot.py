"""Tests for render snapshots and the pure widget helpers."""

from __future__ import annotations

import pytest

from jiratui.core.commands import RequestKey, RequestKind
from jiratui.core.model import DomainModel
from jiratui.core.models.enums import InputPurpose, SprintState
from jiratui.core.snapshot import StatusMessage, build_snapshot
from jiratui.core.views import (
    BacklogView,
    BoardPickerView,
    IssueDetailView,
    ProjectPickerView,
    SprintPickerView,
    SprintView,
    TextInputView,
    TransitionPickerView,
    ViewState,
)
from jiratui.keybindings import KeyMap
from jiratui.ui.widgets.input_overlay import render_buffer
from jiratui.ui.widgets.issue_list import visible_window
from jiratui.ui.widgets.picker import picker_rows
from jiratui.ui.widgets.status_bar import render_hints
from tests.helpers.mocks import (
    make_board,
    make_issues,
    make_project,
    make_sprint,
    make_transition,
    page_of,
)

pytestmark = pytest.mark.unit

KEYMAP = KeyMap()


@pytest.fixture
def model() -> DomainModel:
    model = DomainModel()
    model.set_boards((make_board(1, "Team"), make_board(2, "Ops", project_key="OPS")))
    model.select_board(1)
    model.set_sprints((make_sprint(9, state=SprintState.CLOSED), make_sprint(10)))
    model.select_sprint(10)
    model.replace_listing(SprintView(), page_of(make_issues(120), 0, 50), seq=1)
    return model


class TestBuildSnapshot:
    def test_root_listing(self, model: DomainModel):
        snapshot = build_snapshot(ViewState(sprint_cursor=99), model, KEYMAP)

        assert snapshot.listing.title == "Sprint"
        assert snapshot.listing.cursor == 49
        assert snapshot.listing.loaded
        assert snapshot.listing.has_more
        assert snapshot.listing.total == 120
        assert snapshot.board is not None
        assert snapshot.board.name == "Team"
        assert snapshot.sprint is not None
        assert snapshot.sprint.id == 10
        assert snapshot.issue is None

    def test_unloaded_backlog(self, model: DomainModel):
        model.loading.add(RequestKey(RequestKind.BACKLOG, "1"))

        snapshot = build_snapshot(ViewState(current=BacklogView()), model, KEYMAP)

        assert snapshot.listing.title == "Backlog"
        assert not snapshot.listing.loaded
        assert snapshot.listing.loading
        assert snapshot.listing.issues == ()

    def test_detail_uses_listing_copy_until_fetched(self, model: DomainModel):
        model.loading.add(RequestKey(RequestKind.ISSUE, "PROJ-2"))
        state = ViewState().push(IssueDetailView("PROJ-2"))

        snapshot = build_snapshot(state, model, KEYMAP)

        assert snapshot.issue is not None
        assert snapshot.issue.key == "PROJ-2"
        assert snapshot.issue_loading
        assert not snapshot.issue_missing
        assert snapshot.listing.title == "Sprint"

    def test_listing_error_is_exposed(self, model: DomainModel):
        model.listing_errors[RequestKey(RequestKind.SPRINT_ISSUES, "1/10")] = "Not found"

        snapshot = build_snapshot(ViewState(), model, KEYMAP)

        assert snapshot.listing.error == "Not found"

    def test_status_passed_through(self, model: DomainModel):
        status = StatusMessage("Saved")

        assert build_snapshot(ViewState(), model, KEYMAP, status).status is status

    @pytest.mark.parametrize(
        ("view", "descriptions"),
        [
            (
                SprintView(),
                ["Open", "Switch view", "Refresh", "Sprints", "Boards", "Projects", "Quit"],
            ),
            (
                IssueDetailView("PROJ-1"),
                ["Transition", "Comment", "Edit summary", "Reload", "Back"],
            ),
            (SprintPickerView(), ["Select", "Rename", "Cancel"]),
            (ProjectPickerView(), ["Select", "Cancel"]),
            (
                TextInputView.open(InputPurpose.RENAME_SPRINT, "10", SprintPickerView()),
                ["Submit", "Cancel"],
            ),
            (
                TextInputView.open(InputPurpose.COMMENT, "PROJ-1", IssueDetailView("PROJ-1")),
                ["Submit", "Cancel"],
            ),
        ],
    )
    def test_hints_follow_view(self, model: DomainModel, view, descriptions: list[str]):
        snapshot = build_snapshot(ViewState(current=view), model, KEYMAP)

        assert [description for _, description in snapshot.hints] == descriptions

    def test_hints_show_bound_keys(self, model: DomainModel):
        snapshot = build_snapshot(ViewState(), model, KEYMAP)

        assert ("Enter", "Open") in snapshot.hints
        assert ("ctrl+c/q", "Quit") in snapshot.hints


class TestPickerRows:
    def test_transitions_loading(self, model: DomainModel):
        model.loading.add(RequestKey(RequestKind.TRANSITIONS, "PROJ-1"))
        state = ViewState(current=TransitionPickerView("PROJ-1"))

        title, rows, placeholder = picker_rows(build_snapshot(state, model, KEYMAP))

        assert title == "Move PROJ-1 to..."
        assert rows == []
        assert placeholder == "Loading transitions..."

    def test_transitions_listed(self, model: DomainModel):
        model.set_transitions("PROJ-1", (make_transition("31", "Finish", "Done"),))
        state = ViewState(current=TransitionPickerView("PROJ-1", pending=True))

        title, rows, placeholder = picker_rows(build_snapshot(state, model, KEYMAP))

        assert title == "Moving PROJ-1..."
        assert rows == ["Finish  → Done"]
        assert placeholder is None

    def test_sprints_mark_the_active_one(self, model: DomainModel):
        state = ViewState(current=SprintPickerView())

        _, rows, _ = picker_rows(build_snapshot(state, model, KEYMAP))

        assert rows == ["  Sprint 9  [closed]", "● Sprint 10  [active]"]

    def test_boards_show_project(self, model: DomainModel):
        state = ViewState(current=BoardPickerView())

        _, rows, _ = picker_rows(build_snapshot(state, model, KEYMAP))

        assert rows == ["● Team  (PROJ)", "  Ops  (OPS)"]

    def test_boards_limited_to_selected_project(self, model: DomainModel):
        model.select_project("OPS")
        state = ViewState(current=BoardPickerView())

        _, rows, _ = picker_rows(build_snapshot(state, model, KEYMAP))

        assert rows == ["  Ops  (OPS)"]

    def test_projects_mark_the_selected_one(self, model: DomainModel):
        model.set_projects((make_project("PROJ", "Team project"), make_project("OPS", "Ops")))
        model.select_project("OPS")
        state = ViewState(current=ProjectPickerView(cursor=1))

        snapshot = build_snapshot(state, model, KEYMAP)
        title, rows, placeholder = picker_rows(snapshot)

        assert title == "Select project"
        assert rows == ["  PROJ  Team project", "● OPS  Ops"]
        assert placeholder is None
        assert snapshot.picker_cursor == 1

    def test_projects_loading(self, model: DomainModel):
        model.loading.add(RequestKey(RequestKind.PROJECTS))
        state = ViewState(current=ProjectPickerView())

        _, rows, placeholder = picker_rows(build_snapshot(state, model, KEYMAP))

        assert rows == []
        assert placeholder == "Loading projects..."

    def test_empty_board_list(self):
        _, rows, placeholder = picker_rows(
            build_snapshot(ViewState(current=BoardPickerView()), DomainModel(), KEYMAP)
        )

        assert rows == []
        assert placeholder == "No boards"


class TestWidgetHelpers:
    @pytest.mark.parametrize(
        ("cursor", "count", "height", "expected"),
        [
            (0, 5, 10, (0, 5)),
            (0, 100, 10, (0, 10)),
            (50, 100, 10, (45, 55)),
            (99, 100, 10, (90, 100)),
            (3, 100, 0, (0, 100)),
        ],
    )
    def test_visible_window_keeps_cursor_on_screen(
        self, cursor: int, count: int, height: int, expected: tuple[int, int]
    ):
        start, end = visible_window(cursor, count, height)

        assert (start, end) == expected
        assert start <= cursor < end

    def test_render_buffer_draws_caret(self):
        text = render_buffer("abc", 1)

        assert text.plain == "abc"
        assert render_buffer("ab", 2).plain == "ab "

    def test_render_hints(self):
        text = render_hints((("q", "Quit"), ("Enter", "Open")))

        assert text.plain == "q Quit · Enter Open"
