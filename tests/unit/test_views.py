"""Unit tests for the view state machine."""

from __future__ import annotations

import pytest

from jiratui.core.models.enums import InputPurpose
from jiratui.core.views import (
    BacklogView,
    BoardPickerView,
    IssueDetailView,
    ProjectPickerView,
    SprintPickerView,
    SprintView,
    TextInputView,
    TransitionPickerView,
    ViewContext,
    ViewState,
    clamp_cursor,
    context_of,
)

pytestmark = pytest.mark.unit


class TestClampCursor:
    @pytest.mark.parametrize(
        ("cursor", "length", "expected"),
        [
            (0, 0, 0),
            (5, 0, 0),
            (-1, 3, 0),
            (1, 3, 1),
            (3, 3, 2),
            (99, 3, 2),
        ],
    )
    def test_clamps_into_range(self, cursor: int, length: int, expected: int):
        assert clamp_cursor(cursor, length) == expected


class TestViewState:
    def test_initial_view_is_sprint_root(self):
        state = ViewState()

        assert state.current == SprintView()
        assert state.root == SprintView()
        assert state.depth == 0

    def test_push_and_pop_return_to_launching_view(self):
        state = ViewState(current=BacklogView())

        detail = state.push(IssueDetailView("PROJ-1"))
        picker = detail.push(TransitionPickerView("PROJ-1"))

        assert picker.depth == 2
        assert picker.root == BacklogView()
        assert picker.pop().current == IssueDetailView("PROJ-1")
        assert picker.pop().pop().current == BacklogView()

    def test_pop_at_root_is_noop(self):
        state = ViewState()

        assert state.pop() is state

    def test_switch_root_clears_back_stack_and_keeps_cursors(self):
        state = ViewState(sprint_cursor=3, backlog_cursor=1).push(IssueDetailView("PROJ-1"))

        switched = state.switch_root(BacklogView())

        assert switched.current == BacklogView()
        assert switched.back == ()
        assert switched.root_cursor(SprintView()) == 3
        assert switched.root_cursor(BacklogView()) == 1

    def test_with_root_cursor_only_touches_that_list(self):
        state = ViewState().with_root_cursor(BacklogView(), 4)

        assert state.backlog_cursor == 4
        assert state.sprint_cursor == 0


class TestTextInputView:
    def _view(self, text: str = "") -> TextInputView:
        return TextInputView.open(InputPurpose.COMMENT, "PROJ-1", IssueDetailView("PROJ-1"), text)

    def test_open_places_caret_after_prefilled_text(self):
        view = self._view("Fix login")

        assert view.buffer == "Fix login"
        assert view.caret == len("Fix login")

    def test_insert_at_caret(self):
        view = self._view("ac").move_caret(-1).insert("b")

        assert view.buffer == "abc"
        assert view.caret == 2

    def test_delete_back_at_start_is_noop(self):
        view = self._view("abc").move_caret(-10)

        assert view.caret == 0
        assert view.delete_back() == view

    def test_delete_back_removes_char_before_caret(self):
        view = self._view("abc").delete_back()

        assert view.buffer == "ab"
        assert view.caret == 2

    def test_caret_never_leaves_buffer(self):
        view = self._view("ab")

        assert view.move_caret(5).caret == 2
        assert view.move_caret(-5).caret == 0


class TestContextOf:
    def test_root_views_have_distinct_contexts(self):
        assert context_of(SprintView()) == (ViewContext.SPRINT, None)
        assert context_of(BacklogView()) == (ViewContext.BACKLOG, None)

    def test_views_over_one_issue_share_a_context(self):
        detail = IssueDetailView("PROJ-1")
        expected = (ViewContext.ISSUE, "PROJ-1")

        assert context_of(detail) == expected
        assert context_of(TransitionPickerView("PROJ-1")) == expected
        assert context_of(TextInputView.open(InputPurpose.COMMENT, "PROJ-1", detail)) == expected

    def test_other_issue_has_other_context(self):
        assert context_of(IssueDetailView("PROJ-1")) != context_of(IssueDetailView("PROJ-2"))

    def test_pickers(self):
        assert context_of(SprintPickerView())[0] is ViewContext.SPRINT_PICKER
        assert context_of(BoardPickerView(cursor=2))[0] is ViewContext.BOARD_PICKER
        assert context_of(ProjectPickerView()) == (ViewContext.PROJECT_PICKER, None)

    def test_sprint_rename_shares_the_sprint_picker_context(self):
        overlay = TextInputView.open(InputPurpose.RENAME_SPRINT, "10", SprintPickerView())

        assert context_of(overlay) == context_of(SprintPickerView())
        assert overlay.issue_key is None
