"""Unit tests for entity parsing and ADF conversion."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from jiratui.core.models.adf import adf_to_text, text_to_adf
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
from jiratui.core.models.enums import InputPurpose, SprintState

pytestmark = pytest.mark.unit


def _issue_payload(**fields: object) -> dict[str, object]:
    base: dict[str, object] = {
        "summary": "Login fails",
        "status": {"name": "In Progress", "statusCategory": {"key": "indeterminate"}},
        "assignee": {"displayName": "Ada"},
        "issuetype": {"name": "Bug"},
        "priority": {"name": "High"},
        "description": None,
    }
    base.update(fields)
    return {"id": 10001, "key": "PROJ-1", "fields": base}


class TestIssue:
    def test_from_api_flattens_fields(self):
        issue = Issue.from_api(_issue_payload(), sprint_origin(10))

        assert issue.id == "10001"
        assert issue.key == "PROJ-1"
        assert issue.summary == "Login fails"
        assert issue.status == "In Progress"
        assert issue.status_category == "indeterminate"
        assert issue.assignee == "Ada"
        assert issue.issue_type == "Bug"
        assert issue.priority == "High"
        assert issue.description is None
        assert issue.origin == "sprint:10"

    def test_missing_optional_fields(self):
        issue = Issue.from_api(
            _issue_payload(assignee=None, priority=None, status=None), BACKLOG_ORIGIN
        )

        assert issue.assignee is None
        assert issue.priority is None
        assert issue.status == ""

    def test_description_adf_flattened(self):
        doc = {
            "type": "doc",
            "version": 1,
            "content": [{"type": "paragraph", "content": [{"type": "text", "text": "Steps"}]}],
        }

        issue = Issue.from_api(_issue_payload(description=doc))

        assert issue.description == "Steps"

    def test_missing_key_is_rejected(self):
        with pytest.raises(ValidationError):
            Issue.from_api({"id": "1", "fields": {}})

    def test_with_status_returns_copy(self):
        issue = Issue.from_api(_issue_payload())

        moved = issue.with_status("Done")

        assert moved.status == "Done"
        assert issue.status == "In Progress"
        assert moved.key == issue.key


class TestBoardAndSprint:
    def test_project_id_is_stringified(self):
        project = Project.model_validate({"id": 10000, "key": "PROJ", "name": "Team", "x": 1})

        assert project.id == "10000"
        assert project.key == "PROJ"

    def test_board_project_key_from_location(self):
        board = Board.model_validate(
            {"id": 3, "name": "Team", "type": "kanban", "location": {"projectKey": "TEAM"}}
        )

        assert board.project_key == "TEAM"
        assert board.type == "kanban"

    def test_sprint_state_is_case_insensitive(self):
        sprint = Sprint.model_validate(
            {"id": 7, "name": "S7", "state": "ACTIVE", "originBoardId": 3}
        )

        assert sprint.state is SprintState.ACTIVE
        assert sprint.is_active
        assert sprint.board_id == 3

    def test_unknown_sprint_state_is_rejected(self):
        with pytest.raises(ValidationError):
            Sprint.model_validate({"id": 7, "name": "S7", "state": "paused"})


class TestTransition:
    def test_target_status_from_to_object(self):
        transition = Transition.model_validate(
            {"id": "31", "name": "Finish", "to": {"name": "Done"}}
        )

        assert transition.to_status == "Done"

    def test_target_defaults_to_name(self):
        transition = Transition.model_validate({"id": "11", "name": "Blocked"})

        assert transition.to_status == "Blocked"


class TestComment:
    def test_parses_created_comment(self):
        comment = Comment.model_validate(
            {
                "id": 555,
                "author": {"displayName": "Ada"},
                "body": text_to_adf("Looks good"),
            }
        )

        assert comment.id == "555"
        assert comment.author == "Ada"
        assert comment.body == "Looks good"


class TestAdf:
    def test_text_to_adf_one_paragraph_per_line(self):
        doc = text_to_adf("first\n\nthird")

        assert doc["type"] == "doc"
        assert doc["version"] == 1
        assert [p["content"] for p in doc["content"]] == [
            [{"type": "text", "text": "first"}],
            [],
            [{"type": "text", "text": "third"}],
        ]

    def test_adf_to_text_handles_lists_breaks_and_mentions(self):
        doc = {
            "type": "doc",
            "content": [
                {
                    "type": "paragraph",
                    "content": [
                        {"type": "text", "text": "Ping "},
                        {"type": "mention", "attrs": {"text": "@ada"}},
                        {"type": "hardBreak"},
                        {"type": "text", "text": "thanks"},
                    ],
                },
                {
                    "type": "bulletList",
                    "content": [
                        {
                            "type": "listItem",
                            "content": [
                                {"type": "paragraph", "content": [{"type": "text", "text": "a"}]}
                            ],
                        },
                        {
                            "type": "listItem",
                            "content": [
                                {"type": "paragraph", "content": [{"type": "text", "text": "b"}]}
                            ],
                        },
                    ],
                },
            ],
        }

        assert adf_to_text(doc) == "Ping @ada\nthanks\n- a\n- b"

    def test_adf_to_text_passes_plain_strings(self):
        assert adf_to_text("legacy text") == "legacy text"
        assert adf_to_text(None) == ""


def test_input_purpose_labels():
    assert InputPurpose.COMMENT.label == "Add Comment"
    assert InputPurpose.EDIT_SUMMARY.label == "Edit Summary"
    assert InputPurpose.RENAME_SPRINT.label == "Rename Sprint"
