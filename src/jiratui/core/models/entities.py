"""Core domain entities.

Models parse the tracker's JSON directly through aliases, so the gateway
hands raw payloads to ``model_validate`` and never builds entities by hand.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import AliasPath, BaseModel, ConfigDict, Field, field_validator, model_validator

from jiratui.core.models.adf import adf_to_text
from jiratui.core.models.enums import SprintState

BACKLOG_ORIGIN = "backlog"
DETAIL_ORIGIN = "detail"


def sprint_origin(sprint_id: int) -> str:
    """Origin tag for issues fetched under a sprint."""
    return f"sprint:{sprint_id}"


class JiraEntity(BaseModel):
    """Base model with common config."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class Project(JiraEntity):
    """Jira project. Boards point at it through their location."""

    id: str
    key: str
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class Board(JiraEntity):
    """Agile board. Immutable for the session once fetched."""

    id: int
    name: str
    type: str = "scrum"
    project_key: str | None = Field(
        default=None, validation_alias=AliasPath("location", "projectKey")
    )


class Sprint(JiraEntity):
    """Time-boxed scope of issues on a board."""

    id: int
    name: str
    state: SprintState = SprintState.FUTURE
    board_id: int | None = Field(default=None, alias="originBoardId")
    goal: str | None = None

    @field_validator("state", mode="before")
    @classmethod
    def normalize_state(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @property
    def is_active(self) -> bool:
        return self.state == SprintState.ACTIVE


class Issue(JiraEntity):
    """Issue as listed on a board or opened in detail.

    Relationships: origin names the sprint (``sprint:<id>``), the backlog or
    the detail fetch it came from.
    """

    id: str
    key: str
    summary: str = ""
    status: str = ""
    status_category: str | None = None
    assignee: str | None = None
    issue_type: str = ""
    priority: str | None = None
    description: str | None = None
    origin: str = DETAIL_ORIGIN

    @model_validator(mode="before")
    @classmethod
    def flatten_fields(cls, data: Any) -> Any:
        """Lift the nested ``fields`` object of an API payload to the top level."""
        if not isinstance(data, dict) or "fields" not in data:
            return data
        fields = data.get("fields") or {}
        status = fields.get("status") or {}
        description = fields.get("description")
        return {
            "id": str(data.get("id", "")),
            "key": data.get("key"),
            "origin": data.get("origin", DETAIL_ORIGIN),
            "summary": fields.get("summary") or "",
            "status": status.get("name", ""),
            "status_category": (status.get("statusCategory") or {}).get("key"),
            "assignee": (fields.get("assignee") or {}).get("displayName"),
            "issue_type": (fields.get("issuetype") or {}).get("name", ""),
            "priority": (fields.get("priority") or {}).get("name"),
            "description": adf_to_text(description) if description is not None else None,
        }

    @classmethod
    def from_api(cls, payload: dict[str, Any], origin: str = DETAIL_ORIGIN) -> Self:
        """Build an issue from an API payload, tagging where it was fetched."""
        return cls.model_validate({**payload, "origin": origin})

    def with_status(self, status: str) -> Self:
        return self.model_copy(update={"status": status})

    def with_summary(self, summary: str) -> Self:
        return self.model_copy(update={"summary": summary})


class Transition(JiraEntity):
    """Workflow-permitted status change, valid only at fetch time."""

    id: str
    name: str
    to_status: str = Field(default="", validation_alias=AliasPath("to", "name"))

    @model_validator(mode="before")
    @classmethod
    def default_target(cls, data: Any) -> Any:
        # Some workflows omit the target; fall back to the transition name.
        if isinstance(data, dict) and "to" not in data and "to_status" not in data:
            return {**data, "to_status": data.get("name", "")}
        return data


class Comment(JiraEntity):
    """Comment as stored by the tracker after posting."""

    id: str | None = None
    body: str = ""
    author: str | None = None

    @model_validator(mode="before")
    @classmethod
    def flatten_body(cls, data: Any) -> Any:
        """Flatten the ADF body and the author object of an API payload."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if isinstance(data.get("body"), dict):
            data["body"] = adf_to_text(data["body"])
        if isinstance(data.get("author"), dict):
            data["author"] = data["author"].get("displayName")
        if data.get("id") is not None:
            data["id"] = str(data["id"])
        return data
