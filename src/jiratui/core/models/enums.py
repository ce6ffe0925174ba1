"""Core domain enums."""

from __future__ import annotations

from enum import StrEnum


class SprintState(StrEnum):
    """Lifecycle state of a sprint as reported by the agile API."""

    FUTURE = "future"
    ACTIVE = "active"
    CLOSED = "closed"


class InputPurpose(StrEnum):
    """What the text input overlay submits on Enter."""

    COMMENT = "comment"
    EDIT_SUMMARY = "edit_summary"
    RENAME_SPRINT = "rename_sprint"

    @property
    def label(self) -> str:
        """Overlay title."""
        return _INPUT_LABELS[self]


class StatusLevel(StrEnum):
    """Severity of a status bar message."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


_INPUT_LABELS = {
    InputPurpose.COMMENT: "Add Comment",
    InputPurpose.EDIT_SUMMARY: "Edit Summary",
    InputPurpose.RENAME_SPRINT: "Rename Sprint",
}
