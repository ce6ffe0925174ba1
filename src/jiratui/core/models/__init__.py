"""Domain entities and enums."""

from __future__ import annotations

from jiratui.core.models.entities import Board, Comment, Issue, JiraEntity, Sprint, Transition
from jiratui.core.models.enums import InputPurpose, SprintState, StatusLevel

__all__ = [
    "Board",
    "Comment",
    "InputPurpose",
    "Issue",
    "JiraEntity",
    "Sprint",
    "SprintState",
    "StatusLevel",
    "Transition",
]
