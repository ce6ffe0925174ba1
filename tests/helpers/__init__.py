"""Test helpers package."""

from tests.helpers.mocks import (
    FakeGateway,
    make_board,
    make_config,
    make_issue,
    make_issues,
    make_sprint,
    make_transition,
    page_of,
    standard_gateway,
)
from tests.helpers.wait import press, settle, start, wait_until

__all__ = [
    "FakeGateway",
    "make_board",
    "make_config",
    "make_issue",
    "make_issues",
    "make_sprint",
    "make_transition",
    "page_of",
    "press",
    "settle",
    "standard_gateway",
    "start",
    "wait_until",
]
