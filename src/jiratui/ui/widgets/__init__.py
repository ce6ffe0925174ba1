"""Widgets of the board screen."""

from __future__ import annotations

from jiratui.ui.widgets.header import BoardHeader
from jiratui.ui.widgets.input_overlay import InputOverlay
from jiratui.ui.widgets.issue_detail import IssueDetail
from jiratui.ui.widgets.issue_list import IssueList
from jiratui.ui.widgets.picker import PickerPanel
from jiratui.ui.widgets.status_bar import StatusBar

__all__ = ["BoardHeader", "InputOverlay", "IssueDetail", "IssueList", "PickerPanel", "StatusBar"]
