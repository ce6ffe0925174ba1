"""Modal screens drawn over the board."""

from __future__ import annotations

from jiratui.ui.modals.debug_log import DebugLogModal
from jiratui.ui.modals.help import HelpModal

__all__ = ["DebugLogModal", "HelpModal"]
