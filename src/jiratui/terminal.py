"""Terminal capability detection."""

from __future__ import annotations

import os

# Checked before COLORTERM, which some shell configs set unconditionally.
_NO_TRUECOLOR_TERMINALS = {"apple_terminal"}

_TRUECOLOR_TERMINALS = {
    "iterm.app",
    "vscode",
    "alacritty",
    "kitty",
    "wezterm",
    "ghostty",
    "warp",
}


def supports_truecolor() -> bool:
    """Return True when the terminal most likely renders 24-bit colors.

    ``TEXTUAL_COLOR_SYSTEM=truecolor`` forces it on; otherwise TERM_PROGRAM is
    consulted first, then COLORTERM and Windows Terminal's WT_SESSION.
    """
    if os.environ.get("TEXTUAL_COLOR_SYSTEM", "").lower() == "truecolor":
        return True

    term_program = os.environ.get("TERM_PROGRAM", "").lower()
    if term_program in _NO_TRUECOLOR_TERMINALS:
        return False
    if term_program in _TRUECOLOR_TERMINALS:
        return True

    if os.environ.get("COLORTERM", "").lower() in ("truecolor", "24bit"):
        return True
    return bool(os.environ.get("WT_SESSION"))
