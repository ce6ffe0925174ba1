"""Screens of the jiratui app."""

from __future__ import annotations

from jiratui.ui.screens.board import BoardScreen

__all__ = ["BoardScreen"]
