"""Textual themes for jiratui."""

from __future__ import annotations

from textual.theme import Theme

from jiratui.terminal import supports_truecolor

# Full truecolor theme, blues of the tracker's own palette on a dark slate
JIRATUI_THEME = Theme(
    name="jiratui",
    primary="#4c9aff",
    secondary="#79e2f2",
    accent="#57d9a3",
    foreground="#c7d1db",
    background="#161a1d",
    surface="#1d2125",
    panel="#22272b",
    warning="#f5cd47",
    error="#f87168",
    success="#4bce97",
    dark=True,
    variables={
        "border": "#2c333a",
        "border-blurred": "#2c333a80",
        "text-muted": "#738496",
        "text-disabled": "#73849680",
        "input-cursor-foreground": "#161a1d",
        "input-cursor-background": "#4c9aff",
        "scrollbar": "#2c333a",
        "scrollbar-hover": "#4c9aff",
        "footer-key-foreground": "#738496",
        "footer-key-background": "transparent",
    },
)

# 256-color fallback, xterm palette entries closest to the truecolor theme
JIRATUI_THEME_256 = Theme(
    name="jiratui-256",
    primary="#5f87ff",  # color(69)
    secondary="#87d7d7",  # color(116)
    accent="#5fd7af",  # color(79)
    foreground="#d0d0d0",  # color(252)
    background="#121212",  # color(233)
    surface="#1c1c1c",  # color(234)
    panel="#262626",  # color(235)
    warning="#ffd75f",  # color(221)
    error="#ff5f5f",  # color(203)
    success="#5fd787",  # color(78)
    dark=True,
    variables={
        "border": "#303030",
        "border-blurred": "#30303080",
        "text-muted": "#808080",
        "text-disabled": "#80808080",
        "input-cursor-foreground": "#121212",
        "input-cursor-background": "#5f87ff",
        "scrollbar": "#303030",
        "scrollbar-hover": "#5f87ff",
        "footer-key-foreground": "#808080",
        "footer-key-background": "transparent",
    },
)


def resolve_theme_name(configured: str) -> str:
    """Map the ``ui.theme`` setting to a registered Textual theme name.

    ``default`` picks the truecolor or 256-color variant for the current
    terminal; ``256`` forces the fallback; anything else is passed through as
    the name of a built-in Textual theme.
    """
    if configured == "default":
        return JIRATUI_THEME.name if supports_truecolor() else JIRATUI_THEME_256.name
    if configured == "256":
        return JIRATUI_THEME_256.name
    return configured
