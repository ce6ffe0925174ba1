"""Events consumed by the controller loop.

Key presses and command completions share one queue and one priority.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jiratui.core.commands import AsyncCommand
    from jiratui.core.errors import GatewayError
    from jiratui.core.views import ContextTag
    from jiratui.keybindings import KeyPress


@dataclass(frozen=True, slots=True)
class KeyPressed:
    key: KeyPress


@dataclass(frozen=True, slots=True)
class CommandSucceeded:
    seq: int
    command: AsyncCommand
    context: ContextTag | None
    result: Any = None


@dataclass(frozen=True, slots=True)
class CommandFailed:
    seq: int
    command: AsyncCommand
    context: ContextTag | None
    error: GatewayError


@dataclass(frozen=True, slots=True)
class Tick:
    """Emitted when the loop waited a full interval without any event."""


type ControllerEvent = KeyPressed | CommandSucceeded | CommandFailed | Tick
