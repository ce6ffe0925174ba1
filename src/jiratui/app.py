"""Main jiratui TUI application."""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.app import App

from jiratui.core.controller import AppController
from jiratui.debug_log import log, setup_debug_logging
from jiratui.gateway.jira import JiraGateway
from jiratui.theme import JIRATUI_THEME, JIRATUI_THEME_256, resolve_theme_name
from jiratui.ui.screens import BoardScreen

if TYPE_CHECKING:
    from jiratui.config import JiraTuiConfig
    from jiratui.gateway.base import RemoteGateway


class JiraTuiApp(App[None]):
    """jiratui - browse and update a Jira board from the terminal."""

    TITLE = "jiratui"
    CSS_PATH = "styles/jiratui.tcss"
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        config: JiraTuiConfig,
        *,
        gateway: RemoteGateway | None = None,
        board_id: int | None = None,
    ) -> None:
        super().__init__()

        self.register_theme(JIRATUI_THEME)
        self.register_theme(JIRATUI_THEME_256)
        self.theme = self._pick_theme(config.ui.theme)

        self.config = config
        self.controller = AppController(
            gateway if gateway is not None else JiraGateway.from_config(config.jira),
            config,
            board_id=board_id,
            on_change=self._on_controller_change,
        )

    def _pick_theme(self, configured: str) -> str:
        name = resolve_theme_name(configured)
        if name not in self.available_themes:
            log.warning(f"Unknown theme {name!r}, using the default")
            return resolve_theme_name("default")
        return name

    async def on_mount(self) -> None:
        """Initialize app on mount."""
        setup_debug_logging()
        await self.push_screen(BoardScreen(self.controller))
        self.run_worker(self._run_controller(), name="controller", exclusive=True)

    async def _run_controller(self) -> None:
        await self.controller.run()
        if self.controller.quit_requested:
            log.info("Exiting")
            self.exit()

    def _on_controller_change(self) -> None:
        for screen in self.screen_stack:
            if isinstance(screen, BoardScreen):
                screen.render_snapshot(self.controller.snapshot())

    async def on_unmount(self) -> None:
        self.controller.request_stop()
        await self.controller.shutdown()
