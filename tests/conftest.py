"""Pytest fixtures for jiratui tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from hypothesis import Phase, Verbosity, settings

from jiratui import debug_log
from tests.helpers.mocks import make_config, standard_gateway

_TEST_BASE_DIR = Path(tempfile.mkdtemp(prefix="jiratui-tests-"))
os.environ["JIRATUI_DATA_DIR"] = str(_TEST_BASE_DIR / "data")
os.environ["JIRATUI_CONFIG_DIR"] = str(_TEST_BASE_DIR / "config")

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

    from jiratui.config import JiraTuiConfig
    from jiratui.core.controller import AppController
    from tests.helpers.mocks import FakeGateway


settings.register_profile(
    "ci",
    max_examples=100,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)
settings.register_profile(
    "dev",
    max_examples=20,
    deadline=500,
)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep real credentials and user directories out of every test."""
    for name in ("JIRA_URL", "JIRA_EMAIL", "JIRA_API_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("JIRATUI_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("JIRATUI_DATA_DIR", str(tmp_path / "data"))


@pytest.fixture(autouse=True)
def _clean_log_buffer() -> Generator[None, None, None]:
    debug_log.clear_log_buffer()
    yield
    debug_log.clear_log_buffer()


@pytest.fixture
def config() -> JiraTuiConfig:
    return make_config()


@pytest.fixture
def gateway() -> FakeGateway:
    return standard_gateway()


@pytest.fixture
async def controller(
    gateway: FakeGateway, config: JiraTuiConfig
) -> AsyncGenerator[AppController, None]:
    """Controller over the standard fake board, not yet bootstrapped."""
    from jiratui.core.controller import AppController

    ctrl = AppController(gateway, config)
    yield ctrl
    await ctrl.shutdown()
