"""Integration tests for the jiratui command line."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from jiratui import __version__
from jiratui.__main__ import cli
from jiratui.config import JiraConfig, JiraTuiConfig

if TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture

pytestmark = pytest.mark.integration


def _configured(path: Path) -> Path:
    JiraTuiConfig(
        jira=JiraConfig(domain="acme.atlassian.net", username="dev@acme.test", api_token="t")
    ).save(path)
    return path


class TestCli:
    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"jiratui {__version__}"

    def test_config_path_defaults_to_user_dir(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["config", "path"])

        assert result.exit_code == 0
        assert result.output.strip() == str(tmp_path / "config" / "config.toml")

    def test_config_path_honours_option(self, tmp_path: Path):
        target = tmp_path / "elsewhere.toml"

        result = CliRunner().invoke(cli, ["--config", str(target), "config", "path"])

        assert result.output.strip() == str(target)

    def test_config_init_writes_defaults(self, tmp_path: Path):
        target = tmp_path / "new" / "config.toml"

        result = CliRunner().invoke(cli, ["--config", str(target), "config", "init"])

        assert result.exit_code == 0
        assert "Wrote" in result.output
        assert JiraTuiConfig.load(target, use_env=False) == JiraTuiConfig()

    def test_config_init_refuses_to_overwrite(self, tmp_path: Path):
        target = _configured(tmp_path / "config.toml")

        result = CliRunner().invoke(cli, ["--config", str(target), "config", "init"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert JiraTuiConfig.load(target, use_env=False).jira.api_token == "t"

    def test_config_init_force_overwrites(self, tmp_path: Path):
        target = _configured(tmp_path / "config.toml")

        result = CliRunner().invoke(cli, ["--config", str(target), "config", "init", "--force"])

        assert result.exit_code == 0
        assert JiraTuiConfig.load(target, use_env=False).jira.api_token == ""


class TestLaunch:
    def test_first_run_creates_config_and_stops(self, tmp_path: Path, mocker: MockerFixture):
        app_cls = mocker.patch("jiratui.app.JiraTuiApp")
        target = tmp_path / "config.toml"

        result = CliRunner().invoke(cli, ["--config", str(target)])

        assert result.exit_code == 1
        assert target.exists()
        assert "Created a default configuration" in result.output
        assert "Missing: jira.domain, jira.username, jira.api_token" in result.output
        app_cls.assert_not_called()

    def test_invalid_config_exits(self, tmp_path: Path, mocker: MockerFixture):
        app_cls = mocker.patch("jiratui.app.JiraTuiApp")
        target = tmp_path / "config.toml"
        target.write_text("[jira]\npage_size = 0\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["--config", str(target)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        app_cls.assert_not_called()

    def test_environment_completes_config(
        self, tmp_path: Path, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
    ):
        app_cls = mocker.patch("jiratui.app.JiraTuiApp")
        monkeypatch.setenv("JIRA_URL", "acme.atlassian.net")
        monkeypatch.setenv("JIRA_EMAIL", "dev@acme.test")
        monkeypatch.setenv("JIRA_API_TOKEN", "env-token")
        target = tmp_path / "config.toml"

        result = CliRunner().invoke(cli, ["--config", str(target)])

        assert result.exit_code == 0
        app_cls.return_value.run.assert_called_once()
        assert "env-token" not in target.read_text(encoding="utf-8")

    def test_runs_app_with_board_override(self, tmp_path: Path, mocker: MockerFixture):
        app_cls = mocker.patch("jiratui.app.JiraTuiApp")
        target = _configured(tmp_path / "config.toml")

        result = CliRunner().invoke(cli, ["--config", str(target), "--board", "7"])

        assert result.exit_code == 0
        config = app_cls.call_args.args[0]
        assert config.jira.domain == "acme.atlassian.net"
        assert app_cls.call_args.kwargs == {"board_id": 7}
        app_cls.return_value.run.assert_called_once()
