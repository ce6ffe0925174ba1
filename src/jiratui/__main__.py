"""CLI entry point for jiratui."""

from __future__ import annotations

# Python version check - must be before any imports that use 3.12+ syntax.
# Note: from __future__ is allowed before this check as it's valid in Python 3.7+.
import sys

if sys.version_info < (3, 12):  # noqa: UP036
    print("Error: jiratui requires Python 3.12 or higher.")
    print(
        "You are running Python {}.{}".format(  # noqa: UP032
            sys.version_info.major, sys.version_info.minor
        )
    )
    print("Please upgrade Python: https://www.python.org/downloads/")
    sys.exit(1)

_original_unraisablehook = sys.unraisablehook


def _suppress_event_loop_closed(unraisable: sys.UnraisableHookArgs) -> None:
    """Suppress 'Event loop is closed' errors from asyncio cleanup."""
    if isinstance(unraisable.exc_value, RuntimeError) and "Event loop is closed" in str(
        unraisable.exc_value
    ):
        return
    _original_unraisablehook(unraisable)


# Workaround for Py3.12 asyncio cleanup errors (fixed in 3.13.1+).
sys.unraisablehook = _suppress_event_loop_closed


from pathlib import Path  # noqa: E402
from typing import TYPE_CHECKING  # noqa: E402

import click  # noqa: E402

from jiratui import __version__  # noqa: E402
from jiratui.paths import get_config_path  # noqa: E402

if TYPE_CHECKING:
    from jiratui.config import JiraTuiConfig


def _config_path(ctx: click.Context) -> Path:
    return ctx.obj["config_path"]


def _load_config(path: Path) -> JiraTuiConfig:
    """Load the config, creating a default file on first run.

    Exits with status 1 when the file is invalid or credentials are missing.
    """
    from jiratui.config import ConfigError, JiraTuiConfig

    if not path.exists():
        # Written without environment overrides so no token lands on disk.
        JiraTuiConfig().save(path)
        click.secho(f"Created a default configuration at {path}", fg="cyan")

    try:
        config = JiraTuiConfig.load(path)
    except ConfigError as exc:
        click.secho("Invalid configuration:", fg="red", bold=True)
        click.echo(f"  {exc}")
        sys.exit(1)

    missing = config.jira.missing_settings()
    if missing:
        click.secho("jiratui is not configured yet.", fg="yellow", bold=True)
        click.echo(f"  Missing: {', '.join(missing)}")
        click.echo(f"  Edit {click.style(str(path), fg='cyan')}")
        click.echo("  or set JIRA_URL, JIRA_EMAIL and JIRA_API_TOKEN.")
        sys.exit(1)
    return config


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config.toml (defaults to the user config directory)",
)
@click.option("--board", "board_id", type=int, help="Board to open instead of the default")
@click.option("--version", is_flag=True, help="Show version and exit")
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, board_id: int | None, version: bool) -> None:
    """Browse and update a Jira board from the terminal."""
    if version:
        click.echo(f"jiratui {__version__}")
        ctx.exit(0)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_file if config_file is not None else get_config_path()

    if ctx.invoked_subcommand is None:
        config = _load_config(_config_path(ctx))

        from jiratui.app import JiraTuiApp

        app = JiraTuiApp(config, board_id=board_id)
        app.run()


@cli.group("config")
def config_group() -> None:
    """Inspect or create the configuration file."""


@config_group.command("path")
@click.pass_context
def config_path(ctx: click.Context) -> None:
    """Print the configuration file path."""
    click.echo(str(_config_path(ctx)))


@config_group.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Write a configuration file with default settings."""
    from jiratui.config import JiraTuiConfig

    path = _config_path(ctx)
    if path.exists() and not force:
        click.secho(f"{path} already exists (use --force to overwrite)", fg="yellow")
        sys.exit(1)

    JiraTuiConfig().save(path)
    click.secho(f"Wrote {path}", fg="green")
    click.echo("Fill in jira.domain, jira.username and jira.api_token, then run jiratui.")


if __name__ == "__main__":
    cli()
