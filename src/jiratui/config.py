"""Configuration loader for jiratui."""

from __future__ import annotations

import os
import tomllib
from typing import TYPE_CHECKING, Any

import tomlkit
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from jiratui.atomic import atomic_write
from jiratui.limits import DEFAULT_PAGE_SIZE, DEFAULT_REQUEST_TIMEOUT, MAX_PAGE_SIZE
from jiratui.paths import get_config_path

if TYPE_CHECKING:
    from pathlib import Path

PLACEHOLDER_DOMAIN = "your-domain.atlassian.net"

# Environment variables override the file; names follow the usual Jira tooling.
ENV_OVERRIDES = {
    "JIRA_URL": "domain",
    "JIRA_EMAIL": "username",
    "JIRA_API_TOKEN": "api_token",
}


class ConfigError(Exception):
    """Raised when the config file cannot be read or does not validate."""


class JiraConfig(BaseModel):
    """Connection settings for the remote tracker."""

    domain: str = Field(default=PLACEHOLDER_DOMAIN, description="Site host or base URL")
    username: str = Field(default="", description="Account email used for basic auth")
    api_token: str = Field(default="", description="API token paired with username")
    default_board_id: int | None = Field(default=None, description="Board opened at startup")
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @property
    def base_url(self) -> str:
        """Domain with a scheme, ready for the HTTP client."""
        if self.domain.startswith(("http://", "https://")):
            return self.domain
        return f"https://{self.domain}"

    def missing_settings(self) -> list[str]:
        """Names of the settings that still need a real value."""
        missing = []
        if not self.domain or self.domain == PLACEHOLDER_DOMAIN:
            missing.append("jira.domain")
        if not self.username:
            missing.append("jira.username")
        if not self.api_token:
            missing.append("jira.api_token")
        return missing


class UIConfig(BaseModel):
    """UI-related user preferences."""

    theme: str = Field(
        default="default",
        description="'default' (auto-detect color depth), '256', or any Textual theme name",
    )
    refresh_interval: int = Field(
        default=0,
        ge=0,
        description="Seconds between automatic refreshes of the open list (0 disables)",
    )


class KeysConfig(BaseModel):
    """Key bindings, one list of Textual key names per action."""

    model_config = ConfigDict(extra="forbid")

    quit: list[str] = Field(default_factory=lambda: ["q", "ctrl+c"])
    up: list[str] = Field(default_factory=lambda: ["up", "k"])
    down: list[str] = Field(default_factory=lambda: ["down", "j"])
    select: list[str] = Field(default_factory=lambda: ["enter"])
    back: list[str] = Field(default_factory=lambda: ["escape"])
    switch_view: list[str] = Field(default_factory=lambda: ["v"])
    sprint_view: list[str] = Field(default_factory=lambda: ["s"])
    backlog_view: list[str] = Field(default_factory=lambda: ["b"])
    refresh: list[str] = Field(default_factory=lambda: ["r"])
    transitions: list[str] = Field(default_factory=lambda: ["t"])
    comment: list[str] = Field(default_factory=lambda: ["c"])
    edit_summary: list[str] = Field(default_factory=lambda: ["e"])
    sprint_picker: list[str] = Field(default_factory=lambda: ["tab"])
    board_picker: list[str] = Field(default_factory=lambda: ["B"])
    project_picker: list[str] = Field(default_factory=lambda: ["P"])
    rename_sprint: list[str] = Field(default_factory=lambda: ["e"])
    caret_left: list[str] = Field(default_factory=lambda: ["left"])
    caret_right: list[str] = Field(default_factory=lambda: ["right"])
    delete_back: list[str] = Field(default_factory=lambda: ["backspace"])

    @field_validator("*")
    @classmethod
    def require_a_key(cls, value: list[str]) -> list[str]:
        keys = [key.strip() for key in value if key.strip()]
        if not keys:
            raise ValueError("every action needs at least one key")
        return keys


class JiraTuiConfig(BaseModel):
    """Root configuration model."""

    jira: JiraConfig = Field(default_factory=JiraConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    keys: KeysConfig = Field(default_factory=KeysConfig)

    @classmethod
    def load(cls, config_path: Path | None = None, *, use_env: bool = True) -> JiraTuiConfig:
        """Load configuration from a TOML file, falling back to defaults.

        Raises:
            ConfigError: If the file is not valid TOML or fails validation.
        """
        if config_path is None:
            config_path = get_config_path()

        data: dict[str, Any] = {}
        if config_path.exists():
            try:
                with open(config_path, "rb") as f:
                    data = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"{config_path}: {exc}") from exc

        if use_env:
            data = _apply_env_overrides(data)

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"{config_path}: {exc}") from exc

    def save(self, path: Path) -> None:
        """Serialize the config to TOML, readable only by the current user."""
        doc = tomlkit.document()
        doc.add(tomlkit.comment("jiratui configuration"))

        for section_name, section in (("jira", self.jira), ("ui", self.ui), ("keys", self.keys)):
            table = tomlkit.table()
            for key, value in section.model_dump().items():
                if value is not None:
                    table[key] = value
            doc[section_name] = table

        atomic_write(path, tomlkit.dumps(doc), mode=0o600)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    jira = dict(data.get("jira", {}))
    for env_name, field_name in ENV_OVERRIDES.items():
        if value := os.environ.get(env_name):
            jira[field_name] = value
    if not jira:
        return data
    return {**data, "jira": jira}
