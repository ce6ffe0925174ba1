"""Remote tracker gateways."""

from __future__ import annotations

from jiratui.gateway.base import RemoteGateway
from jiratui.gateway.jira import JiraGateway

__all__ = ["JiraGateway", "RemoteGateway"]
