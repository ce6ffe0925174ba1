"""Jira Cloud gateway on httpx.

Agile 1.0 endpoints serve boards, sprints and board-scoped issue listings;
platform v3 endpoints serve single issues, transitions, comments and edits.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from jiratui.core.errors import (
    AuthFailure,
    MalformedResponse,
    NetworkError,
    NotFound,
    RateLimited,
)
from jiratui.core.models.adf import text_to_adf
from jiratui.core.models.entities import (
    BACKLOG_ORIGIN,
    DETAIL_ORIGIN,
    Board,
    Comment,
    Issue,
    Project,
    Sprint,
    Transition,
    sprint_origin,
)
from jiratui.core.pagination import PaginatedCollection
from jiratui.version import get_jiratui_version

if TYPE_CHECKING:
    from jiratui.config import JiraConfig

logger = logging.getLogger(__name__)

PLATFORM_API = "/rest/api/3"
AGILE_API = "/rest/agile/1.0"

# Fields needed to render list rows and the detail pane
ISSUE_FIELDS = "summary,status,assignee,issuetype,priority,description"


class JiraGateway:
    """:class:`~jiratui.gateway.base.RemoteGateway` over the Jira REST APIs."""

    def __init__(
        self,
        base_url: str,
        username: str,
        api_token: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: Site URL, e.g. ``https://example.atlassian.net``
            username: Account email for basic auth
            api_token: API token paired with the email
            timeout: Per-request timeout in seconds
            transport: Optional transport override (tests)
        """
        self.base_url = base_url.rstrip("/")
        self._auth = httpx.BasicAuth(username, api_token)
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: JiraConfig) -> JiraGateway:
        return cls(
            config.base_url,
            config.username,
            config.api_token,
            timeout=config.request_timeout,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                auth=self._auth,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                    "User-Agent": f"jiratui/{get_jiratui_version()}",
                },
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON body.

        Returns None for empty bodies (204 on writes).

        Raises:
            GatewayError: Mapped from the HTTP status or the transport failure.
        """
        try:
            response = await self.client.request(method, path, params=params, json=json)
        except httpx.TimeoutException as exc:
            raise NetworkError(f"Request timed out: {exc}", target=path) from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"Connection failed: {exc}", target=path) from exc

        self._raise_for_status(response, path)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse(f"Invalid JSON from {path}", target=path) from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, path: str) -> None:
        status = response.status_code
        if response.is_success:
            return
        logger.debug("HTTP %d from %s: %s", status, path, response.text[:500])
        if status in (401, 403):
            raise AuthFailure(f"Access denied ({status})", target=path)
        if status == 404:
            raise NotFound(f"Not found: {path}", target=path)
        if status == 429:
            raise RateLimited(
                "Rate limited", target=path, retry_after=_retry_after(response.headers)
            )
        if status >= 500:
            raise NetworkError(f"Server error {status}", target=path)
        raise MalformedResponse(
            f"Unexpected status {status}: {_error_text(response)}", target=path
        )

    async def _listing(
        self,
        path: str,
        items_field: str,
        parse: Any,
        start_at: int,
        max_results: int,
        **params: Any,
    ) -> PaginatedCollection[Any]:
        data = await self._request(
            "GET", path, params={"startAt": start_at, "maxResults": max_results, **params}
        )
        if not isinstance(data, dict) or not isinstance(data.get(items_field), list):
            raise MalformedResponse(f"Missing '{items_field}' in {path}", target=path)
        try:
            items = [parse(raw) for raw in data[items_field]]
        except ValidationError as exc:
            raise MalformedResponse(
                f"Unexpected item shape in {path}: {exc}", target=path
            ) from exc
        return PaginatedCollection.from_response(
            data, items, start_at=start_at, max_results=max_results
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_projects(
        self, start_at: int, max_results: int
    ) -> PaginatedCollection[Project]:
        return await self._listing(
            f"{PLATFORM_API}/project/search",
            "values",
            Project.model_validate,
            start_at,
            max_results,
        )

    async def list_boards(self, start_at: int, max_results: int) -> PaginatedCollection[Board]:
        return await self._listing(
            f"{AGILE_API}/board", "values", Board.model_validate, start_at, max_results
        )

    async def list_sprints(
        self, board_id: int, start_at: int, max_results: int
    ) -> PaginatedCollection[Sprint]:
        return await self._listing(
            f"{AGILE_API}/board/{board_id}/sprint",
            "values",
            Sprint.model_validate,
            start_at,
            max_results,
        )

    async def list_sprint_issues(
        self, board_id: int, sprint_id: int, start_at: int, max_results: int
    ) -> PaginatedCollection[Issue]:
        origin = sprint_origin(sprint_id)
        return await self._listing(
            f"{AGILE_API}/board/{board_id}/sprint/{sprint_id}/issue",
            "issues",
            lambda raw: Issue.from_api(raw, origin),
            start_at,
            max_results,
            fields=ISSUE_FIELDS,
        )

    async def list_backlog_issues(
        self, board_id: int, start_at: int, max_results: int
    ) -> PaginatedCollection[Issue]:
        return await self._listing(
            f"{AGILE_API}/board/{board_id}/backlog",
            "issues",
            lambda raw: Issue.from_api(raw, BACKLOG_ORIGIN),
            start_at,
            max_results,
            fields=ISSUE_FIELDS,
        )

    async def get_issue(self, key: str) -> Issue:
        path = f"{PLATFORM_API}/issue/{key}"
        data = await self._request("GET", path, params={"fields": ISSUE_FIELDS})
        if not isinstance(data, dict):
            raise MalformedResponse(f"Expected an issue object from {path}", target=path)
        try:
            return Issue.from_api(data, DETAIL_ORIGIN)
        except ValidationError as exc:
            raise MalformedResponse(f"Unexpected issue shape: {exc}", target=path) from exc

    async def list_transitions(self, key: str) -> tuple[Transition, ...]:
        path = f"{PLATFORM_API}/issue/{key}/transitions"
        data = await self._request("GET", path)
        if not isinstance(data, dict) or not isinstance(data.get("transitions"), list):
            raise MalformedResponse(f"Missing 'transitions' in {path}", target=path)
        try:
            return tuple(Transition.model_validate(raw) for raw in data["transitions"])
        except ValidationError as exc:
            raise MalformedResponse(f"Unexpected transition shape: {exc}", target=path) from exc

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def apply_transition(self, key: str, transition_id: str) -> None:
        await self._request(
            "POST",
            f"{PLATFORM_API}/issue/{key}/transitions",
            json={"transition": {"id": transition_id}},
        )
        logger.info("Applied transition %s to %s", transition_id, key)

    async def add_comment(self, key: str, body: str) -> Comment:
        data = await self._request(
            "POST", f"{PLATFORM_API}/issue/{key}/comment", json={"body": text_to_adf(body)}
        )
        logger.info("Added comment to %s", key)
        if not isinstance(data, dict):
            return Comment(body=body)
        try:
            return Comment.model_validate(data)
        except ValidationError:
            # Stored already; only the echo is unreadable.
            logger.debug("Unexpected comment shape from %s", key)
            return Comment(body=body)

    async def edit_summary(self, key: str, summary: str) -> None:
        await self._request(
            "PUT", f"{PLATFORM_API}/issue/{key}", json={"fields": {"summary": summary}}
        )
        logger.info("Updated summary of %s", key)

    async def rename_sprint(self, sprint_id: int, name: str) -> None:
        # Partial update: only the fields sent are changed.
        await self._request("POST", f"{AGILE_API}/sprint/{sprint_id}", json={"name": name})
        logger.info("Renamed sprint %s", sprint_id)


def _retry_after(headers: httpx.Headers) -> float | None:
    value = headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _error_text(response: httpx.Response) -> str:
    """Jira's ``errorMessages``/``errors`` joined, else the raw body."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if not isinstance(data, dict):
        return response.text[:200]
    messages = list(data.get("errorMessages") or [])
    messages.extend(f"{field}: {msg}" for field, msg in (data.get("errors") or {}).items())
    return "; ".join(messages) or response.text[:200]

