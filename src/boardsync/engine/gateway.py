"""Action gateways - how the view model reaches the board actions.

``HttpActionGateway`` talks to the board endpoints over HTTP, the way a
presentation layer does. ``RemoteActionGateway`` calls the remote client
in-process.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from boardsync.api.models import (
    ColumnsResponse,
    ProjectsResponse,
    board_from_response,
    project_from_response,
)
from boardsync.engine.exceptions import GatewayError
from boardsync.logging import sanitize_for_log
from boardsync.remote import BoardFetchError, MoveOptions, MutationResult

if TYPE_CHECKING:
    from boardsync.board import Board, Project
    from boardsync.remote import RemoteBoardClient

logger = logging.getLogger("boardsync.engine.gateway")


class ActionGateway(Protocol):
    """Board actions available to the view model."""

    async def list_projects(self) -> list[Project]:
        """List selectable projects."""
        ...

    async def get_board(self, project: Project) -> Board:
        """Load a project's board. Raises GatewayError on failure."""
        ...

    async def move_card(self, card_id: str, column_id: str, options: MoveOptions) -> MutationResult:
        """Persist a card move. Never raises."""
        ...

    async def create_issue(
        self, title: str, body: str, labels: list[str], repo: str | None = None
    ) -> MutationResult:
        """Create an issue. Never raises."""
        ...


class RemoteActionGateway:
    """Gateway calling a RemoteBoardClient directly."""

    def __init__(self, client: RemoteBoardClient) -> None:
        self.client = client

    async def list_projects(self) -> list[Project]:
        return await self.client.list_projects()

    async def get_board(self, project: Project) -> Board:
        try:
            return await self.client.get_board(project.numeric_id, project.is_v2)
        except BoardFetchError as e:
            raise GatewayError(str(e)) from e

    async def move_card(self, card_id: str, column_id: str, options: MoveOptions) -> MutationResult:
        return await self.client.move_card(card_id, column_id, options)

    async def create_issue(
        self, title: str, body: str, labels: list[str], repo: str | None = None
    ) -> MutationResult:
        return await self.client.create_issue(title, body, labels, repo)


class HttpActionGateway:
    """Gateway posting to the board endpoints of a running service."""

    def __init__(
        self,
        base_url: str,
        token: str,
        path: str = "/api/v1/board",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: Service root, e.g. "http://localhost:8000"
            token: Bearer token accepted by the service
            path: Board endpoint path
            client: Preconfigured client (for testing)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.path = path
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client for the board service."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=30.0,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = await self.client.get(self.path, params=params)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GatewayError(f"Board request failed: {e}") from e
        if not isinstance(data, dict):
            raise GatewayError(f"Unexpected board payload ({response.status_code})")
        if response.status_code != 200:
            message = data.get("error") or f"Board request failed: {response.status_code}"
            raise GatewayError(str(message))
        return data

    async def _post(self, payload: dict[str, Any]) -> MutationResult:
        try:
            response = await self.client.post(self.path, json=payload)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Action %s failed: %s", payload.get("action"), sanitize_for_log(str(e)))
            return MutationResult.failure(f"Action request failed: {e}")
        if not isinstance(data, dict):
            logger.error("Action %s returned a non-object body", payload.get("action"))
            return MutationResult.failure(f"Unexpected action payload ({response.status_code})")

        if response.status_code != 200 or not data.get("success"):
            return MutationResult.failure(str(data.get("error") or "API request failed"))
        return MutationResult.ok(data.get("data"))

    async def list_projects(self) -> list[Project]:
        data = await self._get()
        try:
            projects = ProjectsResponse.model_validate(data).projects
        except ValueError as e:
            raise GatewayError(f"Malformed project list: {e}") from e
        return [project_from_response(p) for p in projects]

    async def get_board(self, project: Project) -> Board:
        params = {"projectId": project.numeric_id, "isV2": str(project.is_v2).lower()}
        data = await self._get(params)
        try:
            return board_from_response(project, ColumnsResponse.model_validate(data))
        except ValueError as e:
            raise GatewayError(f"Malformed board for {project.title}: {e}") from e

    async def move_card(self, card_id: str, column_id: str, options: MoveOptions) -> MutationResult:
        payload: dict[str, Any] = {
            "action": "moveCard",
            "cardId": card_id,
            "columnId": column_id,
            "position": str(options.position),
            "isV2": options.is_v2,
        }
        if options.field_id:
            payload["fieldId"] = options.field_id
        if options.project_id:
            payload["projectId"] = options.project_id
        return await self._post(payload)

    async def create_issue(
        self, title: str, body: str, labels: list[str], repo: str | None = None
    ) -> MutationResult:
        payload: dict[str, Any] = {
            "action": "createIssue",
            "title": title,
            "body": body,
            "labels": list(labels),
        }
        if repo:
            payload["repo"] = repo
        return await self._post(payload)
