"""ClassicProjectsAdapter - classic project boards over the GitHub REST API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from boardsync.assembler import ClassicCard, ClassicColumn, assemble_classic_board
from boardsync.board import Board, Project
from boardsync.logging import sanitize_for_log, truncate_output
from boardsync.remote.exceptions import ProjectNotFoundError, RestError
from boardsync.remote.models import MoveOptions, Position, RateLimit

logger = logging.getLogger("boardsync.remote.rest")

# Columns created with every new classic project
DEFAULT_COLUMNS = ("To Do", "In Progress", "Done")


def _parse_project(data: dict[str, Any]) -> Project:
    return Project(
        id=str(data.get("node_id") or data["id"]),
        title=data.get("name") or "",
        numeric_id=int(data["id"]),
        is_v2=False,
    )


def _parse_card(data: dict[str, Any]) -> ClassicCard:
    return ClassicCard(
        id=int(data["id"]),
        note=data.get("note"),
        content_url=data.get("content_url"),
        created_at=data.get("created_at"),
    )


def _expect_list(data: Any, path: str) -> list[Any]:
    """Return a listing body, treating an empty response as an empty list."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise RestError(f"Expected a list from {path}, got {type(data).__name__}")
    return data


def _valid_position(position: str) -> bool:
    if position in (Position.TOP, Position.BOTTOM):
        return True
    prefix, _, sibling = position.partition(":")
    return prefix == "after" and sibling.isdigit()


class ClassicProjectsAdapter:
    """Adapter for classic (v1) project boards.

    Columns and cards are first-class REST resources; card text is resolved
    from the issue each card points at.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        base_url: str = "https://api.github.com",
    ) -> None:
        """Initialize the adapter.

        Args:
            owner: Organization or user login
            repo: Default repository name
            token: GitHub personal access token
            base_url: GitHub API base URL (for testing/enterprise)
        """
        self.owner = owner
        self.repo = repo
        self.token = token
        self.base_url = base_url.rstrip("/")
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client for GitHub API."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": "2022-11-28",
                },
                timeout=30.0,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a REST request and return the decoded body.

        Args:
            method: HTTP method
            path: Path relative to the API base, or an absolute API URL
            **kwargs: Passed through to httpx

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            RestError: On transport failure or a non-2xx status
        """
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise RestError(f"{method} {path} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            text = sanitize_for_log(truncate_output(response.text))
            raise RestError(
                f"{method} {path} failed: {response.status_code} - {text}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def _list_projects(self, path: str) -> list[Project]:
        data = _expect_list(await self._request("GET", path), path)
        try:
            return [_parse_project(p) for p in data]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RestError(f"Malformed project listing from {path}: {e}") from e

    async def list_repo_projects(self, repo: str | None = None) -> list[Project]:
        """List classic projects of a repository."""
        return await self._list_projects(f"/repos/{self.owner}/{repo or self.repo}/projects")

    async def list_org_projects(self) -> list[Project]:
        """List classic projects of the organization."""
        return await self._list_projects(f"/orgs/{self.owner}/projects")

    async def get_project(self, project_id: int) -> Project:
        """Get a classic project by REST id.

        Raises:
            ProjectNotFoundError: If the project does not exist
        """
        try:
            data = await self._request("GET", f"/projects/{project_id}")
        except RestError as e:
            if e.status_code == 404:
                raise ProjectNotFoundError(f"Classic project {project_id} not found") from e
            raise
        try:
            return _parse_project(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RestError(f"Malformed project {project_id}: {e}") from e

    async def list_cards(self, column_id: int | str) -> list[ClassicCard]:
        """List the raw cards of a column."""
        path = f"/projects/columns/{column_id}/cards"
        data = _expect_list(await self._request("GET", path), path)
        try:
            return [_parse_card(c) for c in data]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RestError(f"Malformed cards for column {column_id}: {e}") from e

    async def list_columns(self, project_id: int) -> list[ClassicColumn]:
        """List a project's columns with their cards."""
        path = f"/projects/{project_id}/columns"
        data = _expect_list(await self._request("GET", path), path)
        try:
            raw = [(int(c["id"]), c.get("name") or "") for c in data]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RestError(f"Malformed columns for project {project_id}: {e}") from e

        card_lists = await asyncio.gather(*(self.list_cards(column_id) for column_id, _ in raw))
        logger.debug("Found %d column(s) for project %s", len(raw), project_id)
        return [
            ClassicColumn(id=column_id, name=name, cards=tuple(cards))
            for (column_id, name), cards in zip(raw, card_lists, strict=True)
        ]

    async def get_issue(self, content_url: str) -> dict[str, Any]:
        """Follow a card's content URL to the issue it references."""
        data = await self._request("GET", content_url)
        if not isinstance(data, dict):
            raise RestError(f"Unexpected issue payload from {content_url}")
        return data

    async def get_board(self, numeric_id: int) -> Board:
        """Fetch a classic project and map its columns and cards to a board."""
        project = await self.get_project(numeric_id)
        columns = await self.list_columns(numeric_id)
        board = await assemble_classic_board(project, columns, self.get_issue)
        logger.info(
            "Fetched classic project %r: %d column(s), %d card(s)",
            project.title,
            len(board.columns),
            board.card_count(),
        )
        return board

    async def move_card(self, card_id: str, column_id: str, options: MoveOptions) -> dict[str, Any]:
        """Move a card between columns.

        Args:
            card_id: Classic card id
            column_id: Destination column id
            options: Move options; only ``position`` is used

        Returns:
            The response body (empty on success)

        Raises:
            RestError: If the move is rejected
        """
        position = str(options.position)
        if not _valid_position(position):
            raise RestError(f"Invalid card position: {position}")
        if not str(card_id).isdigit() or not str(column_id).isdigit():
            raise RestError(f"Classic card and column ids must be numeric: {card_id}, {column_id}")

        logger.info("Moving card %s to column %s (%s)", card_id, column_id, position)
        data = await self._request(
            "POST",
            f"/projects/columns/cards/{int(card_id)}/moves",
            json={"position": position, "column_id": int(column_id)},
        )
        return dict(data or {})

    async def create_issue(
        self, title: str, body: str, labels: list[str], repo: str | None = None
    ) -> dict[str, Any]:
        """Create an issue in a repository."""
        logger.info("Creating issue %r in %s/%s", title, self.owner, repo or self.repo)
        data = await self._request(
            "POST",
            f"/repos/{self.owner}/{repo or self.repo}/issues",
            json={"title": title, "body": body, "labels": list(labels)},
        )
        return dict(data or {})

    async def create_project(self, name: str, description: str = "") -> dict[str, Any]:
        """Create a repository project with the default columns.

        Returns:
            The project id and name with the created columns
        """
        data = await self._request(
            "POST",
            f"/repos/{self.owner}/{self.repo}/projects",
            json={"name": name, "body": description},
        )
        project_id = int(data["id"])
        logger.info("Created classic project %s (%s)", name, project_id)

        columns = []
        for column_name in DEFAULT_COLUMNS:
            column = await self._request(
                "POST", f"/projects/{project_id}/columns", json={"name": column_name}
            )
            columns.append({"id": column["id"], "name": column["name"]})
            logger.debug("Created column %s for project %s", column_name, project_id)

        return {"id": project_id, "name": data.get("name", name), "columns": columns}

    async def rate_limit(self) -> RateLimit:
        """Get the core rate limit for the token."""
        data = await self._request("GET", "/rate_limit")
        rate = (data or {}).get("rate") or {}
        return RateLimit(
            limit=int(rate.get("limit", 0)),
            remaining=int(rate.get("remaining", 0)),
            reset=int(rate.get("reset", 0)),
            used=int(rate.get("used", 0)),
        )
