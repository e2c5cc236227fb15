"""RemoteBoardClient - one interface over both project API generations."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

from boardsync.discovery import StatusKeywords
from boardsync.remote.exceptions import BoardFetchError
from boardsync.remote.graphql import ProjectsV2Adapter
from boardsync.remote.models import MoveOptions, MutationResult, RateLimit
from boardsync.remote.rest import ClassicProjectsAdapter

if TYPE_CHECKING:
    from boardsync.assembler import ClassicCard
    from boardsync.board import Board, Project
    from boardsync.config import Settings

logger = logging.getLogger("boardsync.remote")


class BoardAdapter(Protocol):
    """Capabilities each API generation provides for a single board."""

    async def get_board(self, numeric_id: int) -> Board:
        """Fetch and assemble a board."""
        ...

    async def move_card(self, card_id: str, column_id: str, options: MoveOptions) -> Any:
        """Move a card to another column."""
        ...

    async def close(self) -> None:
        """Release HTTP resources."""
        ...


class RemoteBoardClient:
    """Uniform board operations over Projects V2 and classic projects.

    The adapter for a call is picked by the project's ``is_v2`` tag. Project
    discovery walks three tiers (organization V2, repository classic,
    organization classic) and stops at the first one with results.
    """

    def __init__(
        self,
        settings: Settings,
        v2: ProjectsV2Adapter | None = None,
        classic: ClassicProjectsAdapter | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Upstream credentials and discovery hints.
            v2: Projects V2 adapter; built from settings when omitted.
            classic: Classic projects adapter; built from settings when omitted.
        """
        self.settings = settings
        self.v2 = v2 or ProjectsV2Adapter(
            owner=settings.owner,
            token=settings.github_token,
            base_url=settings.graphql_url,
            keywords=StatusKeywords.from_settings(settings),
        )
        self.classic = classic or ClassicProjectsAdapter(
            owner=settings.owner,
            repo=settings.repo,
            token=settings.github_token,
            base_url=settings.api_url,
        )

    def adapter(self, is_v2: bool) -> BoardAdapter:
        """Select the adapter for a project generation."""
        adapters: dict[bool, BoardAdapter] = {True: self.v2, False: self.classic}
        return adapters[is_v2]

    async def close(self) -> None:
        """Close both adapters' HTTP clients."""
        await self.v2.close()
        await self.classic.close()

    async def list_projects(self) -> list[Project]:
        """List projects, trying each tier in order.

        Never raises. A tier that fails or returns nothing is logged and the
        next tier is tried.

        Returns:
            Projects from the first tier with results, or an empty list.
        """
        tiers: list[tuple[str, Callable[[], Awaitable[list[Project]]]]] = [
            ("organization projects V2", self.v2.list_projects),
            ("repository classic projects", self.classic.list_repo_projects),
            ("organization classic projects", self.classic.list_org_projects),
        ]

        for name, fetch in tiers:
            try:
                projects = await fetch()
            except Exception as e:
                logger.warning("Tier %s unavailable: %s", name, e)
                continue

            if projects:
                logger.info("Found %d project(s) from %s", len(projects), name)
                return projects
            logger.info("No %s found", name)

        logger.info("No projects found after all tiers")
        return []

    async def get_board(self, project_id: int, is_v2: bool | None = None) -> Board:
        """Fetch a project's board.

        Args:
            project_id: Project number (V2) or REST project id (classic).
            is_v2: Project generation; when unknown, V2 is tried first and
                classic second.

        Returns:
            The assembled Board. A board with no discoverable status field
            has zero columns.

        Raises:
            BoardFetchError: If no generation could produce the board.
        """
        generations = [is_v2] if is_v2 is not None else [True, False]
        errors: list[str] = []

        for generation in generations:
            try:
                return await self.adapter(generation).get_board(project_id)
            except Exception as e:
                label = "V2" if generation else "classic"
                logger.warning("Could not fetch %s board %s: %s", label, project_id, e)
                errors.append(f"{label}: {e}")

        raise BoardFetchError(f"Could not fetch board {project_id} ({'; '.join(errors)})")

    async def move_card(
        self, card_id: str, column_id: str, options: MoveOptions | None = None
    ) -> MutationResult:
        """Move a card to another column.

        V2 boards with a field id get a single-select field update; anything
        else is a classic move with a coarse position. Never raises.
        """
        options = options or MoveOptions()
        adapter = self.adapter(options.uses_field_update)
        try:
            data = await adapter.move_card(str(card_id), str(column_id), options)
        except Exception as e:
            logger.error("Error moving card %s to %s: %s", card_id, column_id, e)
            return MutationResult.failure(f"Error moving card: {e}")
        return MutationResult.ok(data)

    async def create_issue(
        self,
        title: str,
        body: str,
        labels: list[str] | None = None,
        repo: str | None = None,
    ) -> MutationResult:
        """Create an issue. Never raises."""
        try:
            issue = await self.classic.create_issue(title, body, list(labels or []), repo)
        except Exception as e:
            logger.error("Error creating issue %r: %s", title, e)
            return MutationResult.failure(f"Error creating issue: {e}")
        logger.info("Issue created: #%s", issue.get("number"))
        return MutationResult.ok(issue)

    async def create_project(self, name: str, description: str = "") -> MutationResult:
        """Create a classic repository project with default columns. Never raises."""
        try:
            project = await self.classic.create_project(name, description)
        except Exception as e:
            logger.error("Error creating project %r: %s", name, e)
            return MutationResult.failure(f"Error creating project: {e}")
        return MutationResult.ok(project)

    async def list_column_cards(self, column_id: int) -> list[ClassicCard]:
        """List a classic column's raw cards, or an empty list on failure."""
        try:
            return await self.classic.list_cards(column_id)
        except Exception as e:
            logger.error("Error fetching cards for column %s: %s", column_id, e)
            return []

    async def rate_limit(self) -> RateLimit | None:
        """Get the token's core rate limit, or None when unavailable."""
        try:
            return await self.classic.rate_limit()
        except Exception as e:
            logger.error("Error checking rate limit: %s", e)
            return None
