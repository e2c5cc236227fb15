"""BoardViewModel - the explicit, versioned "current board" state."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import TYPE_CHECKING

from boardsync.board import Board
from boardsync.config import DEFAULT_ERROR_NOTICE_SECONDS, DEFAULT_NOTICE_SECONDS
from boardsync.engine.exceptions import GatewayError
from boardsync.engine.models import Notice

if TYPE_CHECKING:
    from boardsync.board import Project
    from boardsync.config import Settings
    from boardsync.engine.gateway import ActionGateway
    from boardsync.remote import MutationResult

logger = logging.getLogger("boardsync.engine.view_model")


class BoardViewModel:
    """Holds the selected project, its board and the visible notice.

    ``generation`` changes whenever the selection changes and ``version``
    whenever the board is replaced. Async completions compare the generation
    they were issued under and are dropped when it is stale.
    """

    def __init__(
        self,
        gateway: ActionGateway,
        notice_seconds: float = DEFAULT_NOTICE_SECONDS,
        error_notice_seconds: float = DEFAULT_ERROR_NOTICE_SECONDS,
    ) -> None:
        """Initialize the view model.

        Args:
            gateway: Where board actions are sent.
            notice_seconds: How long a notice stays before clearing itself.
            error_notice_seconds: Lifetime of load and create failure notices.
        """
        self.gateway = gateway
        self.notice_seconds = notice_seconds
        self.error_notice_seconds = error_notice_seconds
        self.projects: tuple[Project, ...] = ()
        self.selected: Project | None = None
        self.generation = 0
        self.version = 0
        self.loading = False
        self.notice: Notice | None = None
        self._board: Board | None = None
        self._pending: dict[str, int] = {}
        self._notice_ids = itertools.count(1)
        self._notice_handle: asyncio.TimerHandle | None = None

    @classmethod
    def from_settings(cls, gateway: ActionGateway, settings: Settings) -> BoardViewModel:
        return cls(
            gateway,
            notice_seconds=settings.notice_seconds,
            error_notice_seconds=settings.error_notice_seconds,
        )

    @property
    def board(self) -> Board | None:
        return self._board

    @property
    def pending_columns(self) -> frozenset[str]:
        """Keys of columns with a move in flight."""
        return frozenset(key for key, count in self._pending.items() if count > 0)

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def replace_board(self, board: Board | None, generation: int | None = None) -> bool:
        """Swap in a whole new board.

        Args:
            board: The new board value.
            generation: Generation the board was fetched under; a stale one
                is discarded.

        Returns:
            Whether the board was applied.
        """
        if generation is not None and not self.is_current(generation):
            logger.debug("Discarding board from stale generation %d", generation)
            return False
        self._board = board
        self.version += 1
        return True

    def mark_pending(self, column_key: str) -> None:
        self._pending[column_key] = self._pending.get(column_key, 0) + 1

    def clear_pending(self, column_key: str) -> None:
        remaining = self._pending.get(column_key, 0) - 1
        if remaining > 0:
            self._pending[column_key] = remaining
        else:
            self._pending.pop(column_key, None)

    def show_notice(
        self, message: str, level: str = "error", seconds: float | None = None
    ) -> Notice:
        """Show a notice that clears itself after ``seconds``, or ``notice_seconds``."""
        if self._notice_handle is not None:
            self._notice_handle.cancel()

        notice = Notice(id=next(self._notice_ids), message=message, level=level)
        self.notice = notice
        loop = asyncio.get_running_loop()
        self._notice_handle = loop.call_later(
            self.notice_seconds if seconds is None else seconds, self._expire_notice, notice.id
        )
        return notice

    def dismiss_notice(self) -> None:
        if self._notice_handle is not None:
            self._notice_handle.cancel()
            self._notice_handle = None
        self.notice = None

    def _expire_notice(self, notice_id: int) -> None:
        if self.notice is not None and self.notice.id == notice_id:
            self.notice = None
            self._notice_handle = None

    async def load_projects(self) -> tuple[Project, ...]:
        """Load the project list and select the first project if none is."""
        generation = self.generation
        self.loading = True
        try:
            projects = await self.gateway.list_projects()
        except GatewayError as e:
            logger.error("Error loading projects: %s", e)
            self.show_notice(f"Failed to load projects: {e}", seconds=self.error_notice_seconds)
            projects = []
        finally:
            self.loading = False

        if not self.is_current(generation):
            return self.projects

        self.projects = tuple(projects)
        if self.selected is None and self.projects:
            await self.select_project(self.projects[0])
        return self.projects

    async def select_project(self, project: Project) -> Board | None:
        """Select a project, discarding the previous board, and load it."""
        self.generation += 1
        self.selected = project
        self.replace_board(None)
        self._pending.clear()
        logger.info("Selected project %s (generation %d)", project.title, self.generation)
        return await self.refresh()

    async def refresh(self) -> Board | None:
        """Rebuild the selected project's board from the remote."""
        project = self.selected
        if project is None:
            return None

        generation = self.generation
        self.loading = True
        try:
            board = await self.gateway.get_board(project)
        except GatewayError as e:
            logger.error("Error loading board for %s: %s", project.title, e)
            if self.is_current(generation):
                self.show_notice(f"Failed to load board: {e}", seconds=self.error_notice_seconds)
            board = Board(project=project)
        finally:
            self.loading = False

        self.replace_board(board, generation)
        return self._board

    async def create_issue(
        self, title: str, body: str, labels: list[str] | None = None, repo: str | None = None
    ) -> MutationResult:
        """Create an issue and refresh the board when it succeeds."""
        generation = self.generation
        result = await self.gateway.create_issue(title, body, list(labels or []), repo)

        if not result.success:
            logger.error("Error creating issue %r: %s", title, result.error)
            if self.is_current(generation):
                self.show_notice("Failed to create issue", seconds=self.error_notice_seconds)
            return result

        if self.is_current(generation):
            await self.refresh()
        return result
