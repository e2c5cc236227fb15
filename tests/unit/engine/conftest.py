"""Fixtures for engine tests."""

import pytest

from boardsync.board import Board, Card, CardKind, Column, Project
from boardsync.remote import MoveOptions, MutationResult

V2_PROJECT = Project(id="PVT_1", title="Roadmap", numeric_id=1, is_v2=True)


def make_card(card_id: str) -> Card:
    return Card(
        id=card_id,
        kind=CardKind.ISSUE,
        title=f"Card {card_id}",
        body="",
        created_at="2024-01-01T00:00:00Z",
    )


def make_board(project: Project = V2_PROJECT) -> Board:
    """To Do holds A and B, Doing holds C, Done is empty."""

    def column(option_id: str, name: str, *card_ids: str) -> Column:
        return Column(
            id=option_id,
            name=name,
            cards=tuple(make_card(c) for c in card_ids),
            field_id="PVTSSF_1",
            project_id=project.id,
            is_v2=True,
        )

    return Board(
        project=project,
        columns=(
            column("opt_todo", "To Do", "A", "B"),
            column("opt_doing", "Doing", "C"),
            column("opt_done", "Done"),
        ),
    )


class FakeGateway:
    """In-memory ActionGateway recording calls."""

    def __init__(self, board: Board | None = None, projects: list[Project] | None = None):
        self.board = board or make_board()
        self.projects = projects if projects is not None else [V2_PROJECT]
        self.move_result = MutationResult.ok({})
        self.issue_result = MutationResult.ok({"number": 1})
        self.moves: list[tuple[str, str, MoveOptions]] = []
        self.issues: list[tuple[str, str, list[str], str | None]] = []
        self.board_requests = 0
        self.board_error: Exception | None = None
        self.before_move_returns = None
        self.move_error: Exception | None = None

    async def list_projects(self) -> list[Project]:
        return list(self.projects)

    async def get_board(self, project: Project) -> Board:
        self.board_requests += 1
        if self.board_error is not None:
            raise self.board_error
        return self.board

    async def move_card(self, card_id: str, column_id: str, options: MoveOptions) -> MutationResult:
        self.moves.append((card_id, column_id, options))
        if self.before_move_returns is not None:
            await self.before_move_returns()
        if self.move_error is not None:
            raise self.move_error
        return self.move_result

    async def create_issue(
        self, title: str, body: str, labels: list[str], repo: str | None = None
    ) -> MutationResult:
        self.issues.append((title, body, labels, repo))
        return self.issue_result


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def board_factory():
    """Build fresh copies of the three-column test board."""
    return make_board
