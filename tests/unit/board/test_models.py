"""Unit tests for board data models."""

import dataclasses

import pytest

from boardsync.board import Board, Card, CardKind, Column, Field, FieldOption, Project

PROJECT = Project(id="PVT_1", title="Roadmap", numeric_id=1, is_v2=True)


def _card(card_id: str) -> Card:
    return Card(id=card_id, kind=CardKind.ISSUE, title=card_id, body="", created_at="2024-01-01")


@pytest.fixture
def board() -> Board:
    return Board(
        project=PROJECT,
        columns=(
            Column(id="opt_todo", name="Todo", cards=(_card("a"), _card("b"))),
            Column(id="opt_done", name="Done", cards=(_card("c"),)),
        ),
    )


@pytest.mark.unit
class TestCardKind:
    """Tests for CardKind.from_item_type."""

    @pytest.mark.parametrize(
        ("item_type", "expected"),
        [
            ("ISSUE", CardKind.ISSUE),
            ("PULL_REQUEST", CardKind.PULL_REQUEST),
            ("DRAFT_ISSUE", CardKind.DRAFT_ISSUE),
            ("REDACTED", CardKind.DRAFT_ISSUE),
            (None, CardKind.DRAFT_ISSUE),
        ],
    )
    def test_maps_item_types(self, item_type: str | None, expected: CardKind) -> None:
        assert CardKind.from_item_type(item_type) is expected


@pytest.mark.unit
class TestBoard:
    """Tests for Board lookups and copies."""

    def test_column_lookup_by_id_and_key(self, board: Board) -> None:
        assert board.column("opt_done").name == "Done"
        assert board.column_by_key("Todo").id == "opt_todo"
        assert board.column("missing") is None

    def test_find_card(self, board: Board) -> None:
        column, index = board.find_card("b")

        assert column.name == "Todo"
        assert index == 1
        assert board.find_card("zzz") is None

    def test_card_count(self, board: Board) -> None:
        assert board.card_count() == 3

    def test_with_columns_returns_new_board(self, board: Board) -> None:
        """Copies leave the original untouched."""
        emptied = board.columns[0].with_cards(())
        updated = board.with_columns((emptied, board.columns[1]))

        assert updated is not board
        assert updated.card_count() == 1
        assert board.card_count() == 3

    def test_board_is_immutable(self, board: Board) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            board.columns = ()  # type: ignore[misc]

    def test_column_key_is_name(self) -> None:
        assert Column(id="123", name="In Progress").key == "In Progress"


@pytest.mark.unit
def test_field_option_lookup() -> None:
    status = Field(
        id="F1",
        name="Status",
        options=(FieldOption(id="o1", name="Todo"), FieldOption(id="o2", name="Done")),
    )

    assert status.option_id("Done") == "o2"
    assert status.option_id("Blocked") is None
