"""OptimisticMutationEngine - drag-and-drop moves with total rollback."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from boardsync.engine.exceptions import InvalidMoveError
from boardsync.engine.models import DragEnd, DragOutcome, MoveState
from boardsync.remote import MoveOptions, MutationResult, Position

if TYPE_CHECKING:
    from boardsync.board import Board, Card, Column
    from boardsync.engine.gateway import ActionGateway
    from boardsync.engine.view_model import BoardViewModel

logger = logging.getLogger("boardsync.engine")

ROLLBACK_MESSAGE = "Failed to move card. Changes reverted."


def apply_move(
    board: Board,
    source_column_id: str,
    source_index: int,
    dest_column_id: str,
    dest_index: int,
    card_id: str | None = None,
) -> tuple[Board, Card, Column]:
    """Return a new board with one card moved.

    A same-column reorder removes the card and inserts it into the already
    shortened sequence of that column.

    Args:
        board: Board before the move; left untouched.
        source_column_id: Column the card leaves.
        source_index: Index of the card in the source column.
        dest_column_id: Column the card is dropped into.
        dest_index: Index it is dropped at.
        card_id: Expected id of the card at ``source_index``.

    Returns:
        The new board, the moved card and the destination column as it
        appears in the new board.

    Raises:
        InvalidMoveError: If a column or the card cannot be resolved.
    """
    source = board.column(source_column_id)
    dest = board.column(dest_column_id)
    if source is None or dest is None:
        raise InvalidMoveError(f"Unknown column in move {source_column_id} -> {dest_column_id}")
    if not 0 <= source_index < len(source.cards):
        raise InvalidMoveError(f"No card at index {source_index} in column {source.name}")
    if dest_index < 0:
        raise InvalidMoveError(f"Invalid destination index {dest_index}")

    source_cards = list(source.cards)
    card = source_cards.pop(source_index)
    if card_id is not None and card.id != card_id:
        raise InvalidMoveError(f"Card {card_id} is not at index {source_index} in {source.name}")

    if source.id == dest.id:
        source_cards.insert(dest_index, card)
        replaced = {source.id: source.with_cards(tuple(source_cards))}
    else:
        dest_cards = list(dest.cards)
        dest_cards.insert(dest_index, card)
        replaced = {
            source.id: source.with_cards(tuple(source_cards)),
            dest.id: dest.with_cards(tuple(dest_cards)),
        }

    columns = tuple(replaced.get(column.id, column) for column in board.columns)
    return board.with_columns(columns), card, replaced[dest.id]


class OptimisticMutationEngine:
    """Applies drags to the view model before the remote confirms them.

    Each drag goes IDLE -> OPTIMISTIC_APPLIED -> CONFIRMED or ROLLED_BACK.
    On failure the exact pre-move board is restored, never patched.

    Two moves may still complete out of order at the network layer. A
    rollback is skipped when the board shown is no longer the one this drag
    produced, or when the selected project changed.
    """

    def __init__(self, view_model: BoardViewModel, gateway: ActionGateway | None = None) -> None:
        """Initialize the engine.

        Args:
            view_model: View model whose board is mutated.
            gateway: Where moves are persisted; defaults to the view model's.
        """
        self.view_model = view_model
        self.gateway = gateway or view_model.gateway
        self.state = MoveState.IDLE

    async def on_drag_end(self, event: DragEnd) -> DragOutcome:
        """Handle a drag-end event.

        Args:
            event: Source and destination reported by the presentation layer.

        Returns:
            The drag's final state and the board left showing.
        """
        self.state = MoveState.IDLE
        board = self.view_model.board
        if board is None or event.is_noop or event.destination is None:
            return DragOutcome(state=self.state, board=board)

        destination = event.destination
        try:
            optimistic, card, dest = apply_move(
                board,
                event.source.column_id,
                event.source.index,
                destination.column_id,
                destination.index,
                event.card_id,
            )
        except InvalidMoveError as e:
            logger.warning("Ignoring drag: %s", e)
            return DragOutcome(state=self.state, board=board, error=str(e))

        generation = self.view_model.generation
        self.view_model.replace_board(optimistic)
        self.state = MoveState.OPTIMISTIC_APPLIED
        logger.info("Moved card %s to %s at %d (optimistic)", card.id, dest.name, destination.index)

        options = MoveOptions(
            position=Position.for_index(destination.index),
            is_v2=dest.is_v2,
            field_id=dest.field_id if dest.is_v2 else None,
            project_id=dest.project_id if dest.is_v2 else None,
        )

        self.view_model.mark_pending(dest.key)
        try:
            result = await self.gateway.move_card(card.id, dest.id, options)
        except Exception as e:
            logger.exception("Gateway raised while moving card %s", card.id)
            result = MutationResult.failure(f"Error moving card: {e}")
        finally:
            self.view_model.clear_pending(dest.key)

        if result.success:
            self.state = MoveState.CONFIRMED
            logger.info("Move of card %s confirmed", card.id)
            return DragOutcome(state=self.state, board=self.view_model.board)

        logger.error("Move of card %s failed: %s", card.id, result.error)
        self.state = MoveState.ROLLED_BACK
        if not self.view_model.is_current(generation):
            logger.info("Project changed while card %s was in flight, dropping result", card.id)
        elif self.view_model.board is not optimistic:
            logger.info("Board replaced while card %s was in flight, not rolling back", card.id)
            self.view_model.show_notice(ROLLBACK_MESSAGE)
        else:
            self.view_model.replace_board(board)
            self.view_model.show_notice(ROLLBACK_MESSAGE)

        return DragOutcome(state=self.state, board=self.view_model.board, error=result.error)
