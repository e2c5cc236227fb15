"""Data models for the mutation engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boardsync.board import Board


class MoveState(StrEnum):
    """Per-drag state."""

    IDLE = "idle"
    OPTIMISTIC_APPLIED = "optimistic_applied"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class DragLocation:
    """Where a card was picked up or dropped."""

    column_id: str
    index: int


@dataclass(frozen=True)
class DragEnd:
    """A drag-end event from the presentation layer.

    Attributes:
        source: Column and index the card left.
        destination: Column and index it was dropped at; None when dropped
            outside any column.
        card_id: Id of the dragged card, checked against the source index
            when given.
    """

    source: DragLocation
    destination: DragLocation | None
    card_id: str | None = None

    @property
    def is_noop(self) -> bool:
        return self.destination is None or self.destination == self.source


@dataclass(frozen=True)
class DragOutcome:
    """Result of handling one drag.

    Attributes:
        state: Final state of the drag.
        board: Board shown after the drag settled.
        error: Why the move was rejected or ignored.
    """

    state: MoveState
    board: Board | None = None
    error: str | None = None


@dataclass(frozen=True)
class Notice:
    """A dismissible banner shown to the user."""

    id: int
    message: str
    level: str = "error"
