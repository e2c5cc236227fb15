"""Data models for the Remote Board Client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from boardsync.board import Field, Item


class Position(StrEnum):
    """Coarse card position accepted by the classic move call."""

    TOP = "top"
    BOTTOM = "bottom"

    @classmethod
    def for_index(cls, index: int) -> Position:
        return cls.TOP if index == 0 else cls.BOTTOM


@dataclass(frozen=True)
class MoveOptions:
    """Options for moving a card.

    Attributes:
        position: "top", "bottom" or "after:<card_id>" (classic boards only).
        is_v2: Whether the board is a Projects V2 board.
        field_id: Single-select field to update on V2 boards.
        project_id: GraphQL node id of the V2 project; resolved from the
            item when missing.
    """

    position: str = Position.TOP
    is_v2: bool = False
    field_id: str | None = None
    project_id: str | None = None

    @property
    def uses_field_update(self) -> bool:
        return self.is_v2 and bool(self.field_id)


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a remote mutation. Failures are values, not exceptions."""

    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> MutationResult:
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str) -> MutationResult:
        return cls(success=False, error=error)


@dataclass(frozen=True)
class ProjectSnapshot:
    """Everything fetched for a V2 project in one query."""

    node_id: str
    number: int
    title: str
    url: str | None = None
    closed: bool = False
    fields: tuple[Field, ...] = ()
    items: tuple[Item, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RateLimit:
    """Core REST rate limit state."""

    limit: int
    remaining: int
    reset: int
    used: int = 0
