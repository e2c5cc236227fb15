"""Board data model - projects, columns and cards shared by every component."""

from boardsync.board.models import (
    Board,
    Card,
    CardKind,
    Column,
    Field,
    FieldOption,
    FieldValue,
    Item,
    ItemContent,
    Project,
)

__all__ = [
    "Board",
    "Card",
    "CardKind",
    "Column",
    "Field",
    "FieldOption",
    "FieldValue",
    "Item",
    "ItemContent",
    "Project",
]
