"""Data models for boards.

Every type here is a frozen dataclass holding tuples, so a ``Board`` is a
value: changing it means building a new one.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import StrEnum


class CardKind(StrEnum):
    """What a card is backed by."""

    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    DRAFT_ISSUE = "draft_issue"
    NOTE = "note"

    @classmethod
    def from_item_type(cls, item_type: str | None) -> CardKind:
        """Map a ProjectV2 item type (ISSUE, PULL_REQUEST, ...) to a kind."""
        try:
            return cls((item_type or "").lower())
        except ValueError:
            return cls.DRAFT_ISSUE


@dataclass(frozen=True)
class Project:
    """A remote board container.

    ``numeric_id`` is the value each API family looks the project up by:
    the project number for V2 boards, the REST project id for classic ones.
    """

    id: str
    title: str
    numeric_id: int
    is_v2: bool


@dataclass(frozen=True)
class FieldOption:
    """One option of a single-select field."""

    id: str
    name: str


@dataclass(frozen=True)
class Field:
    """A typed attribute of a V2 project."""

    id: str
    name: str
    data_type: str | None = None
    options: tuple[FieldOption, ...] = ()

    def option_id(self, name: str) -> str | None:
        for option in self.options:
            if option.name == name:
                return option.id
        return None


@dataclass(frozen=True)
class FieldValue:
    """A value an item holds for one field.

    ``name`` is only set for single-select values; text and date values
    carry ``text`` / ``date`` instead.
    """

    field_name: str
    field_id: str | None = None
    name: str | None = None
    option_id: str | None = None
    text: str | None = None
    date: str | None = None


@dataclass(frozen=True)
class ItemContent:
    """The issue, pull request or draft issue behind a V2 item."""

    title: str | None = None
    body: str | None = None
    number: int | None = None
    url: str | None = None
    state: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Item:
    """A raw V2 project item with its field values."""

    id: str
    kind: CardKind
    content: ItemContent = field(default_factory=ItemContent)
    field_values: tuple[FieldValue, ...] = ()


@dataclass(frozen=True)
class Card:
    """A card as rendered on the board."""

    id: str
    kind: CardKind
    title: str
    body: str
    created_at: str
    url: str | None = None
    state: str | None = None
    number: int | None = None


@dataclass(frozen=True)
class Column:
    """A workflow column.

    ``id`` is what the remote needs to target the column (option id for V2,
    REST column id for classic boards). ``key`` is the stable identity.
    """

    id: str
    name: str
    cards: tuple[Card, ...] = ()
    field_id: str | None = None
    project_id: str | None = None
    is_v2: bool = False

    @property
    def key(self) -> str:
        return self.name

    def with_cards(self, cards: tuple[Card, ...]) -> Column:
        return dataclasses.replace(self, cards=cards)


@dataclass(frozen=True)
class Board:
    """A project and its ordered columns."""

    project: Project
    columns: tuple[Column, ...] = ()

    def column(self, column_id: str) -> Column | None:
        """Find a column by id."""
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    def column_by_key(self, key: str) -> Column | None:
        """Find a column by its identity key (value name)."""
        for column in self.columns:
            if column.key == key:
                return column
        return None

    def find_card(self, card_id: str) -> tuple[Column, int] | None:
        """Locate a card, returning its column and index."""
        for column in self.columns:
            for index, card in enumerate(column.cards):
                if card.id == card_id:
                    return column, index
        return None

    def with_columns(self, columns: tuple[Column, ...]) -> Board:
        return dataclasses.replace(self, columns=columns)

    def card_count(self) -> int:
        return sum(len(column.cards) for column in self.columns)
