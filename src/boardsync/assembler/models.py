"""Data models for classic (REST) project resources."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ClassicCard:
    """A classic project card as the REST API returns it."""

    id: int
    note: str | None = None
    content_url: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class ClassicColumn:
    """A classic project column with its cards."""

    id: int
    name: str
    cards: tuple[ClassicCard, ...] = ()
