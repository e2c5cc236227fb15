"""Board assembly for both project generations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from boardsync.assembler.models import ClassicCard, ClassicColumn
from boardsync.board import Board, Card, CardKind, Column, Item, Project
from boardsync.discovery import DiscoveredField

logger = logging.getLogger("boardsync.assembler")

IssueFetcher = Callable[[str], Awaitable[dict[str, Any]]]


def _now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def card_from_item(item: Item, now: str | None = None) -> Card:
    """Synthesize a card from a V2 item's content."""
    content = item.content
    number = content.number
    return Card(
        id=item.id,
        kind=item.kind,
        title=content.title or f"Item #{number if number is not None else ''}",
        body=content.body or "",
        created_at=content.created_at or now or _now(),
        url=content.url,
        state=content.state,
        number=number,
    )


def assemble_v2_board(
    project: Project,
    discovered: DiscoveredField | None,
    items: Sequence[Item],
    project_node_id: str | None = None,
) -> Board:
    """Build a V2 board from the discovered status field.

    One column per distinct value in first-seen order. Items without a value
    for the status field are left off the board.

    Args:
        project: The project being rendered.
        discovered: Result of status discovery; None yields zero columns.
        items: Project items.
        project_node_id: GraphQL node id of the project, stored on columns
            so moves can target it.

    Returns:
        The assembled Board.
    """
    if discovered is None:
        logger.info("No status field for project %s, board has no columns", project.title)
        return Board(project=project)

    node_id = project_node_id or project.id
    cards_by_value: dict[str, list[Card]] = {value: [] for value in discovered.values}
    now = _now()
    dropped = 0

    for item in items:
        value = next(
            (
                fv.name
                for fv in item.field_values
                if fv.field_name == discovered.field_name and fv.name
            ),
            None,
        )
        if value is None or value not in cards_by_value:
            dropped += 1
            continue
        cards_by_value[value].append(card_from_item(item, now))

    columns = tuple(
        Column(
            id=discovered.option_ids.get(value, value),
            name=value,
            cards=tuple(cards),
            field_id=discovered.field_id,
            project_id=node_id,
            is_v2=True,
        )
        for value, cards in cards_by_value.items()
    )

    for column in columns:
        logger.debug("Column %s: %d card(s)", column.name, len(column.cards))
    if dropped:
        logger.debug(
            "%d item(s) without a %s value left off the board", dropped, discovered.field_name
        )

    return Board(project=project, columns=columns)


def _note_card(card: ClassicCard) -> Card:
    note = card.note or ""
    first_line = note.strip().splitlines()[0] if note.strip() else ""
    return Card(
        id=str(card.id),
        kind=CardKind.NOTE if not card.content_url else CardKind.ISSUE,
        title=first_line or f"Card #{card.id}",
        body=note,
        created_at=card.created_at or _now(),
        url=card.content_url,
    )


async def _enrich_card(card: ClassicCard, fetch_issue: IssueFetcher) -> Card:
    if not card.content_url:
        return _note_card(card)

    try:
        issue = await fetch_issue(card.content_url)
    except Exception as e:
        # A single card's lookup failure must not abort the board
        logger.warning("Could not load issue for card %s (%s): %s", card.id, card.content_url, e)
        return _note_card(card)

    return Card(
        id=str(card.id),
        kind=CardKind.PULL_REQUEST if issue.get("pull_request") else CardKind.ISSUE,
        title=issue.get("title") or f"Card #{card.id}",
        body=issue.get("body") or "",
        created_at=issue.get("created_at") or card.created_at or _now(),
        url=issue.get("html_url") or card.content_url,
        state=issue.get("state"),
        number=issue.get("number"),
    )


async def assemble_classic_board(
    project: Project,
    columns: Sequence[ClassicColumn],
    fetch_issue: IssueFetcher,
) -> Board:
    """Build a classic board, mapping columns and cards 1:1.

    Cards that reference an issue are enriched from it concurrently.

    Args:
        project: The project being rendered.
        columns: Classic columns with their raw cards.
        fetch_issue: Coroutine returning the issue JSON for a content URL.

    Returns:
        The assembled Board.
    """
    built: list[Column] = []
    for column in columns:
        cards = await asyncio.gather(*(_enrich_card(card, fetch_issue) for card in column.cards))
        built.append(
            Column(
                id=str(column.id),
                name=column.name,
                cards=tuple(cards),
                project_id=str(project.numeric_id),
            )
        )
        logger.debug("Column %s: %d card(s)", column.name, len(cards))

    return Board(project=project, columns=tuple(built))
