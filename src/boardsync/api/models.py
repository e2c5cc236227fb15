"""Pydantic models for the board API."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from boardsync.assembler import ClassicCard
from boardsync.board import Board, Card, CardKind, Column, Project
from boardsync.remote import RateLimit


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Board models


class ProjectResponse(CamelModel):
    """Response model for a project."""

    id: str
    title: str
    numeric_id: int
    is_v2: bool = Field(alias="isV2")


class CardResponse(CamelModel):
    """Response model for a card."""

    id: str
    kind: str
    title: str
    body: str
    created_at: str
    url: str | None = None
    state: str | None = None
    number: int | None = None


class ColumnResponse(CamelModel):
    """Response model for a column and its cards."""

    id: str
    name: str
    field_id: str | None = None
    project_id: str | None = None
    is_v2: bool = Field(default=False, alias="isV2")
    cards: list[CardResponse] = Field(default_factory=list)


class ClassicCardResponse(CamelModel):
    """Response model for a raw classic card."""

    id: int
    note: str | None = None
    content_url: str | None = None
    created_at: str | None = None


def project_to_response(project: Project) -> ProjectResponse:
    """Convert a Project to ProjectResponse."""
    return ProjectResponse(
        id=project.id,
        title=project.title,
        numeric_id=project.numeric_id,
        is_v2=project.is_v2,
    )


def card_to_response(card: Card) -> CardResponse:
    """Convert a Card to CardResponse."""
    return CardResponse(
        id=card.id,
        kind=str(card.kind),
        title=card.title,
        body=card.body,
        created_at=card.created_at,
        url=card.url,
        state=card.state,
        number=card.number,
    )


def column_to_response(column: Column) -> ColumnResponse:
    """Convert a Column to ColumnResponse."""
    return ColumnResponse(
        id=column.id,
        name=column.name,
        field_id=column.field_id,
        project_id=column.project_id,
        is_v2=column.is_v2,
        cards=[card_to_response(card) for card in column.cards],
    )


def classic_card_to_response(card: ClassicCard) -> ClassicCardResponse:
    """Convert a ClassicCard to ClassicCardResponse."""
    return ClassicCardResponse(
        id=card.id,
        note=card.note,
        content_url=card.content_url,
        created_at=card.created_at,
    )


def project_from_response(data: ProjectResponse) -> Project:
    """Convert a ProjectResponse back to a Project."""
    return Project(id=data.id, title=data.title, numeric_id=data.numeric_id, is_v2=data.is_v2)


def board_from_response(project: Project, data: ColumnsResponse) -> Board:
    """Rebuild a Board from a columns response."""
    columns = tuple(
        Column(
            id=column.id,
            name=column.name,
            field_id=column.field_id,
            project_id=column.project_id,
            is_v2=column.is_v2,
            cards=tuple(
                Card(
                    id=card.id,
                    kind=CardKind(card.kind),
                    title=card.title,
                    body=card.body,
                    created_at=card.created_at,
                    url=card.url,
                    state=card.state,
                    number=card.number,
                )
                for card in column.cards
            ),
        )
        for column in data.columns
    )
    return Board(project=project, columns=columns)


# Envelopes


class ProjectsResponse(BaseModel):
    """Response for the project list."""

    projects: list[ProjectResponse] = Field(default_factory=list)
    message: str | None = None
    error: str | None = None


class ColumnsResponse(BaseModel):
    """Response for a project's columns."""

    columns: list[ColumnResponse] = Field(default_factory=list)
    message: str | None = None
    error: str | None = None


class CardsResponse(BaseModel):
    """Response for a classic column's cards."""

    cards: list[ClassicCardResponse] = Field(default_factory=list)
    error: str | None = None


class EmptyBoardResponse(BaseModel):
    """Response for failed reads. The lists are always present."""

    error: str = "Unauthorized"
    projects: list[ProjectResponse] = Field(default_factory=list)
    columns: list[ColumnResponse] = Field(default_factory=list)


class ActionResponse(BaseModel):
    """Response for a successful action."""

    success: bool = True
    data: Any = None


class ErrorResponse(BaseModel):
    """Response for a failed action."""

    error: str
    success: bool = False


class RateLimitResponse(BaseModel):
    """Response model for the token's rate limit."""

    limit: int
    remaining: int
    reset: int
    used: int


def rate_limit_to_response(rate: RateLimit) -> RateLimitResponse:
    """Convert a RateLimit to RateLimitResponse."""
    return RateLimitResponse(
        limit=rate.limit, remaining=rate.remaining, reset=rate.reset, used=rate.used
    )


# Action models


class MoveCardAction(CamelModel):
    """Request body for moving a card."""

    action: Literal["moveCard"]
    card_id: str | int
    column_id: str | int
    position: str = Field(default="top", pattern=r"^(top|bottom|after:\d+)$")
    is_v2: bool = Field(default=False, alias="isV2")
    field_id: str | None = None
    project_id: str | None = None


class CreateIssueAction(CamelModel):
    """Request body for creating an issue."""

    action: Literal["createIssue"]
    title: str = Field(..., min_length=1, max_length=256)
    body: str = ""
    labels: list[str] = Field(default_factory=list)
    repo: str | None = Field(default=None, pattern=r"^[\w\-\.]+$")


BoardAction = Annotated[MoveCardAction | CreateIssueAction, Field(discriminator="action")]

ACTIONS = ("moveCard", "createIssue")


class ProjectCreate(BaseModel):
    """Request model for creating a classic project."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=1024)
