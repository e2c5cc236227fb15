"""Board endpoints - project listing, columns and card actions."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, TypeAdapter, ValidationError

from boardsync.api.dependencies import RemoteClientDep, SessionDep
from boardsync.api.models import (
    ACTIONS,
    ActionResponse,
    BoardAction,
    CardsResponse,
    ColumnsResponse,
    CreateIssueAction,
    EmptyBoardResponse,
    ErrorResponse,
    MoveCardAction,
    ProjectCreate,
    ProjectsResponse,
    classic_card_to_response,
    column_to_response,
    project_to_response,
    rate_limit_to_response,
)
from boardsync.remote import BoardFetchError, MoveOptions, MutationResult, RemoteBoardClient

logger = logging.getLogger("boardsync.api.board")

router = APIRouter(prefix="/board", tags=["board"])

_action_adapter: TypeAdapter[MoveCardAction | CreateIssueAction] = TypeAdapter(BoardAction)


def _json(model: BaseModel, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=model.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def _unauthorized() -> JSONResponse:
    return _json(EmptyBoardResponse(), status.HTTP_401_UNAUTHORIZED)


def _error(message: str, status_code: int) -> JSONResponse:
    return _json(ErrorResponse(error=message), status_code)


def _parse_id(value: str | None, name: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer") from None


@router.get("")
async def get_board(
    session: SessionDep,
    client: RemoteClientDep,
    project_id: Annotated[str | None, Query(alias="projectId")] = None,
    column_id: Annotated[str | None, Query(alias="columnId")] = None,
    is_v2: Annotated[bool | None, Query(alias="isV2")] = None,
) -> JSONResponse:
    """List projects, a project's columns, or a classic column's cards.

    Without parameters the project list is returned; with ``projectId`` the
    project's columns; with ``columnId`` the raw cards of a classic column.
    """
    if session is None:
        return _unauthorized()

    try:
        project_number = _parse_id(project_id, "projectId")
        column_number = _parse_id(column_id, "columnId")
    except ValueError as e:
        return _json(ColumnsResponse(error=str(e)), status.HTTP_400_BAD_REQUEST)

    try:
        if column_number is not None:
            cards = await client.list_column_cards(column_number)
            return _json(CardsResponse(cards=[classic_card_to_response(c) for c in cards]))

        if project_number is None:
            projects = await client.list_projects()
            return _json(
                ProjectsResponse(
                    projects=[project_to_response(p) for p in projects],
                    message=None if projects else "No project boards found",
                )
            )

        try:
            board = await client.get_board(project_number, is_v2)
        except BoardFetchError as e:
            logger.error("Error fetching columns for project %s: %s", project_number, e)
            return _json(
                ColumnsResponse(error="Error fetching columns"), status.HTTP_502_BAD_GATEWAY
            )

        return _json(
            ColumnsResponse(
                columns=[column_to_response(c) for c in board.columns],
                message=None if board.columns else "No columns found for this project",
            )
        )
    except Exception:
        logger.exception("Error in board API")
        return _json(
            EmptyBoardResponse(error="Internal server error"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


async def _perform(
    action: MoveCardAction | CreateIssueAction, client: RemoteBoardClient
) -> MutationResult:
    match action:
        case MoveCardAction():
            options = MoveOptions(
                position=action.position,
                is_v2=action.is_v2,
                field_id=action.field_id,
                project_id=action.project_id,
            )
            return await client.move_card(str(action.card_id), str(action.column_id), options)
        case CreateIssueAction():
            return await client.create_issue(action.title, action.body, action.labels, action.repo)


@router.post("")
async def post_board(
    request: Request, session: SessionDep, client: RemoteClientDep
) -> JSONResponse:
    """Perform a board action (``moveCard`` or ``createIssue``)."""
    if session is None:
        return _error("Unauthorized", status.HTTP_401_UNAUTHORIZED)

    try:
        body: Any = await request.json()
    except ValueError:
        return _error("Request body must be JSON", status.HTTP_400_BAD_REQUEST)

    name = body.get("action") if isinstance(body, dict) else None
    if name not in ACTIONS:
        return _error("Invalid action", status.HTTP_400_BAD_REQUEST)

    try:
        action = _action_adapter.validate_python(body)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'][1:])}: {err['msg']}" for err in e.errors()
        )
        return _error(f"Invalid {name} payload: {details}", status.HTTP_400_BAD_REQUEST)

    try:
        result = await _perform(action, client)
    except Exception:
        logger.exception("Error performing %s", name)
        return _error("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not result.success:
        return _error(result.error or f"Error performing {name}", status.HTTP_502_BAD_GATEWAY)
    return _json(ActionResponse(data=result.data))


@router.post("/projects")
async def create_project(
    project: ProjectCreate, session: SessionDep, client: RemoteClientDep
) -> JSONResponse:
    """Create a classic repository project with default columns."""
    if session is None:
        return _error("Unauthorized", status.HTTP_401_UNAUTHORIZED)

    result = await client.create_project(project.name, project.description)
    if not result.success:
        return _error(result.error or "Error creating project", status.HTTP_502_BAD_GATEWAY)
    return _json(ActionResponse(data=result.data), status.HTTP_201_CREATED)


@router.get("/rate-limit")
async def get_rate_limit(session: SessionDep, client: RemoteClientDep) -> JSONResponse:
    """Get the upstream token's rate limit."""
    if session is None:
        return _error("Unauthorized", status.HTTP_401_UNAUTHORIZED)

    rate = await client.rate_limit()
    if rate is None:
        return _error("Rate limit unavailable", status.HTTP_502_BAD_GATEWAY)
    return _json(rate_limit_to_response(rate))
