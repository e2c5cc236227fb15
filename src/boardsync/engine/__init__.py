"""Optimistic Mutation Engine - drag-and-drop moves against a versioned board."""

from boardsync.engine.engine import ROLLBACK_MESSAGE, OptimisticMutationEngine, apply_move
from boardsync.engine.exceptions import EngineError, GatewayError, InvalidMoveError
from boardsync.engine.gateway import ActionGateway, HttpActionGateway, RemoteActionGateway
from boardsync.engine.models import DragEnd, DragLocation, DragOutcome, MoveState, Notice
from boardsync.engine.view_model import BoardViewModel

__all__ = [
    "ROLLBACK_MESSAGE",
    "ActionGateway",
    "BoardViewModel",
    "DragEnd",
    "DragLocation",
    "DragOutcome",
    "EngineError",
    "GatewayError",
    "HttpActionGateway",
    "InvalidMoveError",
    "MoveState",
    "Notice",
    "OptimisticMutationEngine",
    "RemoteActionGateway",
    "apply_move",
]
