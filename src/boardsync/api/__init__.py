"""REST API for boardsync."""

from boardsync.api.app import app, create_app
from boardsync.api.models import (
    ActionResponse,
    ColumnsResponse,
    ErrorResponse,
    ProjectsResponse,
)

__all__ = [
    "ActionResponse",
    "ColumnsResponse",
    "ErrorResponse",
    "ProjectsResponse",
    "app",
    "create_app",
]
