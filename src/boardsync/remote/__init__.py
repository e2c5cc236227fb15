"""Remote Board Client - Projects V2 and classic project boards on GitHub."""

from boardsync.remote.client import BoardAdapter, RemoteBoardClient
from boardsync.remote.exceptions import (
    BoardFetchError,
    GraphQLError,
    ProjectNotFoundError,
    RemoteBoardError,
    RestError,
)
from boardsync.remote.graphql import ProjectsV2Adapter
from boardsync.remote.models import (
    MoveOptions,
    MutationResult,
    Position,
    ProjectSnapshot,
    RateLimit,
)
from boardsync.remote.rest import DEFAULT_COLUMNS, ClassicProjectsAdapter

__all__ = [
    "DEFAULT_COLUMNS",
    "BoardAdapter",
    "BoardFetchError",
    "ClassicProjectsAdapter",
    "GraphQLError",
    "MoveOptions",
    "MutationResult",
    "Position",
    "ProjectNotFoundError",
    "ProjectSnapshot",
    "ProjectsV2Adapter",
    "RateLimit",
    "RemoteBoardClient",
    "RemoteBoardError",
    "RestError",
]
