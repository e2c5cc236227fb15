"""Custom exceptions for the Remote Board Client."""


class RemoteBoardError(Exception):
    """Base exception for remote board errors."""


class GraphQLError(RemoteBoardError):
    """A GraphQL request failed at transport level or returned errors."""


class RestError(RemoteBoardError):
    """A REST request failed at transport level or returned an error status.

    Attributes:
        status_code: HTTP status, when a response was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProjectNotFoundError(RemoteBoardError):
    """Project does not exist or is not visible with the configured token."""


class BoardFetchError(RemoteBoardError):
    """No API generation could produce a board for the project."""
